"""Tests for file uploads, downloads and the storage helpers."""

import re
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from skillshub.errors import InfrastructureError, ValidationError
from skillshub.models import EmployerProfile, FileObject, User
from skillshub.services.storage import (
    UnconfiguredObjectStore,
    bucket_key_prefix,
    build_bucket_key,
    sanitize_filename,
    validate_upload,
)

PDF = b"%PDF-1.4 test document"
PNG = b"\x89PNG\r\n\x1a\n fake image"


class TestUploadEndpoint:
    """Tests for POST /api/upload."""

    def test_upload_cv(self, client, db, seeker, login, store):
        login(seeker)
        response = client.post(
            "/api/upload",
            files={"file": ("My CV (final).pdf", PDF, "application/pdf")},
            data={"fileType": "cv"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["sizeBytes"] == len(PDF)
        assert re.fullmatch(r"applications/cv/\d+-[0-9a-f]{16}-My_CV__final_\.pdf", data["bucketKey"])

        assert store.objects[data["bucketKey"]] == (PDF, "application/pdf")
        file = db.get(FileObject, data["fileId"])
        assert file.created_by_id == seeker.id
        assert file.etag == '"fake-etag"'

    def test_default_kind_is_other(self, client, seeker, login):
        login(seeker)
        response = client.post("/api/upload", files={"file": ("notes.txt", b"hello", "text/plain")})
        assert response.status_code == 200
        assert response.json()["bucketKey"].startswith("misc/")

    def test_rejects_unknown_kind(self, client, seeker, login):
        login(seeker)
        response = client.post(
            "/api/upload",
            files={"file": ("a.pdf", PDF, "application/pdf")},
            data={"fileType": "virus"},
        )
        assert response.status_code == 400

    def test_rejects_disallowed_type(self, client, seeker, login, store):
        login(seeker)
        response = client.post(
            "/api/upload",
            files={"file": ("run.exe", b"MZ", "application/x-msdownload")},
            data={"fileType": "cv"},
        )
        assert response.status_code == 400
        assert "not allowed" in response.json()["detail"]
        assert store.objects == {}

    def test_rejects_empty_file(self, client, seeker, login):
        login(seeker)
        response = client.post("/api/upload", files={"file": ("empty.pdf", b"", "application/pdf")})
        assert response.status_code == 400
        assert response.json()["detail"] == "File is empty"

    def test_rejects_oversized_file(self, client, seeker, login, settings):
        login(seeker)
        big = b"x" * (settings.max_file_size + 1)
        response = client.post("/api/upload", files={"file": ("big.pdf", big, "application/pdf")})
        assert response.status_code == 400
        assert "5MB" in response.json()["detail"]

    def test_requires_login(self, client):
        response = client.post("/api/upload", files={"file": ("a.pdf", PDF, "application/pdf")})
        assert response.status_code == 401

    def test_storage_not_configured(self, client, seeker, login):
        from skillshub.main import app
        from skillshub.services.storage import get_object_store

        app.dependency_overrides[get_object_store] = lambda: UnconfiguredObjectStore()
        login(seeker)
        response = client.post("/api/upload", files={"file": ("a.pdf", PDF, "application/pdf")})
        assert response.status_code == 500
        assert "not configured" in response.json()["detail"]

    def test_download_redirects(self, client, seeker, login):
        login(seeker)
        file_id = client.post(
            "/api/upload", files={"file": ("a.pdf", PDF, "application/pdf")}
        ).json()["fileId"]

        response = client.get(f"/api/files/{file_id}", follow_redirects=False)
        assert response.status_code == 307
        assert response.headers["location"].startswith("https://files.example.com/misc/")

        assert client.get("/api/files/missing", follow_redirects=False).status_code == 404


class TestImageUploads:
    """Tests for profile photos and company logos."""

    def test_profile_photo(self, client, db, seeker, login):
        login(seeker)
        response = client.post("/api/profile/photo", files={"file": ("me.png", PNG, "image/png")})
        assert response.status_code == 200
        data = response.json()
        assert data["bucketKey"].startswith("profiles/photos/")

        db.expire_all()
        assert db.get(User, seeker.id).profile_photo_file_id == data["fileId"]

        photo = client.get(f"/api/profile/photo/{data['fileId']}", follow_redirects=False)
        assert photo.status_code == 307

    def test_photo_must_be_image(self, client, seeker, login):
        login(seeker)
        response = client.post("/api/profile/photo", files={"file": ("cv.pdf", PDF, "application/pdf")})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid file type. Only JPEG, PNG, and WebP images are allowed."

    def test_company_logo(self, client, db, employer, login):
        login(employer)
        response = client.post("/api/profile/company-logo", files={"file": ("logo.webp", PNG, "image/webp")})
        assert response.status_code == 200
        assert response.json()["bucketKey"].startswith("companies/logos/")

        db.expire_all()
        profile = db.query(EmployerProfile).filter(EmployerProfile.user_id == employer.id).one()
        assert profile.company_logo_file_id == response.json()["fileId"]

    def test_company_logo_requires_employer(self, client, seeker, login):
        login(seeker)
        response = client.post("/api/profile/company-logo", files={"file": ("logo.png", PNG, "image/png")})
        assert response.status_code == 403


class TestStorageHelpers:
    def test_bucket_prefixes(self):
        assert bucket_key_prefix("cv") == "applications/cv"
        assert bucket_key_prefix("cover-letter") == "applications/cover-letters"
        assert bucket_key_prefix("resume") == "profiles/resumes"
        assert bucket_key_prefix("something-else") == "misc"

    def test_sanitize_filename(self):
        assert sanitize_filename("my résumé 2024.pdf") == "my_r_sum__2024.pdf"
        assert sanitize_filename("") == "file"
        assert len(sanitize_filename("a" * 300 + ".pdf")) == 100

    def test_build_bucket_key_is_unique(self):
        keys = {build_bucket_key("misc", "a.pdf") for _ in range(20)}
        assert len(keys) == 20

    def test_validate_upload(self):
        validate_upload(10, "application/pdf")
        with pytest.raises(ValidationError):
            validate_upload(0, "application/pdf")
        with pytest.raises(ValidationError):
            validate_upload(10, None)
        with pytest.raises(ValidationError, match="2MB"):
            validate_upload(3 * 1024 * 1024, "application/pdf", max_size=2 * 1024 * 1024)

    def test_unconfigured_store_raises(self):
        with pytest.raises(InfrastructureError):
            UnconfiguredObjectStore().put("k", b"x", "text/plain")


class TestUploadCommitFailure:
    """Stored objects are removed when the files row cannot be committed."""

    def _failing_commit(self, db):
        return patch.object(db, "commit", side_effect=OperationalError("INSERT", {}, Exception("disk full")))

    def test_upload_removes_object(self, client, db, seeker, login, store):
        login(seeker)
        with self._failing_commit(db):
            response = client.post(
                "/api/upload",
                files={"file": ("cv.pdf", PDF, "application/pdf")},
                data={"fileType": "cv"},
            )
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to save file"
        assert store.objects == {}
        assert db.query(FileObject).count() == 0

    def test_profile_photo_removes_object(self, client, db, seeker, login, store):
        login(seeker)
        with self._failing_commit(db):
            response = client.post("/api/profile/photo", files={"file": ("me.png", PNG, "image/png")})
        assert response.status_code == 500
        assert store.objects == {}

        db.expire_all()
        assert db.get(User, seeker.id).profile_photo_file_id is None

    def test_failed_cleanup_is_logged(self, client, db, employer, login, store, caplog):
        login(employer)
        with self._failing_commit(db), patch.object(store, "delete", side_effect=RuntimeError("bucket gone")):
            response = client.post("/api/profile/company-logo", files={"file": ("logo.png", PNG, "image/png")})
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to save company logo"
        assert "Could not remove orphaned object companies/logos/" in caplog.text
