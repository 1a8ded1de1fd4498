import logging

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session, selectinload

from skillshub.config import get_settings
from skillshub.database import get_db
from skillshub.dependencies import get_current_identity, require_employer, require_seeker
from skillshub.errors import NotFoundError, ValidationError
from skillshub.models import EmployerProfile, FileObject, SeekerProfile, SeekerSkill, Skill, User
from skillshub.models.enums import FileKind
from skillshub.schemas import EmployerProfileUpdate, SeekerProfileUpdate, UserUpdate
from skillshub.serializers import file_ref, seeker_skills
from skillshub.services.access import commit_or_raise, get_employer_profile
from skillshub.services.auth import Identity
from skillshub.services.storage import (
    IMAGE_TYPES,
    ObjectStore,
    commit_upload,
    get_object_store,
    store_upload,
    validate_upload,
)

logger = logging.getLogger(__name__)
router = APIRouter()
settings = get_settings()


def read_upload(upload: UploadFile, max_size: int) -> bytes:
    """Read at most one byte past the size limit."""
    return upload.file.read(max_size + 1)


def _seeker_profile_payload(profile: SeekerProfile) -> dict:
    resume = file_ref(profile.resume_file)
    if resume:
        resume["sizeBytes"] = profile.resume_file.size_bytes
    return {
        "id": profile.id,
        "userId": profile.user_id,
        "pathway": profile.pathway,
        "profession": profile.profession,
        "headline": profile.headline,
        "bio": profile.bio,
        "dateOfBirth": profile.date_of_birth,
        "yearsExperience": profile.years_experience,
        "availability": profile.availability,
        "resumeFileId": profile.resume_file_id,
        "resumeFile": resume,
        "skills": seeker_skills(profile),
    }


def _employer_profile_payload(profile: EmployerProfile) -> dict:
    return {
        "id": profile.id,
        "userId": profile.user_id,
        "orgName": profile.org_name,
        "orgType": profile.org_type,
        "website": profile.website,
        "verified": profile.verified,
        "companyLogoFileId": profile.company_logo_file_id,
        "companyLogo": file_ref(profile.company_logo_file),
    }


def _load_seeker_profile(db: Session, user_id: int) -> SeekerProfile | None:
    return (
        db.query(SeekerProfile)
        .options(selectinload(SeekerProfile.skills).joinedload(SeekerSkill.skill))
        .filter(SeekerProfile.user_id == user_id)
        .first()
    )


@router.patch("/update")
def update_user(
    data: UserUpdate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Update the caller's basic account details."""
    user = db.get(User, identity.user_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if field in ("first_name", "last_name") and value is None:
            continue
        if field == "gender" and value is not None:
            value = value.value
        setattr(user, field, value)
    commit_or_raise(db, "Failed to update profile")

    return {
        "success": True,
        "message": "Profile updated successfully",
        "user": {
            "id": user.id,
            "email": user.email,
            "username": user.username,
            "firstName": user.first_name,
            "lastName": user.last_name,
            "phone": user.phone,
            "gender": user.gender,
            "role": user.role,
        },
    }


@router.get("/seeker")
def get_seeker(identity: Identity = Depends(require_seeker), db: Session = Depends(get_db)):
    profile = _load_seeker_profile(db, identity.user_id)
    if not profile:
        raise NotFoundError("Seeker profile not found")
    return {"profile": _seeker_profile_payload(profile)}


@router.patch("/seeker")
def update_seeker(
    data: SeekerProfileUpdate,
    identity: Identity = Depends(require_seeker),
    db: Session = Depends(get_db),
):
    """Update the seeker profile. ``skills`` replaces the whole skill set when given."""
    changes = data.model_dump(exclude_unset=True, exclude={"skills"})

    if changes.get("resume_file_id") and not db.get(FileObject, changes["resume_file_id"]):
        raise NotFoundError("Resume file not found")

    profile = _load_seeker_profile(db, identity.user_id)
    if not profile:
        if not data.pathway:
            raise ValidationError("Pathway is required for new profiles")
        profile = SeekerProfile(user_id=identity.user_id, pathway=data.pathway.value)
        db.add(profile)
        db.flush()

    for field, value in changes.items():
        if field == "pathway":
            if value is None:
                continue
            value = value.value
        setattr(profile, field, value)

    if data.skills is not None:
        levels = {entry.skill_id: entry.level for entry in data.skills}
        known = {sid for (sid,) in db.query(Skill.id).filter(Skill.id.in_(levels)).all()}
        unknown = set(levels) - known
        if unknown:
            raise ValidationError(f"Unknown skill ids: {', '.join(str(s) for s in sorted(unknown))}")

        profile.skills.clear()
        db.flush()
        for skill_id, level in levels.items():
            profile.skills.append(SeekerSkill(skill_id=skill_id, level=level))

    commit_or_raise(db, "Failed to update profile")
    profile = _load_seeker_profile(db, identity.user_id)
    return {"success": True, "profile": _seeker_profile_payload(profile)}


@router.get("/employer")
def get_employer(identity: Identity = Depends(require_employer), db: Session = Depends(get_db)):
    return {"profile": _employer_profile_payload(get_employer_profile(db, identity))}


@router.patch("/employer")
def update_employer(
    data: EmployerProfileUpdate,
    identity: Identity = Depends(require_employer),
    db: Session = Depends(get_db),
):
    changes = data.model_dump(exclude_unset=True)
    profile = db.query(EmployerProfile).filter(EmployerProfile.user_id == identity.user_id).first()
    if not profile:
        if not changes.get("org_name"):
            raise ValidationError("Organization name is required")
        profile = EmployerProfile(user_id=identity.user_id, org_name=changes["org_name"])
        db.add(profile)

    for field, value in changes.items():
        if field == "org_name" and value is None:
            continue
        setattr(profile, field, value)
    commit_or_raise(db, "Failed to update company profile")
    db.refresh(profile)
    return {"success": True, "profile": _employer_profile_payload(profile)}


def _store_image(
    db: Session,
    store: ObjectStore,
    upload: UploadFile,
    kind: FileKind,
    user_id: int,
) -> FileObject:
    if upload.content_type not in IMAGE_TYPES:
        raise ValidationError("Invalid file type. Only JPEG, PNG, and WebP images are allowed.")
    data = read_upload(upload, settings.max_file_size)
    validate_upload(len(data), upload.content_type, allowed=IMAGE_TYPES)
    return store_upload(db, store, kind, upload.filename, upload.content_type, data, user_id)


@router.post("/company-logo")
def upload_company_logo(
    file: UploadFile = File(...),
    identity: Identity = Depends(require_employer),
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
):
    profile = get_employer_profile(db, identity)
    stored = _store_image(db, store, file, FileKind.COMPANY_LOGO, identity.user_id)
    profile.company_logo_file_id = stored.id
    commit_upload(db, store, stored, "Failed to save company logo")

    return {
        "success": True,
        "message": "Company logo uploaded successfully",
        "fileId": stored.id,
        "bucketKey": stored.bucket_key,
    }


@router.post("/photo")
def upload_profile_photo(
    file: UploadFile = File(...),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
):
    stored = _store_image(db, store, file, FileKind.PROFILE_PHOTO, identity.user_id)
    user = db.get(User, identity.user_id)
    user.profile_photo_file_id = stored.id
    commit_upload(db, store, stored, "Failed to save profile photo")

    return {
        "success": True,
        "message": "Profile photo uploaded successfully",
        "fileId": stored.id,
        "bucketKey": stored.bucket_key,
        "url": store.url_for(stored.bucket_key),
    }


@router.get("/photo/{file_id}")
def get_profile_photo(
    file_id: str,
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
):
    """Redirect to a short-lived URL for a profile photo or company logo."""
    file = db.get(FileObject, file_id)
    if not file or not file.content_type.startswith("image/"):
        raise NotFoundError("Photo not found")
    return RedirectResponse(url=store.url_for(file.bucket_key), status_code=307)
