import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from skillshub.config import get_settings
from skillshub.database import get_db
from skillshub.dependencies import get_current_identity
from skillshub.errors import NotFoundError, ValidationError
from skillshub.models import FileObject
from skillshub.models.enums import FileKind
from skillshub.services.auth import Identity
from skillshub.services.storage import ObjectStore, commit_upload, get_object_store, store_upload, validate_upload

logger = logging.getLogger(__name__)
router = APIRouter()
settings = get_settings()


@router.post("/upload")
def upload_file(
    file: UploadFile = File(...),
    file_type: str = Form("other", alias="fileType"),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
):
    """Store an uploaded document and record it in ``files``."""
    try:
        kind = FileKind(file_type)
    except ValueError:
        raise ValidationError(
            f"Invalid file type. Must be one of: {', '.join(k.value for k in FileKind)}"
        )

    # One byte past the limit is enough to reject oversized files
    data = file.file.read(settings.max_file_size + 1)
    validate_upload(len(data), file.content_type)

    stored = store_upload(db, store, kind, file.filename, file.content_type, data, identity.user_id)
    commit_upload(db, store, stored, "Failed to save file")
    logger.info("User %s uploaded %s (%d bytes)", identity.user_id, stored.bucket_key, stored.size_bytes)

    return {
        "success": True,
        "fileId": stored.id,
        "bucketKey": stored.bucket_key,
        "sizeBytes": stored.size_bytes,
    }


@router.get("/files/{file_id}")
def download_file(
    file_id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
):
    """Redirect to a short-lived download URL."""
    file = db.get(FileObject, file_id)
    if not file:
        raise NotFoundError("File not found")
    return RedirectResponse(url=store.url_for(file.bucket_key), status_code=307)
