import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from skillshub.database import get_db
from skillshub.dependencies import require_seeker
from skillshub.errors import NotFoundError, ValidationError
from skillshub.models import Application, EmployerProfile, FileObject, Job, SeekerProfile, User
from skillshub.models.enums import JobStatus, NotificationType
from skillshub.schemas import ApplyRequest
from skillshub.services.access import commit_or_raise
from skillshub.services.auth import Identity
from skillshub.services.notifications import notify

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/apply", status_code=status.HTTP_201_CREATED)
def apply_for_job(
    data: ApplyRequest,
    identity: Identity = Depends(require_seeker),
    db: Session = Depends(get_db),
):
    """Submit an application. Missing documents fall back to the profile resume."""
    profile = db.query(SeekerProfile).filter(SeekerProfile.user_id == identity.user_id).first()
    if not profile:
        raise ValidationError("Please complete your profile before applying")

    job = db.get(Job, data.job_id)
    if not job:
        raise NotFoundError("Job not found")
    if job.status != JobStatus.OPEN.value:
        raise ValidationError("This job is no longer accepting applications")

    cv_file_id = data.cv_file_id or profile.resume_file_id
    cover_letter_file_id = data.cover_letter_file_id or profile.resume_file_id
    if not cv_file_id and not cover_letter_file_id:
        raise ValidationError(
            "Please upload your CV/resume to your profile or provide a cover letter file",
            requiresResume=True,
        )

    if cv_file_id and not db.get(FileObject, cv_file_id):
        raise NotFoundError("CV file not found")
    if cover_letter_file_id and not db.get(FileObject, cover_letter_file_id):
        raise NotFoundError("Cover letter file not found")

    existing = (
        db.query(Application.id)
        .filter(Application.job_id == job.id, Application.user_id == identity.user_id)
        .first()
    )
    if existing:
        raise ValidationError("You have already applied for this job")

    application = Application(
        job_id=job.id,
        user_id=identity.user_id,
        cover_letter_text=data.cover_letter_text,
        cover_letter_file_id=cover_letter_file_id,
        cv_file_id=cv_file_id,
        expected_pay=data.expected_pay,
    )
    db.add(application)

    employer = db.get(EmployerProfile, job.employer_id)
    applicant = db.get(User, identity.user_id)
    notify(
        db,
        user_id=employer.user_id,
        type=NotificationType.APPLICATION_RECEIVED,
        title="New Application Received",
        message=f"{applicant.full_name} applied for: {job.title}",
        link=f"/dashboard/employer/applications?jobId={job.id}",
    )
    commit_or_raise(db, "Failed to submit application")
    logger.info("User %s applied for job %s", identity.user_id, job.id)

    return {
        "success": True,
        "message": "Application submitted successfully",
        "application": {
            "id": application.id,
            "status": application.status,
            "job": {"title": job.title, "employer": {"orgName": employer.org_name}},
        },
    }
