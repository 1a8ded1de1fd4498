import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, joinedload, selectinload

from skillshub.database import get_db
from skillshub.dependencies import require_employer
from skillshub.errors import NotFoundError
from skillshub.models import (
    Application,
    Contract,
    FileObject,
    Job,
    JobSkill,
    SeekerProfile,
    SeekerSkill,
    Skill,
    User,
)
from skillshub.models.enums import (
    ApplicationStatus,
    ContractStatus,
    JobStatus,
    MilestoneStatus,
    NotificationType,
)
from skillshub.schemas import ApplicationStatusUpdate, JobCreate, JobUpdate, RecruitRequest
from skillshub.serializers import application_for_employer, applications_by_status, job_detail
from skillshub.services.access import (
    commit_or_raise,
    get_employer_profile,
    get_owned_application,
    get_owned_job,
)
from skillshub.services.auth import Identity
from skillshub.services.messaging import find_or_create_thread, post_message
from skillshub.services.notifications import notify

logger = logging.getLogger(__name__)
router = APIRouter()

# Columns that can't be cleared through a PATCH
REQUIRED_JOB_FIELDS = ("title", "description", "type", "status")


def _pagination(total: int, limit: int, offset: int) -> dict:
    return {"total": total, "limit": limit, "offset": offset, "hasMore": offset + limit < total}


def _set_job_skills(db: Session, job: Job, entries) -> None:
    """Replace the job's skills. Ids that don't exist are ignored."""
    job.skills.clear()
    db.flush()
    if not entries:
        return

    wanted = {entry.skill_id: entry.required for entry in entries}
    existing = db.query(Skill.id).filter(Skill.id.in_(wanted)).all()
    for (skill_id,) in existing:
        job.skills.append(JobSkill(skill_id=skill_id, required=wanted[skill_id]))


def _apply_job_fields(job: Job, data: JobCreate | JobUpdate) -> None:
    for field, value in data.model_dump(exclude_unset=True, exclude={"skills"}).items():
        if field in REQUIRED_JOB_FIELDS and value is None:
            continue
        if field in ("type", "status") and value is not None:
            value = value.value
        setattr(job, field, value)


def _load_job(db: Session, job_id: int) -> Job:
    return (
        db.query(Job)
        .options(
            selectinload(Job.skills).joinedload(JobSkill.skill),
            selectinload(Job.applications),
            joinedload(Job.contract).joinedload(Contract.seeker),
        )
        .filter(Job.id == job_id)
        .one()
    )


def _employer_job(job: Job) -> dict:
    data = job_detail(job)
    data.pop("employer")
    data["applicationCount"] = len(job.applications)
    data["applicationsByStatus"] = applications_by_status(job)
    data["hasContract"] = job.contract is not None
    data["contractSeeker"] = (
        {
            "id": job.contract.seeker.id,
            "name": job.contract.seeker.full_name,
            "email": job.contract.seeker.email,
        }
        if job.contract
        else None
    )
    return data


# Jobs

@router.get("/jobs")
def list_jobs(
    status_filter: str | None = Query(None, alias="status"),
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    identity: Identity = Depends(require_employer),
    db: Session = Depends(get_db),
):
    """The employer's job postings, newest first."""
    employer = get_employer_profile(db, identity)

    query = db.query(Job).filter(Job.employer_id == employer.id)
    if status_filter in JobStatus.__members__:
        query = query.filter(Job.status == status_filter)

    total = query.count()
    jobs = (
        query.options(
            selectinload(Job.skills).joinedload(JobSkill.skill),
            selectinload(Job.applications),
            joinedload(Job.contract).joinedload(Contract.seeker),
        )
        .order_by(Job.created_at.desc(), Job.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )

    return {"jobs": [_employer_job(job) for job in jobs], "pagination": _pagination(total, limit, offset)}


@router.post("/jobs", status_code=status.HTTP_201_CREATED)
def create_job(
    data: JobCreate,
    identity: Identity = Depends(require_employer),
    db: Session = Depends(get_db),
):
    employer = get_employer_profile(db, identity)

    job = Job(employer_id=employer.id, status=JobStatus.OPEN.value)
    _apply_job_fields(job, data)
    db.add(job)
    db.flush()
    _set_job_skills(db, job, data.skill_entries())
    commit_or_raise(db, "Failed to create job. Please check all fields and try again.")
    logger.info("Employer %s posted job %s", employer.id, job.id)

    return {
        "success": True,
        "message": "Job posted successfully",
        "job": _employer_job(_load_job(db, job.id)),
    }


@router.get("/jobs/{job_id}")
def get_job(
    job_id: int,
    identity: Identity = Depends(require_employer),
    db: Session = Depends(get_db),
):
    job = get_owned_job(db, identity, job_id)
    return {"job": _employer_job(_load_job(db, job.id))}


@router.patch("/jobs/{job_id}")
def update_job(
    job_id: int,
    data: JobUpdate,
    identity: Identity = Depends(require_employer),
    db: Session = Depends(get_db),
):
    job = get_owned_job(db, identity, job_id)
    _apply_job_fields(job, data)
    if data.skills is not None:
        _set_job_skills(db, job, data.skill_entries())
    commit_or_raise(db, "Failed to update job")

    return {
        "success": True,
        "message": "Job updated successfully",
        "job": _employer_job(_load_job(db, job_id)),
    }


@router.delete("/jobs/{job_id}")
def delete_job(
    job_id: int,
    identity: Identity = Depends(require_employer),
    db: Session = Depends(get_db),
):
    job = get_owned_job(db, identity, job_id)
    db.delete(job)
    commit_or_raise(db, "Failed to delete job")
    logger.info("Deleted job %s", job_id)
    return {"success": True, "message": "Job deleted successfully"}


# Applications

@router.get("/applications")
def list_applications(
    status_filter: str | None = Query(None, alias="status"),
    job_id: int | None = Query(None, alias="jobId"),
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    identity: Identity = Depends(require_employer),
    db: Session = Depends(get_db),
):
    """Applications across the employer's jobs, newest first."""
    employer = get_employer_profile(db, identity)

    query = (
        db.query(Application)
        .join(Job, Job.id == Application.job_id)
        .filter(Job.employer_id == employer.id)
    )
    if status_filter in ApplicationStatus.__members__:
        query = query.filter(Application.status == status_filter)
    if job_id is not None:
        get_owned_job(db, identity, job_id)
        query = query.filter(Application.job_id == job_id)

    total = query.count()
    applications = (
        query.options(
            joinedload(Application.job),
            joinedload(Application.user)
            .joinedload(User.seeker_profile)
            .selectinload(SeekerProfile.skills)
            .joinedload(SeekerSkill.skill),
        )
        .order_by(Application.created_at.desc(), Application.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )

    results = []
    for application in applications:
        data = application_for_employer(application)
        data.pop("coverLetterFile")
        data.pop("cvFile")
        data["hasFiles"] = {
            "coverLetter": application.cover_letter_file_id is not None,
            "cv": application.cv_file_id is not None,
        }
        results.append(data)

    return {"applications": results, "pagination": _pagination(total, limit, offset)}


@router.get("/applications/{application_id}")
def get_application(
    application_id: int,
    identity: Identity = Depends(require_employer),
    db: Session = Depends(get_db),
):
    application = get_owned_application(db, identity, application_id)

    file_ids = [fid for fid in (application.cover_letter_file_id, application.cv_file_id) if fid]
    files = {f.id: f for f in db.query(FileObject).filter(FileObject.id.in_(file_ids)).all()} if file_ids else {}

    return {"application": application_for_employer(application, files)}


@router.patch("/applications/{application_id}")
def update_application_status(
    application_id: int,
    data: ApplicationStatusUpdate,
    identity: Identity = Depends(require_employer),
    db: Session = Depends(get_db),
):
    """Move an application through the hiring pipeline and tell the applicant."""
    application = get_owned_application(db, identity, application_id)
    new_status = data.status.value

    if application.status != new_status:
        application.status = new_status
        job = application.job
        notify(
            db,
            user_id=application.user_id,
            type=NotificationType.APPLICATION_STATUS,
            title="Application Status Updated",
            message=f"Your application for {job.title} is now {new_status.lower()}",
            link="/dashboard/seeker/applications",
        )
    commit_or_raise(db, "Failed to update application status")

    return {
        "success": True,
        "message": "Application status updated successfully",
        "application": {
            "id": application.id,
            "status": application.status,
            "updatedAt": application.updated_at,
        },
    }


@router.delete("/applications/{application_id}")
def delete_application(
    application_id: int,
    identity: Identity = Depends(require_employer),
    db: Session = Depends(get_db),
):
    application = get_owned_application(db, identity, application_id)
    db.delete(application)
    commit_or_raise(db, "Failed to delete application")
    return {"success": True, "message": "Application deleted successfully"}


# Dashboard

@router.get("/stats")
def get_stats(identity: Identity = Depends(require_employer), db: Session = Depends(get_db)):
    """Counters for the employer dashboard."""
    employer = get_employer_profile(db, identity)
    jobs = (
        db.query(Job)
        .options(
            selectinload(Job.applications),
            selectinload(Job.contract).selectinload(Contract.milestones),
        )
        .filter(Job.employer_id == employer.id)
        .all()
    )

    applications = [a for job in jobs for a in job.applications]
    contracts = [job.contract for job in jobs if job.contract]
    active_contracts = [c for c in contracts if c.status == ContractStatus.ACTIVE.value]
    milestones = [m for c in active_contracts for m in c.milestones]
    pending_milestone_statuses = {MilestoneStatus.PROPOSED.value, MilestoneStatus.IN_PROGRESS.value}

    def count(status_value: str) -> int:
        return sum(1 for a in applications if a.status == status_value)

    return {
        "stats": {
            "jobs": {
                "total": len(jobs),
                "active": sum(1 for j in jobs if j.status == JobStatus.OPEN.value),
                "closed": sum(1 for j in jobs if j.status == JobStatus.CLOSED.value),
            },
            "applications": {
                "total": len(applications),
                "pending": count(ApplicationStatus.APPLIED.value),
                "shortlisted": count(ApplicationStatus.SHORTLISTED.value),
                "hired": count(ApplicationStatus.HIRED.value),
                "rejected": count(ApplicationStatus.REJECTED.value),
            },
            "contracts": {
                "active": len(contracts),
                "totalMilestones": len(milestones),
                "pendingMilestones": sum(1 for m in milestones if m.status in pending_milestone_statuses),
            },
        },
        "employerProfile": {
            "orgName": employer.org_name,
            "orgType": employer.org_type,
            "website": employer.website,
            "verified": employer.verified,
        },
    }


@router.post("/recruit")
def recruit_talent(
    data: RecruitRequest,
    identity: Identity = Depends(require_employer),
    db: Session = Depends(get_db),
):
    """Invite a seeker to one of the employer's jobs."""
    employer = get_employer_profile(db, identity)
    job = get_owned_job(db, identity, data.job_id)

    profile = (
        db.query(SeekerProfile)
        .options(joinedload(SeekerProfile.user))
        .filter(SeekerProfile.id == data.talent_id)
        .first()
    )
    if not profile:
        raise NotFoundError("Talent not found")
    talent = profile.user

    application = (
        db.query(Application)
        .filter(Application.job_id == job.id, Application.user_id == talent.id)
        .first()
    )
    has_resume = profile.resume_file_id is not None

    if application:
        if application.status not in (ApplicationStatus.SHORTLISTED.value, ApplicationStatus.HIRED.value):
            application.status = ApplicationStatus.SHORTLISTED.value
    elif has_resume:
        # Employer-initiated: the resume stands in for both documents
        application = Application(
            job_id=job.id,
            user_id=talent.id,
            status=ApplicationStatus.SHORTLISTED.value,
            cover_letter_text=data.message or f"You have been invited to apply for the position: {job.title}",
            cover_letter_file_id=profile.resume_file_id,
            cv_file_id=profile.resume_file_id,
        )
        db.add(application)

    employer_name = employer.org_name or identity.display_name or "An employer"

    body = f"Hi {talent.first_name or 'there'},\n\n"
    if data.message:
        body += f"{data.message}\n\n"
    body += f"I'd like to invite you to apply for the position: {job.title}."
    if not has_resume:
        body += (
            f"\n\nPlease upload your CV to your profile or send it to {identity.email} "
            "to proceed with your application."
        )
    body += f"\n\nBest regards,\n{employer_name}"

    thread = find_or_create_thread(db, identity.user_id, talent.id)
    post_message(db, thread, identity.user_id, body)

    notify(
        db,
        user_id=talent.id,
        type=NotificationType.RECRUITMENT,
        title="New Recruitment Invitation",
        message=f"{employer_name} has invited you to apply for: {job.title}",
        link="/dashboard/seeker/messages",
    )
    commit_or_raise(db, "Failed to send recruitment invitation")
    logger.info("Employer %s recruited seeker %s for job %s", employer.id, profile.id, job.id)

    return {
        "success": True,
        "message": (
            "Recruitment invitation sent successfully! Application created."
            if has_resume
            else "Recruitment message sent successfully! The talent will be notified to upload their CV."
        ),
        "application": {
            "id": application.id,
            "status": application.status,
            "talentName": talent.full_name,
            "jobTitle": job.title,
        } if application else None,
        "hasResume": has_resume,
        "threadId": thread.id,
    }
