import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload, selectinload

from skillshub.database import get_db
from skillshub.dependencies import require_seeker
from skillshub.errors import NotFoundError
from skillshub.models import EmployerProfile, Job, JobSkill, SeekerProfile, SeekerSkill
from skillshub.models.enums import JobStatus, JobType
from skillshub.serializers import job_detail, job_summary
from skillshub.services.auth import Identity
from skillshub.services.matching import job_match_score, matching_skill_count, rank_by_score

logger = logging.getLogger(__name__)
router = APIRouter()


def _open_jobs_query(db: Session, search: str | None, type: str | None, location: str | None):
    query = (
        db.query(Job)
        .options(
            joinedload(Job.employer).joinedload(EmployerProfile.company_logo_file),
            selectinload(Job.skills).joinedload(JobSkill.skill),
        )
        .filter(Job.status == JobStatus.OPEN.value)
    )

    if type and type != "all" and type in JobType.__members__:
        query = query.filter(Job.type == type)

    if location:
        query = query.filter(Job.location.ilike(f"%{location}%"))

    if search:
        search_term = f"%{search}%"
        query = query.filter(
            or_(Job.title.ilike(search_term), Job.description.ilike(search_term))
        )

    return query


@router.get("/available")
def list_available_jobs(
    search: str | None = None,
    type: str | None = None,
    location: str | None = None,
    db: Session = Depends(get_db),
):
    """Public list of open jobs, newest first."""
    jobs = (
        _open_jobs_query(db, search, type, location)
        .order_by(Job.created_at.desc(), Job.id.desc())
        .all()
    )
    return {"jobs": [job_summary(job) for job in jobs]}


@router.get("/recommended")
def list_recommended_jobs(
    search: str | None = None,
    type: str | None = None,
    location: str | None = None,
    use_matching: bool = Query(True, alias="useMatching"),
    identity: Identity = Depends(require_seeker),
    db: Session = Depends(get_db),
):
    """Open jobs ranked by how well they fit the seeker's skills."""
    profile = (
        db.query(SeekerProfile)
        .options(selectinload(SeekerProfile.skills).joinedload(SeekerSkill.skill))
        .filter(SeekerProfile.user_id == identity.user_id)
        .first()
    )
    if not profile:
        raise NotFoundError("Job seeker profile not found. Please complete your profile first.")

    seeker_skill_ids = profile.skill_ids
    query = _open_jobs_query(db, search, type, location)

    # Only jobs needing at least one of the seeker's skills
    if use_matching and seeker_skill_ids:
        query = query.filter(
            Job.skills.any(JobSkill.skill_id.in_(seeker_skill_ids))
        )

    jobs = query.order_by(Job.created_at.desc(), Job.id.desc()).all()

    results = []
    for job in jobs:
        data = job_summary(job)
        if use_matching:
            data["matchScore"] = job_match_score(job.skill_ids, seeker_skill_ids)
            data["matchingSkillsCount"] = matching_skill_count(job.skill_ids, seeker_skill_ids)
        else:
            data["matchScore"] = 0
            data["matchingSkillsCount"] = 0
        results.append(data)

    ranked = rank_by_score(
        results,
        score_key=lambda j: j["matchScore"],
        created_key=lambda j: j["createdAt"],
    )

    return {
        "jobs": ranked,
        "userSkills": [
            {"id": ss.skill.id, "name": ss.skill.name, "level": ss.level}
            for ss in profile.skills
        ],
    }


@router.get("/{job_id}")
def get_job(job_id: int, db: Session = Depends(get_db)):
    """Public job detail with employer and skills."""
    job = (
        db.query(Job)
        .options(
            joinedload(Job.employer).joinedload(EmployerProfile.company_logo_file),
            selectinload(Job.skills).joinedload(JobSkill.skill),
        )
        .filter(Job.id == job_id)
        .first()
    )
    if not job:
        raise NotFoundError("Job not found")

    data = job_detail(job)
    data["employer"]["orgType"] = job.employer.org_type
    data["employer"]["website"] = job.employer.website
    data["applicationCount"] = len(job.applications)
    return {"job": data}
