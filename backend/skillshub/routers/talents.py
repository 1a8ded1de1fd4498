import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload, selectinload

from skillshub.database import get_db
from skillshub.dependencies import require_employer_or_admin
from skillshub.errors import NotFoundError
from skillshub.models import EmployerProfile, Job, JobSkill, PortfolioItem, SeekerProfile, SeekerSkill, User
from skillshub.models.enums import JobStatus, Pathway, Role
from skillshub.serializers import file_ref, seeker_skills
from skillshub.services.auth import Identity
from skillshub.services.matching import matching_skill_count, rank_by_score, talent_match_score

logger = logging.getLogger(__name__)
router = APIRouter()


def employer_skill_ids(db: Session, identity: Identity) -> set[int]:
    """Union of skills across the employer's open jobs."""
    rows = (
        db.query(JobSkill.skill_id)
        .join(Job, Job.id == JobSkill.job_id)
        .join(EmployerProfile, EmployerProfile.id == Job.employer_id)
        .filter(EmployerProfile.user_id == identity.user_id, Job.status == JobStatus.OPEN.value)
        .distinct()
        .all()
    )
    return {skill_id for (skill_id,) in rows}


@router.get("")
def list_talents(
    search: str | None = None,
    pathway: str | None = None,
    skill_id: int | None = Query(None, alias="skillId"),
    min_experience: int | None = Query(None, alias="minExperience"),
    use_matching: bool = Query(True, alias="useMatching"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    identity: Identity = Depends(require_employer_or_admin),
    db: Session = Depends(get_db),
):
    """Verified job seekers, ranked by fit with the employer's open jobs."""
    wanted: set[int] = set()
    if use_matching and identity.role == Role.EMPLOYER.value:
        wanted = employer_skill_ids(db, identity)

    query = (
        db.query(SeekerProfile)
        .join(User, User.id == SeekerProfile.user_id)
        .options(
            joinedload(SeekerProfile.user),
            selectinload(SeekerProfile.skills).joinedload(SeekerSkill.skill),
            selectinload(SeekerProfile.portfolio),
        )
        .filter(User.role == Role.JOB_SEEKER.value, User.is_email_verified == True)  # noqa: E712
    )

    if search:
        search_term = f"%{search}%"
        query = query.filter(
            or_(
                SeekerProfile.profession.ilike(search_term),
                SeekerProfile.headline.ilike(search_term),
                SeekerProfile.bio.ilike(search_term),
                User.first_name.ilike(search_term),
                User.last_name.ilike(search_term),
                User.email.ilike(search_term),
            )
        )

    if pathway and pathway in Pathway.__members__:
        query = query.filter(SeekerProfile.pathway == pathway)

    if wanted:
        skill_filter = wanted | {skill_id} if skill_id is not None else wanted
        query = query.filter(SeekerProfile.skills.any(SeekerSkill.skill_id.in_(skill_filter)))
    elif skill_id is not None:
        query = query.filter(SeekerProfile.skills.any(SeekerSkill.skill_id == skill_id))

    if min_experience is not None:
        query = query.filter(SeekerProfile.years_experience >= min_experience)

    profiles = query.order_by(User.created_at.desc(), SeekerProfile.id.desc()).all()

    talents = []
    for profile in profiles:
        possessed = profile.skill_ids
        user = profile.user
        talents.append({
            "id": profile.id,
            "userId": profile.user_id,
            "name": user.full_name,
            "firstName": user.first_name,
            "lastName": user.last_name,
            "email": user.email,
            "phone": user.phone,
            "profilePhotoFileId": user.profile_photo_file_id,
            "pathway": profile.pathway,
            "profession": profile.profession,
            "headline": profile.headline,
            "bio": profile.bio,
            "yearsExperience": profile.years_experience,
            "availability": profile.availability,
            "skills": [
                {"id": ss.skill.id, "name": ss.skill.name, "level": ss.level}
                for ss in profile.skills[:10]
            ],
            "matchScore": talent_match_score(wanted, possessed) if wanted else 0,
            "matchingSkillsCount": matching_skill_count(wanted, possessed) if wanted else 0,
            "portfolioCount": len(profile.portfolio),
            "portfolioItems": [
                {
                    "id": item.id,
                    "title": item.title,
                    "description": item.description,
                    "linkUrl": item.link_url,
                    "fileId": item.file_id,
                }
                for item in profile.portfolio[:3]
            ],
            "createdAt": user.created_at,
        })

    ranked = rank_by_score(
        talents,
        score_key=lambda t: t["matchScore"],
        created_key=lambda t: t["createdAt"],
    )
    total = len(ranked)

    return {
        "talents": ranked[offset:offset + limit],
        "pagination": {
            "total": total,
            "limit": limit,
            "offset": offset,
            "hasMore": offset + limit < total,
        },
    }


@router.get("/{profile_id}")
def get_talent(
    profile_id: int,
    identity: Identity = Depends(require_employer_or_admin),
    db: Session = Depends(get_db),
):
    """Full talent profile for employers."""
    profile = (
        db.query(SeekerProfile)
        .options(
            joinedload(SeekerProfile.user),
            joinedload(SeekerProfile.resume_file),
            selectinload(SeekerProfile.skills).joinedload(SeekerSkill.skill),
            selectinload(SeekerProfile.portfolio).joinedload(PortfolioItem.file),
        )
        .filter(SeekerProfile.id == profile_id)
        .first()
    )
    if not profile:
        raise NotFoundError("Talent not found")

    user = profile.user
    resume = file_ref(profile.resume_file)
    if resume:
        resume["sizeBytes"] = profile.resume_file.size_bytes

    return {
        "talent": {
            "id": profile.id,
            "userId": profile.user_id,
            "name": user.full_name,
            "firstName": user.first_name,
            "lastName": user.last_name,
            "email": user.email,
            "phone": user.phone,
            "gender": user.gender,
            "profilePhotoFileId": user.profile_photo_file_id,
            "pathway": profile.pathway,
            "profession": profile.profession,
            "headline": profile.headline,
            "bio": profile.bio,
            "dateOfBirth": profile.date_of_birth,
            "yearsExperience": profile.years_experience,
            "availability": profile.availability,
            "resumeFileId": profile.resume_file_id,
            "resumeFile": resume,
            "skills": sorted(seeker_skills(profile), key=lambda s: s["name"]),
            "portfolio": [
                {
                    "id": item.id,
                    "title": item.title,
                    "description": item.description,
                    "linkUrl": item.link_url,
                    "fileId": item.file_id,
                    "file": file_ref(item.file),
                }
                for item in profile.portfolio
            ],
            "createdAt": user.created_at,
        }
    }
