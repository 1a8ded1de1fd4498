from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload, selectinload

from skillshub.database import get_db
from skillshub.errors import NotFoundError
from skillshub.models import SeekerProfile, SeekerSkill, User
from skillshub.models.enums import Pathway, Role

router = APIRouter()


def _public_skills(profile: SeekerProfile, limit: int | None = None) -> list[dict]:
    skills = profile.skills[:limit] if limit else profile.skills
    return [
        {"name": ss.skill.name, "slug": ss.skill.slug, "level": ss.level or 1}
        for ss in skills
    ]


def _freelancer_card(profile: SeekerProfile, skill_limit: int | None) -> dict:
    return {
        "id": profile.id,
        "userId": profile.user_id,
        "name": profile.user.full_name,
        "profession": profile.profession or "Professional",
        "headline": profile.headline or "",
        "bio": profile.bio or "",
        "yearsExperience": profile.years_experience or 0,
        "pathway": profile.pathway,
        "availability": profile.availability,
        "skills": _public_skills(profile, skill_limit),
    }


def _verified_seekers(db: Session):
    return (
        db.query(SeekerProfile)
        .join(User, User.id == SeekerProfile.user_id)
        .options(
            joinedload(SeekerProfile.user),
            selectinload(SeekerProfile.skills).joinedload(SeekerSkill.skill),
        )
        .filter(User.role == Role.JOB_SEEKER.value, User.is_email_verified == True)  # noqa: E712
    )


@router.get("/top")
def top_freelancers(db: Session = Depends(get_db)):
    """The three most experienced verified seekers, for the landing page."""
    profiles = (
        _verified_seekers(db)
        .order_by(SeekerProfile.years_experience.desc().nullslast(), SeekerProfile.id)
        .limit(3)
        .all()
    )
    return {"freelancers": [_freelancer_card(p, 3) for p in profiles]}


@router.get("/available")
def available_freelancers(
    search: str | None = None,
    pathway: str | None = None,
    min_experience: int | None = Query(None, alias="minExperience"),
    db: Session = Depends(get_db),
):
    query = _verified_seekers(db)

    if pathway and pathway in Pathway.__members__:
        query = query.filter(SeekerProfile.pathway == pathway)

    if min_experience is not None:
        query = query.filter(SeekerProfile.years_experience >= min_experience)

    if search:
        search_term = f"%{search}%"
        query = query.filter(
            or_(
                SeekerProfile.profession.ilike(search_term),
                SeekerProfile.headline.ilike(search_term),
                SeekerProfile.bio.ilike(search_term),
                User.first_name.ilike(search_term),
                User.last_name.ilike(search_term),
            )
        )

    profiles = query.order_by(SeekerProfile.years_experience.desc().nullslast(), SeekerProfile.id).all()
    return {"freelancers": [_freelancer_card(p, 5) for p in profiles]}


@router.get("/{profile_id}")
def get_freelancer(profile_id: int, db: Session = Depends(get_db)):
    """Public profile of a seeker. Contact details are left to the talent endpoints."""
    profile = (
        db.query(SeekerProfile)
        .options(
            joinedload(SeekerProfile.user),
            selectinload(SeekerProfile.skills).joinedload(SeekerSkill.skill),
            selectinload(SeekerProfile.portfolio),
        )
        .filter(SeekerProfile.id == profile_id)
        .first()
    )
    if not profile:
        raise NotFoundError("Profile not found")

    data = _freelancer_card(profile, None)
    data["portfolio"] = [
        {
            "id": item.id,
            "title": item.title,
            "description": item.description,
            "linkUrl": item.link_url,
        }
        for item in profile.portfolio[:5]
    ]
    return data
