import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, joinedload, selectinload

from skillshub.database import get_db
from skillshub.dependencies import require_seeker
from skillshub.errors import NotFoundError
from skillshub.models import Application, EmployerProfile, FileObject, Job, JobSkill, PortfolioItem
from skillshub.models.enums import ApplicationStatus
from skillshub.schemas import PortfolioItemCreate, PortfolioItemUpdate
from skillshub.serializers import employer_summary, file_ref
from skillshub.services.access import commit_or_raise, get_owned_portfolio_item, get_seeker_profile
from skillshub.services.auth import Identity

logger = logging.getLogger(__name__)
router = APIRouter()


def _portfolio_item(item: PortfolioItem) -> dict:
    return {
        "id": item.id,
        "title": item.title,
        "description": item.description,
        "linkUrl": item.link_url,
        "fileId": item.file_id,
        "file": file_ref(item.file),
        "createdAt": item.created_at,
    }


def _check_file(db: Session, file_id: str | None) -> None:
    if file_id and not db.get(FileObject, file_id):
        raise NotFoundError("File not found")


@router.get("/applications")
def list_my_applications(
    status_filter: str | None = Query(None, alias="status"),
    identity: Identity = Depends(require_seeker),
    db: Session = Depends(get_db),
):
    """The seeker's own applications, newest first."""
    query = (
        db.query(Application)
        .options(
            joinedload(Application.job)
            .joinedload(Job.employer)
            .joinedload(EmployerProfile.company_logo_file),
            joinedload(Application.job).selectinload(Job.skills).joinedload(JobSkill.skill),
        )
        .filter(Application.user_id == identity.user_id)
    )
    if status_filter in ApplicationStatus.__members__:
        query = query.filter(Application.status == status_filter)

    applications = query.order_by(Application.created_at.desc(), Application.id.desc()).all()

    return {
        "applications": [
            {
                "id": app.id,
                "status": app.status,
                "coverLetterText": app.cover_letter_text,
                "expectedPay": app.expected_pay,
                "createdAt": app.created_at,
                "job": {
                    "id": app.job.id,
                    "title": app.job.title,
                    "description": app.job.description,
                    "type": app.job.type,
                    "location": app.job.location,
                    "salaryRange": app.job.salary_range,
                    "status": app.job.status,
                    "employer": employer_summary(app.job.employer),
                    "skills": [
                        {"name": js.skill.name, "slug": js.skill.slug, "required": js.required}
                        for js in app.job.skills
                    ],
                },
            }
            for app in applications
        ]
    }


@router.get("/portfolio")
def list_portfolio(identity: Identity = Depends(require_seeker), db: Session = Depends(get_db)):
    profile = get_seeker_profile(db, identity)
    items = (
        db.query(PortfolioItem)
        .options(selectinload(PortfolioItem.file))
        .filter(PortfolioItem.profile_id == profile.id)
        .order_by(PortfolioItem.id.desc())
        .all()
    )
    return {"items": [_portfolio_item(item) for item in items]}


@router.post("/portfolio", status_code=status.HTTP_201_CREATED)
def create_portfolio_item(
    data: PortfolioItemCreate,
    identity: Identity = Depends(require_seeker),
    db: Session = Depends(get_db),
):
    profile = get_seeker_profile(db, identity)
    _check_file(db, data.file_id)

    item = PortfolioItem(
        profile_id=profile.id,
        title=data.title,
        description=data.description,
        link_url=data.link_url,
        file_id=data.file_id,
    )
    db.add(item)
    commit_or_raise(db, "Failed to create portfolio item")
    db.refresh(item)
    return {"success": True, "item": _portfolio_item(item)}


@router.get("/portfolio/{item_id}")
def get_portfolio_item(
    item_id: int,
    identity: Identity = Depends(require_seeker),
    db: Session = Depends(get_db),
):
    return {"item": _portfolio_item(get_owned_portfolio_item(db, identity, item_id))}


@router.patch("/portfolio/{item_id}")
def update_portfolio_item(
    item_id: int,
    data: PortfolioItemUpdate,
    identity: Identity = Depends(require_seeker),
    db: Session = Depends(get_db),
):
    item = get_owned_portfolio_item(db, identity, item_id)
    changes = data.model_dump(exclude_unset=True)
    if changes.get("title", "") is None:
        changes.pop("title")
    _check_file(db, changes.get("file_id"))

    for field, value in changes.items():
        setattr(item, field, value)
    commit_or_raise(db, "Failed to update portfolio item")
    db.refresh(item)
    return {"success": True, "item": _portfolio_item(item)}


@router.delete("/portfolio/{item_id}")
def delete_portfolio_item(
    item_id: int,
    identity: Identity = Depends(require_seeker),
    db: Session = Depends(get_db),
):
    item = get_owned_portfolio_item(db, identity, item_id)
    db.delete(item)
    commit_or_raise(db, "Failed to delete portfolio item")
    return {"success": True, "message": "Portfolio item deleted"}
