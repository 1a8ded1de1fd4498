"""Ownership lookups scoped to the caller.

Each helper fetches the resource together with its owner in one query so a
caller can never act on a row that belongs to someone else.
"""

import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from skillshub.errors import InfrastructureError, NotFoundError, UnauthorizedError
from skillshub.models import (
    Application,
    EmployerProfile,
    Job,
    MessageThread,
    Notification,
    PortfolioItem,
    SeekerProfile,
)
from skillshub.services.auth import Identity

logger = logging.getLogger(__name__)


def commit_or_raise(db: Session, message: str = "Unable to save changes. Please try again later.") -> None:
    """Commit the session, or roll back and raise InfrastructureError."""
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.exception("Commit failed: %s", message)
        raise InfrastructureError(message) from e


def get_employer_profile(db: Session, identity: Identity) -> EmployerProfile:
    profile = db.query(EmployerProfile).filter(EmployerProfile.user_id == identity.user_id).first()
    if not profile:
        raise NotFoundError("Employer profile not found")
    return profile


def get_seeker_profile(db: Session, identity: Identity) -> SeekerProfile:
    profile = db.query(SeekerProfile).filter(SeekerProfile.user_id == identity.user_id).first()
    if not profile:
        raise NotFoundError("Job seeker profile not found")
    return profile


def get_owned_job(db: Session, identity: Identity, job_id: int) -> Job:
    """Job posted by the caller's employer profile. 404 otherwise."""
    job = (
        db.query(Job)
        .join(EmployerProfile, EmployerProfile.id == Job.employer_id)
        .filter(Job.id == job_id, EmployerProfile.user_id == identity.user_id)
        .first()
    )
    if not job:
        raise NotFoundError("Job not found")
    return job


def get_owned_application(db: Session, identity: Identity, application_id: int) -> Application:
    """Application to one of the caller's jobs.

    404 when the application does not exist, 403 when it belongs to another
    employer's job.
    """
    row = (
        db.query(Application, EmployerProfile.user_id)
        .join(Job, Job.id == Application.job_id)
        .join(EmployerProfile, EmployerProfile.id == Job.employer_id)
        .filter(Application.id == application_id)
        .first()
    )
    if row is None:
        raise NotFoundError("Application not found")

    application, owner_id = row
    if owner_id != identity.user_id:
        raise UnauthorizedError("You do not have access to this application")
    return application


def get_thread_for_participant(db: Session, identity: Identity, thread_id: int) -> MessageThread:
    thread = (
        db.query(MessageThread)
        .filter(
            MessageThread.id == thread_id,
            or_(
                MessageThread.participant1_id == identity.user_id,
                MessageThread.participant2_id == identity.user_id,
            ),
        )
        .first()
    )
    if not thread:
        raise NotFoundError("Thread not found")
    return thread


def get_owned_portfolio_item(db: Session, identity: Identity, item_id: int) -> PortfolioItem:
    row = (
        db.query(PortfolioItem, SeekerProfile.user_id)
        .join(SeekerProfile, SeekerProfile.id == PortfolioItem.profile_id)
        .filter(PortfolioItem.id == item_id)
        .first()
    )
    if row is None:
        raise NotFoundError("Portfolio item not found")

    item, owner_id = row
    if owner_id != identity.user_id:
        raise UnauthorizedError("You do not have access to this portfolio item")
    return item


def get_owned_notification(db: Session, identity: Identity, notification_id: int) -> Notification:
    notification = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == identity.user_id)
        .first()
    )
    if not notification:
        raise NotFoundError("Notification not found")
    return notification
