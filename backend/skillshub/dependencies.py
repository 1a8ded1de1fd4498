from fastapi import Request, Depends
from sqlalchemy.orm import Session

from skillshub.config import get_settings
from skillshub.database import get_db
from skillshub.errors import UnauthenticatedError, UnauthorizedError
from skillshub.models.enums import Role
from skillshub.services.auth import Identity, resolve_session

settings = get_settings()


def get_optional_identity(request: Request, db: Session = Depends(get_db)) -> Identity | None:
    """Get the caller if authenticated, None otherwise."""
    token = request.cookies.get(settings.session_cookie_name)
    return resolve_session(db, token)


def get_current_identity(request: Request, db: Session = Depends(get_db)) -> Identity:
    """Get the authenticated caller. Raises 401 if not authenticated.

    Use this as a dependency for protected routes.
    """
    identity = resolve_session(db, request.cookies.get(settings.session_cookie_name))
    if identity is None:
        raise UnauthenticatedError("Unauthorized")
    return identity


def require_roles(*roles: Role):
    """Build a dependency that admits only callers holding one of ``roles``."""
    allowed = {Role(r).value for r in roles}

    def dependency(identity: Identity = Depends(get_current_identity)) -> Identity:
        if identity.role not in allowed:
            raise UnauthorizedError("Forbidden")
        return identity

    return dependency


require_seeker = require_roles(Role.JOB_SEEKER)
require_employer = require_roles(Role.EMPLOYER)
require_employer_or_admin = require_roles(Role.EMPLOYER, Role.ADMIN)
