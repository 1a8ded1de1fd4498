import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta

from passlib.context import CryptContext
from sqlalchemy.orm import Session

from skillshub.config import get_settings
from skillshub.models import User, UserSession, EmailVerificationToken

settings = get_settings()
logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, resolved from a session token."""
    user_id: int
    email: str
    username: str | None
    first_name: str | None
    last_name: str | None
    role: str
    is_email_verified: bool

    @property
    def display_name(self) -> str:
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return name or self.username or self.email

    @classmethod
    def from_user(cls, user: User) -> "Identity":
        return cls(
            user_id=user.id,
            email=user.email,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
            is_email_verified=bool(user.is_email_verified),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "email": self.email,
            "username": self.username,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "role": self.role,
            "isEmailVerified": self.is_email_verified,
        }


def _utcnow() -> datetime:
    # Naive UTC, matching what the DateTime columns store
    return datetime.utcnow()


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def generate_session_token() -> str:
    """Generate an opaque 256-bit session token."""
    return secrets.token_urlsafe(32)


def create_session(db: Session, user_id: int) -> str:
    """Insert a session row for the user and return its token.

    The row is committed here so the token is usable as soon as the
    cookie reaches the client.
    """
    token = generate_session_token()
    db.add(UserSession(
        session_token=token,
        user_id=user_id,
        expires=_utcnow() + timedelta(days=settings.session_expire_days),
    ))
    db.commit()
    logger.info("Created session for user %s", user_id)
    return token


def resolve_session(db: Session, token: str | None) -> Identity | None:
    """Map a session token to an Identity.

    Returns None for a missing token, an unknown token or an expired
    session. Never extends the expiry. Database errors propagate.
    """
    if not token:
        return None

    row = (
        db.query(UserSession, User)
        .join(User, User.id == UserSession.user_id)
        .filter(UserSession.session_token == token)
        .first()
    )
    if row is None:
        return None

    session, user = row
    if session.expires <= _utcnow():
        return None

    return Identity.from_user(user)


def destroy_session(db: Session, token: str) -> None:
    """Delete every session with this token. Deleting nothing is fine."""
    db.query(UserSession).filter(UserSession.session_token == token).delete(
        synchronize_session=False
    )
    db.commit()


def purge_expired_sessions(db: Session) -> int:
    """Remove expired sessions and verification tokens. Returns sessions removed."""
    now = _utcnow()
    removed = (
        db.query(UserSession)
        .filter(UserSession.expires <= now)
        .delete(synchronize_session=False)
    )
    tokens_removed = (
        db.query(EmailVerificationToken)
        .filter(EmailVerificationToken.expires_at <= now)
        .delete(synchronize_session=False)
    )
    db.commit()
    if removed or tokens_removed:
        logger.info(
            "Purged %d expired sessions and %d verification tokens", removed, tokens_removed
        )
    return removed


def generate_otp() -> str:
    """Six-digit numeric code for email verification."""
    return f"{secrets.randbelow(1_000_000):06d}"


def hash_otp(code: str) -> str:
    return hashlib.sha256(code.encode("utf-8")).hexdigest()


def otp_matches(code_hash: str, code: str) -> bool:
    """Constant-time comparison of a stored OTP hash with a submitted code."""
    return hmac.compare_digest(code_hash, hash_otp(code))


def issue_verification_code(db: Session, user_id: int) -> str:
    """Replace the user's verification tokens with a fresh code.

    Returns the plain code so it can be mailed. The caller commits.
    """
    db.query(EmailVerificationToken).filter(
        EmailVerificationToken.user_id == user_id
    ).delete(synchronize_session=False)

    code = generate_otp()
    db.add(EmailVerificationToken(
        user_id=user_id,
        code_hash=hash_otp(code),
        token=secrets.token_hex(32),
        expires_at=_utcnow() + timedelta(minutes=settings.otp_expire_minutes),
    ))
    return code


def latest_verification_token(db: Session, user_id: int) -> EmailVerificationToken | None:
    """Newest unexpired verification token for the user, if any."""
    return (
        db.query(EmailVerificationToken)
        .filter(
            EmailVerificationToken.user_id == user_id,
            EmailVerificationToken.expires_at > _utcnow(),
        )
        .order_by(EmailVerificationToken.created_at.desc(), EmailVerificationToken.id.desc())
        .first()
    )


def redirect_for_role(role: str) -> str:
    return {
        "JOB_SEEKER": "/dashboard/seeker",
        "EMPLOYER": "/dashboard/employer",
        "ADMIN": "/dashboard/admin",
    }.get(role, "/")
