import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from skillshub.config import get_settings
from skillshub.database import get_db
from skillshub.dependencies import get_current_identity
from skillshub.errors import NotFoundError, UnauthenticatedError, UnauthorizedError, ValidationError
from skillshub.models import EmployerProfile, SeekerProfile, User
from skillshub.models.enums import Role
from skillshub.schemas import (
    EmployerSignup,
    LoginRequest,
    ResendOtpRequest,
    SeekerSignup,
    VerifyOtpRequest,
)
from skillshub.services.access import commit_or_raise
from skillshub.services.auth import (
    Identity,
    create_session,
    destroy_session,
    hash_password,
    issue_verification_code,
    latest_verification_token,
    otp_matches,
    redirect_for_role,
    verify_password,
)
from skillshub.services.email import MailSender, get_mail_sender, send_otp_email

logger = logging.getLogger(__name__)
router = APIRouter()
settings = get_settings()


def set_session_cookie(response: Response, token: str) -> None:
    # Secure only in production (HTTPS)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=60 * 60 * 24 * settings.session_expire_days,
        path="/",
    )


def _create_account(db: Session, data, role: Role) -> tuple[User, str]:
    """Create the user and its verification code. The profile is added by the caller."""
    existing = (
        db.query(User)
        .filter(or_(User.email == data.email, User.username == data.username))
        .first()
    )
    if existing:
        raise ValidationError("Email or username already exists")

    user = User(
        email=data.email,
        username=data.username,
        password_hash=hash_password(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
        phone=data.phone,
        role=Role.USER.value,
        is_email_verified=False,
    )
    db.add(user)
    db.flush()
    code = issue_verification_code(db, user.id)
    # Promoted once the profile row exists in the same transaction
    user.role = role.value
    return user, code


def _finish_signup(db: Session, mailer: MailSender, user: User, code: str) -> dict:
    commit_or_raise(db, "Registration failed. Please try again.")
    logger.info("Registered %s account for %s", user.role, user.email)

    if not send_otp_email(mailer, user.email, code, user.full_name):
        logger.warning("OTP email to %s failed; user can request a resend", user.email)

    return {
        "success": True,
        "message": "Registration successful. Please verify your email.",
        "userId": user.id,
    }


@router.post("/signup/seeker", status_code=status.HTTP_201_CREATED)
def signup_seeker(
    data: SeekerSignup,
    db: Session = Depends(get_db),
    mailer: MailSender = Depends(get_mail_sender),
):
    """Register a job seeker and email a verification code."""
    user, code = _create_account(db, data, Role.JOB_SEEKER)
    db.add(SeekerProfile(user_id=user.id, pathway=data.pathway.value))
    return _finish_signup(db, mailer, user, code)


@router.post("/signup/employer", status_code=status.HTTP_201_CREATED)
def signup_employer(
    data: EmployerSignup,
    db: Session = Depends(get_db),
    mailer: MailSender = Depends(get_mail_sender),
):
    """Register an employer and email a verification code."""
    user, code = _create_account(db, data, Role.EMPLOYER)
    db.add(EmployerProfile(
        user_id=user.id,
        org_name=data.org_name,
        org_type=data.org_type,
        website=data.website,
    ))
    return _finish_signup(db, mailer, user, code)


@router.post("/verify-otp")
def verify_otp(data: VerifyOtpRequest, response: Response, db: Session = Depends(get_db)):
    """Check the emailed code, mark the account verified and log the user in."""
    token = latest_verification_token(db, data.user_id)
    if not token:
        raise ValidationError("Invalid or expired OTP")
    if not otp_matches(token.code_hash, data.otp):
        raise ValidationError("Invalid OTP code")

    user = db.get(User, data.user_id)
    user.is_email_verified = True
    db.delete(token)
    commit_or_raise(db, "Verification failed. Please try again.")

    set_session_cookie(response, create_session(db, user.id))
    return {
        "success": True,
        "message": "Email verified successfully",
        "redirectUrl": redirect_for_role(user.role),
        "role": user.role,
    }


@router.post("/resend-otp")
def resend_otp(
    data: ResendOtpRequest,
    db: Session = Depends(get_db),
    mailer: MailSender = Depends(get_mail_sender),
):
    """Replace the user's verification code and email it again."""
    user = db.get(User, data.user_id)
    if not user:
        raise NotFoundError("User not found")
    if user.is_email_verified:
        raise ValidationError("Email is already verified")

    code = issue_verification_code(db, user.id)
    commit_or_raise(db, "Failed to resend OTP. Please try again.")
    send_otp_email(mailer, user.email, code, user.full_name)

    return {"success": True, "message": "OTP has been resent to your email"}


@router.post("/login")
def login(data: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """Login and receive a session cookie."""
    user = db.query(User).filter(User.email == data.email).first()

    if not user or not verify_password(data.password, user.password_hash):
        raise UnauthenticatedError("Invalid email or password")

    if not user.is_email_verified:
        raise UnauthorizedError(
            "Please verify your email before logging in",
            needsVerification=True,
            userId=user.id,
        )

    user.last_login_at = datetime.utcnow()
    commit_or_raise(db, "Login failed. Please try again.")

    set_session_cookie(response, create_session(db, user.id))
    return {
        "success": True,
        "message": "Login successful",
        "redirectUrl": redirect_for_role(user.role),
        "role": user.role,
    }


@router.post("/logout")
def logout(request: Request, response: Response, db: Session = Depends(get_db)):
    """Destroy the session and clear the cookie."""
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        destroy_session(db, token)
    response.delete_cookie(key=settings.session_cookie_name, path="/")
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me")
def get_me(identity: Identity = Depends(get_current_identity)):
    """Get the current authenticated user."""
    return {"user": identity.to_dict()}


@router.get("/check-availability")
def check_availability(
    email: str | None = None,
    username: str | None = None,
    db: Session = Depends(get_db),
):
    """Report whether an email and/or username is already taken."""
    if not email and not username:
        raise ValidationError("Either email or username must be provided")

    exists = {}
    if email:
        exists["email"] = db.query(User.id).filter(User.email == email).first() is not None
    if username:
        exists["username"] = db.query(User.id).filter(User.username == username).first() is not None

    return {
        "available": {field: not taken for field, taken in exists.items()},
        "exists": exists,
    }
