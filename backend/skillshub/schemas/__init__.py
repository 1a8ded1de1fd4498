from skillshub.schemas.base import RequestModel
from skillshub.schemas.user import (
    SeekerSignup,
    EmployerSignup,
    VerifyOtpRequest,
    ResendOtpRequest,
    LoginRequest,
    UserUpdate,
)
from skillshub.schemas.job import JobSkillInput, JobCreate, JobUpdate
from skillshub.schemas.application import ApplyRequest, ApplicationStatusUpdate, RecruitRequest
from skillshub.schemas.message import SendMessageRequest, NotificationUpdate
from skillshub.schemas.profile import (
    SeekerSkillInput,
    SeekerProfileUpdate,
    EmployerProfileUpdate,
    PortfolioItemCreate,
    PortfolioItemUpdate,
)

__all__ = [
    "RequestModel",
    "SeekerSignup",
    "EmployerSignup",
    "VerifyOtpRequest",
    "ResendOtpRequest",
    "LoginRequest",
    "UserUpdate",
    "JobSkillInput",
    "JobCreate",
    "JobUpdate",
    "ApplyRequest",
    "ApplicationStatusUpdate",
    "RecruitRequest",
    "SendMessageRequest",
    "NotificationUpdate",
    "SeekerSkillInput",
    "SeekerProfileUpdate",
    "EmployerProfileUpdate",
    "PortfolioItemCreate",
    "PortfolioItemUpdate",
]
