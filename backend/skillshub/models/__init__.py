from skillshub.models.user import User
from skillshub.models.session import UserSession, EmailVerificationToken
from skillshub.models.file_object import FileObject
from skillshub.models.profile import SeekerProfile, EmployerProfile
from skillshub.models.skill import Skill, SeekerSkill, JobSkill
from skillshub.models.job import Job
from skillshub.models.application import Application
from skillshub.models.contract import Contract, Milestone
from skillshub.models.message import MessageThread, DirectMessage
from skillshub.models.notification import Notification
from skillshub.models.portfolio import PortfolioItem
from skillshub.models.location import Region, District

__all__ = [
    "User",
    "UserSession",
    "EmailVerificationToken",
    "FileObject",
    "SeekerProfile",
    "EmployerProfile",
    "Skill",
    "SeekerSkill",
    "JobSkill",
    "Job",
    "Application",
    "Contract",
    "Milestone",
    "MessageThread",
    "DirectMessage",
    "Notification",
    "PortfolioItem",
    "Region",
    "District",
]
