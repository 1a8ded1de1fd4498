import enum


class Role(str, enum.Enum):
    # Assigned at signup until the seeker/employer profile exists
    USER = "USER"
    JOB_SEEKER = "JOB_SEEKER"
    EMPLOYER = "EMPLOYER"
    ADMIN = "ADMIN"


class Pathway(str, enum.Enum):
    STUDENT = "STUDENT"
    GRADUATE = "GRADUATE"
    ARTISAN = "ARTISAN"


class Gender(str, enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"


class JobType(str, enum.Enum):
    GIG = "GIG"
    INTERNSHIP = "INTERNSHIP"
    PART_TIME = "PART_TIME"
    FULL_TIME = "FULL_TIME"


class JobStatus(str, enum.Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class ApplicationStatus(str, enum.Enum):
    APPLIED = "APPLIED"
    SHORTLISTED = "SHORTLISTED"
    HIRED = "HIRED"
    REJECTED = "REJECTED"


class ContractStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class MilestoneStatus(str, enum.Enum):
    PROPOSED = "PROPOSED"
    IN_PROGRESS = "IN_PROGRESS"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    PAID = "PAID"


class NotificationType(str, enum.Enum):
    APPLICATION_RECEIVED = "APPLICATION_RECEIVED"
    APPLICATION_STATUS = "APPLICATION_STATUS"
    MESSAGE = "MESSAGE"
    RECRUITMENT = "RECRUITMENT"


class FileKind(str, enum.Enum):
    CV = "cv"
    COVER_LETTER = "cover-letter"
    RESUME = "resume"
    PORTFOLIO = "portfolio"
    PROFILE_PHOTO = "profile-photo"
    COMPANY_LOGO = "company-logo"
    OTHER = "other"
