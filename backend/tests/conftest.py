"""Pytest configuration and fixtures for Salone SkillsHub tests."""

import os
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment before importing app modules
os.environ["ENVIRONMENT"] = "development"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SMTP_USER"] = ""
os.environ["S3_ACCESS_KEY_ID"] = ""

from skillshub.config import get_settings
from skillshub.database import Base, get_db
from skillshub.main import app
from skillshub.models import (
    EmployerProfile,
    Job,
    JobSkill,
    SeekerProfile,
    SeekerSkill,
    Skill,
    User,
)
from skillshub.models.enums import JobStatus, JobType, Pathway, Role
from skillshub.services.auth import create_session, hash_password
from skillshub.services.email import MailSender, get_mail_sender
from skillshub.services.storage import ObjectStore, StoredObject, get_object_store


# Use in-memory SQLite for tests
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Enable foreign key support for SQLite (required for ON DELETE CASCADE/SET NULL)
@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Hashing once keeps fixtures fast
PASSWORD = "password123"
PASSWORD_HASH = hash_password(PASSWORD)


class FakeMailSender(MailSender):
    """Records outgoing mail instead of sending it."""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.sent = []

    def send(self, to_email, subject, html_body, text_body):
        self.sent.append({"to": to_email, "subject": subject, "html": html_body, "text": text_body})
        return self.succeed


class FakeObjectStore(ObjectStore):
    """Keeps uploaded objects in memory."""

    def __init__(self):
        self.objects = {}

    def put(self, key, data, content_type):
        self.objects[key] = (data, content_type)
        return StoredObject(key=key, size_bytes=len(data), etag='"fake-etag"')

    def url_for(self, key, expires_in=None):
        return f"https://files.example.com/{key}?expires={expires_in or 3600}"

    def delete(self, key):
        self.objects.pop(key, None)


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def db():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def mailer():
    return FakeMailSender()


@pytest.fixture
def store():
    return FakeObjectStore()


@pytest.fixture
def client(db, mailer, store):
    """Create a test client with database, mail and storage overrides."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mail_sender] = lambda: mailer
    app.dependency_overrides[get_object_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def login(client, db, settings):
    """Log the test client in as ``user`` by creating a session directly."""
    def _login(user: User) -> str:
        token = create_session(db, user.id)
        client.cookies.clear()
        client.cookies.set(settings.session_cookie_name, token)
        return token

    return _login


@pytest.fixture
def skills(db):
    """A small skill taxonomy keyed by slug."""
    rows = [
        Skill(slug="web-design", name="Web Design"),
        Skill(slug="data-entry", name="Data Entry"),
        Skill(slug="welding", name="Welding"),
        Skill(slug="tailoring", name="Tailoring"),
        Skill(slug="accounting", name="Accounting"),
    ]
    db.add_all(rows)
    db.commit()
    return {skill.slug: skill for skill in rows}


@pytest.fixture
def make_user(db):
    def _make_user(email, role=Role.USER, verified=True, **kwargs):
        kwargs.setdefault("username", email.split("@")[0])
        kwargs.setdefault("first_name", email.split("@")[0].title())
        kwargs.setdefault("last_name", "Tester")
        user = User(
            email=email,
            password_hash=PASSWORD_HASH,
            role=Role(role).value,
            is_email_verified=verified,
            **kwargs,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_seeker(db, make_user):
    """Create a JOB_SEEKER user with a profile and the given skills."""
    def _make_seeker(email, skills=(), pathway=Pathway.GRADUATE, verified=True,
                     created_at=None, years_experience=None, **profile_fields):
        user_kwargs = {"created_at": created_at} if created_at else {}
        user = make_user(email, role=Role.JOB_SEEKER, verified=verified, **user_kwargs)
        profile = SeekerProfile(
            user_id=user.id,
            pathway=Pathway(pathway).value,
            years_experience=years_experience,
            **profile_fields,
        )
        db.add(profile)
        db.flush()
        for skill in skills:
            db.add(SeekerSkill(seeker_profile_id=profile.id, skill_id=skill.id, level=3))
        db.commit()
        db.refresh(user)
        return user

    return _make_seeker


@pytest.fixture
def make_employer(db, make_user):
    """Create an EMPLOYER user with an employer profile."""
    def _make_employer(email, org_name="Acme Ltd"):
        user = make_user(email, role=Role.EMPLOYER)
        db.add(EmployerProfile(user_id=user.id, org_name=org_name))
        db.commit()
        db.refresh(user)
        return user

    return _make_employer


@pytest.fixture
def make_job(db):
    """Create a job for an employer user."""
    def _make_job(employer_user, title="Job", skills=(), status=JobStatus.OPEN,
                  type=JobType.GIG, created_at=None, **fields):
        job = Job(
            employer_id=employer_user.employer_profile.id,
            title=title,
            description=f"{title} description",
            type=JobType(type).value,
            status=JobStatus(status).value,
            created_at=created_at or datetime.utcnow(),
            **fields,
        )
        db.add(job)
        db.flush()
        for skill in skills:
            db.add(JobSkill(job_id=job.id, skill_id=skill.id, required=True))
        db.commit()
        db.refresh(job)
        return job

    return _make_job


@pytest.fixture
def seeker(make_seeker, skills):
    """A verified graduate seeker with web design and data entry."""
    return make_seeker("seeker@example.com", skills=[skills["web-design"], skills["data-entry"]])


@pytest.fixture
def employer(make_employer):
    return make_employer("employer@example.com", org_name="Freetown Digital")


@pytest.fixture
def other_employer(make_employer):
    return make_employer("other@example.com", org_name="Bo Builders")


@pytest.fixture
def open_job(make_job, employer, skills):
    return make_job(
        employer,
        title="Website Redesign",
        skills=[skills["web-design"]],
        created_at=datetime.utcnow() - timedelta(hours=1),
    )
