"""Seed reference data: regions and districts, the skill taxonomy, the admin account.

Safe to run repeatedly. Usage::

    python -m skillshub.seed
"""

import logging

from sqlalchemy.orm import Session

from skillshub.config import get_settings
from skillshub.database import SessionLocal
from skillshub.models import District, Region, Skill, User
from skillshub.models.enums import Role
from skillshub.services.auth import hash_password

logger = logging.getLogger(__name__)

REGIONS = {
    "Eastern": ["Kailahun", "Kenema", "Kono"],
    "Northern": ["Bombali", "Falaba", "Koinadugu", "Tonkolili"],
    "North West": ["Kambia", "Karene", "Port Loko"],
    "Southern": ["Bo", "Bonthe", "Moyamba", "Pujehun"],
    "Western Area": ["Western Area Rural", "Western Area Urban"],
}

SKILLS = [
    # Technical
    ("frontend-development", "Front-end Development"),
    ("backend-development", "Back-end Development"),
    ("fullstack-development", "Full-stack Development"),
    ("mobile-development", "Mobile Development"),
    ("ui-ux-design", "UI/UX Design"),
    ("graphic-design", "Graphic Design"),
    ("web-design", "Web Design"),
    ("data-entry", "Data Entry"),
    ("data-analysis", "Data Analysis"),
    ("database-management", "Database Management"),
    ("cloud-computing", "Cloud Computing"),
    ("cybersecurity", "Cybersecurity"),
    # Business and marketing
    ("digital-marketing", "Digital Marketing"),
    ("social-media-marketing", "Social Media Marketing"),
    ("content-writing", "Content Writing"),
    ("copywriting", "Copywriting"),
    ("seo", "SEO (Search Engine Optimization)"),
    ("business-development", "Business Development"),
    ("project-management", "Project Management"),
    ("customer-service", "Customer Service"),
    # Creative
    ("video-editing", "Video Editing"),
    ("photography", "Photography"),
    ("animation", "Animation"),
    ("illustration", "Illustration"),
    # Professional
    ("accounting", "Accounting"),
    ("bookkeeping", "Bookkeeping"),
    ("financial-analysis", "Financial Analysis"),
    ("human-resources", "Human Resources"),
    ("administration", "Administration"),
    # Artisan
    ("tailoring", "Tailoring"),
    ("welding", "Welding"),
    ("carpentry", "Carpentry"),
    ("electrical-work", "Electrical Work"),
    ("plumbing", "Plumbing"),
    ("masonry", "Masonry"),
    # Other
    ("translation", "Translation"),
    ("tutoring", "Tutoring"),
    ("event-planning", "Event Planning"),
    ("catering", "Catering"),
]


def seed_regions(db: Session) -> int:
    """Insert missing regions and districts. Returns the number of districts added."""
    added = 0
    for region_name, district_names in REGIONS.items():
        region = db.query(Region).filter(Region.name == region_name).first()
        if not region:
            region = Region(name=region_name)
            db.add(region)
            db.flush()

        existing = {d.name for d in region.districts}
        for name in district_names:
            if name not in existing:
                db.add(District(name=name, region_id=region.id))
                added += 1
    db.commit()
    return added


def seed_skills(db: Session) -> int:
    """Upsert the skill taxonomy by slug. Returns the number of skills added."""
    existing = {skill.slug: skill for skill in db.query(Skill).all()}
    added = 0
    for slug, name in SKILLS:
        skill = existing.get(slug)
        if skill:
            skill.name = name
        else:
            db.add(Skill(slug=slug, name=name))
            added += 1
    db.commit()
    return added


def seed_admin(db: Session) -> User:
    """Create the admin account, or promote an existing user with the admin email."""
    settings = get_settings()
    admin = db.query(User).filter(User.email == settings.admin_email).first()
    if admin:
        admin.role = Role.ADMIN.value
        admin.is_email_verified = True
    else:
        admin = User(
            email=settings.admin_email,
            username=settings.admin_username,
            password_hash=hash_password(settings.admin_password),
            first_name="System",
            last_name="Admin",
            role=Role.ADMIN.value,
            is_email_verified=True,
        )
        db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin


def seed_all(db: Session) -> None:
    districts = seed_regions(db)
    skills = seed_skills(db)
    admin = seed_admin(db)
    logger.info(
        "Seed complete: %d districts added, %d skills added, admin %s",
        districts, skills, admin.email,
    )


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    db = SessionLocal()
    try:
        seed_all(db)
    except Exception:
        db.rollback()
        logger.exception("Seeding failed")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
