"""Tests for reference data seeding, health and mail helpers."""

from unittest.mock import patch

from skillshub.models import District, Region, Skill, User
from skillshub.seed import REGIONS, SKILLS, seed_admin, seed_all, seed_regions, seed_skills
from skillshub.services.auth import verify_password
from skillshub.services.email import ConsoleMailSender, SmtpMailSender, send_otp_email


class TestSeed:
    """Tests for the idempotent seed command."""

    def test_regions_and_districts(self, db):
        assert seed_regions(db) == 16
        assert db.query(Region).count() == 5
        assert db.query(District).count() == 16

        # Running again adds nothing
        assert seed_regions(db) == 0
        assert db.query(District).count() == 16

    def test_skills_upsert(self, db):
        db.add(Skill(slug="welding", name="Old name"))
        db.commit()

        added = seed_skills(db)
        assert added == len(SKILLS) - 1
        assert db.query(Skill).count() == len(SKILLS)
        assert db.query(Skill).filter(Skill.slug == "welding").one().name == "Welding"

    def test_admin_created_verified(self, db, settings):
        admin = seed_admin(db)
        assert admin.role == "ADMIN"
        assert admin.is_email_verified is True
        assert verify_password(settings.admin_password, admin.password_hash)

        seed_admin(db)
        assert db.query(User).filter(User.email == settings.admin_email).count() == 1

    def test_seed_all(self, db):
        seed_all(db)
        assert db.query(Region).count() == len(REGIONS)
        assert db.query(User).filter(User.role == "ADMIN").count() == 1

    def test_regions_endpoint(self, client, db):
        seed_regions(db)
        regions = client.get("/api/locations/regions").json()["regions"]
        assert [r["name"] for r in regions] == ["Eastern", "North West", "Northern", "Southern", "Western Area"]
        western = regions[-1]
        assert [d["name"] for d in western["districts"]] == ["Western Area Rural", "Western Area Urban"]


class TestHealth:
    def test_health(self, client, db):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "database": "healthy"}


class TestEmail:
    """Tests for verification email delivery."""

    def test_otp_email_contains_code(self, mailer):
        assert send_otp_email(mailer, "a@example.com", "123456", "Aminata <b>") is True
        sent = mailer.sent[0]
        assert "123456" in sent["text"]
        assert "123456" in sent["html"]
        assert "Aminata &lt;b&gt;" in sent["html"]

    def test_failed_delivery_returns_false(self, mailer):
        mailer.succeed = False
        assert send_otp_email(mailer, "a@example.com", "123456") is False

    def test_console_sender(self):
        assert ConsoleMailSender().send("a@example.com", "s", "<p>h</p>", "t") is True

    def test_smtp_failure_is_reported_not_raised(self):
        sender = SmtpMailSender("localhost", 2525, "user", "pass", "from@example.com")
        with patch("smtplib.SMTP", side_effect=ConnectionRefusedError("no server")):
            assert sender.send("a@example.com", "s", "<p>h</p>", "t") is False

    def test_smtp_uses_starttls_and_login(self):
        sender = SmtpMailSender("smtp.example.com", 587, "user", "pass", "from@example.com")
        with patch("smtplib.SMTP") as mock_smtp:
            assert sender.send("a@example.com", "Subject", "<p>h</p>", "t") is True

        mock_smtp.assert_called_once_with("smtp.example.com", 587, timeout=10.0)
        server = mock_smtp.return_value
        server.starttls.assert_called_once()
        server.__enter__.return_value.login.assert_called_once_with("user", "pass")
        server.__enter__.return_value.send_message.assert_called_once()
