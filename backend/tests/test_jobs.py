"""Tests for the public job listings and seeker recommendations."""

from datetime import datetime, timedelta

from skillshub.models.enums import JobStatus, JobType


class TestAvailableJobs:
    """Tests for GET /api/jobs/available."""

    def test_lists_open_jobs_newest_first(self, client, employer, make_job):
        now = datetime.utcnow()
        make_job(employer, title="Older", created_at=now - timedelta(days=2))
        make_job(employer, title="Newer", created_at=now - timedelta(hours=1))
        make_job(employer, title="Closed", status=JobStatus.CLOSED, created_at=now)

        response = client.get("/api/jobs/available")
        assert response.status_code == 200
        titles = [j["title"] for j in response.json()["jobs"]]
        assert titles == ["Newer", "Older"]

    def test_no_authentication_required(self, client, open_job):
        response = client.get("/api/jobs/available")
        assert response.status_code == 200
        job = response.json()["jobs"][0]
        assert job["employer"]["name"] == "Freetown Digital"
        assert job["skills"][0]["slug"] == "web-design"

    def test_filters(self, client, employer, make_job):
        make_job(employer, title="Tailor needed", type=JobType.PART_TIME, location="Bo")
        make_job(employer, title="Welding gig", type=JobType.GIG, location="Freetown")

        by_type = client.get("/api/jobs/available", params={"type": "PART_TIME"}).json()["jobs"]
        assert [j["title"] for j in by_type] == ["Tailor needed"]

        by_location = client.get("/api/jobs/available", params={"location": "free"}).json()["jobs"]
        assert [j["title"] for j in by_location] == ["Welding gig"]

        by_search = client.get("/api/jobs/available", params={"search": "tailor"}).json()["jobs"]
        assert [j["title"] for j in by_search] == ["Tailor needed"]

        # Unknown and "all" types are ignored
        assert len(client.get("/api/jobs/available", params={"type": "all"}).json()["jobs"]) == 2
        assert len(client.get("/api/jobs/available", params={"type": "NOPE"}).json()["jobs"]) == 2


class TestJobDetail:
    def test_get_job(self, client, open_job):
        response = client.get(f"/api/jobs/{open_job.id}")
        assert response.status_code == 200
        job = response.json()["job"]
        assert job["title"] == "Website Redesign"
        assert job["applicationCount"] == 0
        assert "projectDuration" in job

    def test_unknown_job(self, client, db):
        response = client.get("/api/jobs/9999")
        assert response.status_code == 404
        assert response.json()["detail"] == "Job not found"


class TestRecommendedJobs:
    """Tests for GET /api/jobs/recommended."""

    def test_ranked_by_score_then_recency(self, client, login, make_seeker, employer, make_job, skills):
        seeker = make_seeker("ranker@example.com", skills=[skills["web-design"], skills["data-entry"]])
        now = datetime.utcnow()
        # Scores are relative to max(|job skills|, |seeker skills|) = 2 here
        partial_old = make_job(employer, title="Partial old", skills=[skills["web-design"]],
                               created_at=now - timedelta(days=3))
        full = make_job(employer, title="Full", skills=[skills["web-design"], skills["data-entry"]],
                        created_at=now - timedelta(days=5))
        partial_new = make_job(employer, title="Partial new", skills=[skills["data-entry"]],
                               created_at=now - timedelta(days=1))
        make_job(employer, title="Unrelated", skills=[skills["welding"]], created_at=now)

        login(seeker)
        response = client.get("/api/jobs/recommended")
        assert response.status_code == 200
        jobs = response.json()["jobs"]

        assert [j["id"] for j in jobs] == [full.id, partial_new.id, partial_old.id]
        assert [j["matchScore"] for j in jobs] == [100, 50, 50]
        assert jobs[0]["matchingSkillsCount"] == 2
        assert {s["name"] for s in response.json()["userSkills"]} == {"Web Design", "Data Entry"}

    def test_without_matching_lists_all_open_jobs(self, client, login, seeker, employer, make_job, skills):
        make_job(employer, title="Unrelated", skills=[skills["welding"]])
        make_job(employer, title="Related", skills=[skills["web-design"]])

        login(seeker)
        jobs = client.get("/api/jobs/recommended", params={"useMatching": "false"}).json()["jobs"]
        assert {j["title"] for j in jobs} == {"Unrelated", "Related"}
        assert all(j["matchScore"] == 0 for j in jobs)

    def test_seeker_without_skills_sees_all_jobs_at_zero(self, client, login, make_seeker, employer, make_job, skills):
        seeker = make_seeker("noskills@example.com")
        make_job(employer, title="Any", skills=[skills["welding"]])

        login(seeker)
        jobs = client.get("/api/jobs/recommended").json()["jobs"]
        assert [j["title"] for j in jobs] == ["Any"]
        assert jobs[0]["matchScore"] == 0

    def test_excludes_closed_jobs(self, client, login, seeker, employer, make_job, skills):
        make_job(employer, title="Closed", skills=[skills["web-design"]], status=JobStatus.CLOSED)
        login(seeker)
        assert client.get("/api/jobs/recommended").json()["jobs"] == []

    def test_requires_seeker_profile(self, client, login, make_user):
        user = make_user("noprofile@example.com", role="JOB_SEEKER")
        login(user)
        response = client.get("/api/jobs/recommended")
        assert response.status_code == 404
