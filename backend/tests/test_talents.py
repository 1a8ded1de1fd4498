"""Tests for talent search (employers) and public freelancer listings."""

from datetime import datetime, timedelta

from skillshub.models import PortfolioItem


class TestTalentSearch:
    """Tests for GET /api/talents."""

    def test_ranked_by_employer_open_job_skills(self, client, employer, make_job, make_seeker, login, skills):
        now = datetime.utcnow()
        make_job(employer, title="Web", skills=[skills["web-design"], skills["data-entry"]])
        make_job(employer, title="Closed", skills=[skills["welding"]], status="CLOSED")

        half_old = make_seeker("half-old@example.com", skills=[skills["web-design"]],
                               created_at=now - timedelta(days=3))
        full = make_seeker("full@example.com",
                           skills=[skills["web-design"], skills["data-entry"], skills["tailoring"]],
                           created_at=now - timedelta(days=9))
        half_new = make_seeker("half-new@example.com", skills=[skills["data-entry"]],
                               created_at=now - timedelta(days=1))
        # Only has a skill from the closed job
        make_seeker("welder@example.com", skills=[skills["welding"]], created_at=now)

        login(employer)
        data = client.get("/api/talents").json()
        talents = data["talents"]

        assert [t["userId"] for t in talents] == [full.id, half_new.id, half_old.id]
        # Extra skills on a talent do not lower the score
        assert [t["matchScore"] for t in talents] == [100, 50, 50]
        assert talents[0]["matchingSkillsCount"] == 2
        assert data["pagination"]["total"] == 3

    def test_pagination_applies_after_ranking(self, client, employer, make_job, make_seeker, login, skills):
        now = datetime.utcnow()
        make_job(employer, title="Web", skills=[skills["web-design"], skills["data-entry"]])
        # The best match is the oldest, so it would fall off a page cut before ranking
        best = make_seeker("best@example.com", skills=[skills["web-design"], skills["data-entry"]],
                           created_at=now - timedelta(days=30))
        for i in range(3):
            make_seeker(f"partial{i}@example.com", skills=[skills["web-design"]],
                        created_at=now - timedelta(days=i))

        login(employer)
        data = client.get("/api/talents", params={"limit": 2, "offset": 0}).json()
        assert data["talents"][0]["userId"] == best.id
        assert len(data["talents"]) == 2
        assert data["pagination"] == {"total": 4, "limit": 2, "offset": 0, "hasMore": True}

        last = client.get("/api/talents", params={"limit": 2, "offset": 2}).json()
        assert len(last["talents"]) == 2
        assert last["pagination"]["hasMore"] is False

    def test_without_matching_lists_all_verified_seekers(self, client, employer, make_seeker, login, skills):
        now = datetime.utcnow()
        older = make_seeker("older@example.com", created_at=now - timedelta(days=2))
        newer = make_seeker("newer@example.com", skills=[skills["welding"]], created_at=now)
        make_seeker("unverified@example.com", verified=False)

        login(employer)
        talents = client.get("/api/talents", params={"useMatching": "false"}).json()["talents"]
        assert [t["userId"] for t in talents] == [newer.id, older.id]
        assert all(t["matchScore"] == 0 for t in talents)

    def test_employer_without_open_jobs_sees_everyone(self, client, employer, make_seeker, login, skills):
        make_seeker("one@example.com", skills=[skills["welding"]])
        make_seeker("two@example.com")
        login(employer)
        assert client.get("/api/talents").json()["pagination"]["total"] == 2

    def test_filters(self, client, employer, make_seeker, login, skills):
        make_seeker("artisan@example.com", pathway="ARTISAN", skills=[skills["welding"]],
                    years_experience=6, profession="Welder")
        make_seeker("student@example.com", pathway="STUDENT", years_experience=1)

        login(employer)
        params = {"useMatching": "false"}
        by_pathway = client.get("/api/talents", params={**params, "pathway": "ARTISAN"}).json()["talents"]
        assert [t["email"] for t in by_pathway] == ["artisan@example.com"]

        by_skill = client.get("/api/talents", params={**params, "skillId": skills["welding"].id}).json()["talents"]
        assert [t["email"] for t in by_skill] == ["artisan@example.com"]

        by_experience = client.get("/api/talents", params={**params, "minExperience": 5}).json()["talents"]
        assert [t["email"] for t in by_experience] == ["artisan@example.com"]

        by_search = client.get("/api/talents", params={**params, "search": "weld"}).json()["talents"]
        assert [t["email"] for t in by_search] == ["artisan@example.com"]

    def test_talent_detail(self, client, db, employer, seeker, login):
        db.add(PortfolioItem(profile_id=seeker.seeker_profile.id, title="Shop website"))
        db.commit()

        login(employer)
        response = client.get(f"/api/talents/{seeker.seeker_profile.id}")
        assert response.status_code == 200
        talent = response.json()["talent"]
        assert talent["email"] == "seeker@example.com"
        assert [s["name"] for s in talent["skills"]] == ["Data Entry", "Web Design"]
        assert talent["portfolio"][0]["title"] == "Shop website"

    def test_talent_detail_not_found(self, client, employer, login):
        login(employer)
        response = client.get("/api/talents/9999")
        assert response.status_code == 404
        assert response.json()["detail"] == "Talent not found"


class TestFreelancers:
    """Tests for the public /api/freelancers endpoints."""

    def test_top_three_by_experience(self, client, make_seeker):
        make_seeker("one@example.com", years_experience=1)
        make_seeker("ten@example.com", years_experience=10)
        make_seeker("none@example.com")
        make_seeker("five@example.com", years_experience=5)
        make_seeker("twenty@example.com", years_experience=20, verified=False)

        freelancers = client.get("/api/freelancers/top").json()["freelancers"]
        assert [f["yearsExperience"] for f in freelancers] == [10, 5, 1]
        assert freelancers[0]["profession"] == "Professional"

    def test_available_filters(self, client, make_seeker):
        make_seeker("artisan@example.com", pathway="ARTISAN", years_experience=4)
        make_seeker("grad@example.com", pathway="GRADUATE", years_experience=2)

        freelancers = client.get("/api/freelancers/available", params={"pathway": "ARTISAN"}).json()["freelancers"]
        assert len(freelancers) == 1
        assert freelancers[0]["pathway"] == "ARTISAN"

        experienced = client.get("/api/freelancers/available", params={"minExperience": 3}).json()["freelancers"]
        assert [f["yearsExperience"] for f in experienced] == [4]

    def test_public_profile_hides_contact_details(self, client, seeker):
        response = client.get(f"/api/freelancers/{seeker.seeker_profile.id}")
        assert response.status_code == 200
        data = response.json()
        assert "email" not in data
        assert {s["slug"] for s in data["skills"]} == {"web-design", "data-entry"}

    def test_unknown_profile(self, client, db):
        assert client.get("/api/freelancers/9999").status_code == 404
