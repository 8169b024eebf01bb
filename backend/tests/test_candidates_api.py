from datetime import timedelta

from verifyhub.core.timeutils import utcnow
from verifyhub.models import CallingLog, CandidateNote, VerificationDocument, VerificationResponse, DocumentType
from verifyhub.verifications.status import VerificationStatus as S


class TestCreateCandidate:
    def test_create(self, client):
        response = client.post(
            "/api/candidates",
            json={
                "name": "Asha Rao",
                "email": "asha@example.com",
                "phone": "9876543210",
                "city": "Pune",
                "joining_designation": "Data Engineer",
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Asha Rao"
        assert data["resume_url"] is None

    def test_missing_name_or_email(self, client):
        response = client.post("/api/candidates", json={"email": "x@example.com"})
        assert response.status_code == 400
        assert response.json()["message"] == "Name and email are required"

        response = client.post("/api/candidates", json={"name": "No Email"})
        assert response.status_code == 400

    def test_duplicate_email(self, client):
        payload = {"name": "Asha", "email": "dup@example.com"}
        assert client.post("/api/candidates", json=payload).status_code == 201
        response = client.post("/api/candidates", json=payload)
        assert response.status_code == 409
        assert response.json()["message"] == "Candidate with this email already exists"


class TestOverviewAndSummary:
    def test_overview_uses_joining_designation(self, client, make_candidate, make_verification):
        candidate = make_candidate(joining_designation="SRE")
        make_verification(candidate, S.DISCREPANCY)
        make_verification(candidate, S.CLEAR)

        data = client.get(f"/api/candidates/{candidate.id}/overview").json()
        assert data["position"] == "SRE"
        assert data["verification_status"] == "REVIEW"

    def test_overview_falls_back_to_latest_employment(self, client, make_candidate, make_verification):
        candidate = make_candidate(joining_designation=None)
        make_verification(candidate, designation="Intern", created_at=utcnow() - timedelta(days=400))
        make_verification(candidate, designation="Analyst")

        data = client.get(f"/api/candidates/{candidate.id}/overview").json()
        assert data["position"] == "Analyst"
        assert data["verification_status"] == "IN_PROGRESS"

    def test_overview_without_anything(self, client, make_candidate):
        candidate = make_candidate(joining_designation=None)
        data = client.get(f"/api/candidates/{candidate.id}/overview").json()
        assert data["position"] == "-"
        assert data["verification_status"] == "CLEAR"

    def test_overview_unknown_candidate(self, client):
        assert client.get("/api/candidates/12345/overview").status_code == 404

    def test_summary_without_employments(self, client, make_candidate):
        candidate = make_candidate()
        data = client.get(f"/api/candidates/{candidate.id}/summary").json()
        assert data["overall_status"] == "CLEAR"
        assert data["risk_score"] == 0
        assert data["remarks"] == ["No previous employments found"]
        assert data["employment_breakdown"] == []

    def test_summary_with_discrepancy(self, client, db_session, make_candidate, make_verification):
        candidate = make_candidate()
        make_verification(candidate, S.DISCREPANCY, previous_company_name="Acme")
        make_verification(candidate, S.CLEAR, previous_company_name="Globex")
        for i in range(7):
            db_session.add(CandidateNote(candidate_id=candidate.id, note=f"note {i}"))
        db_session.commit()

        data = client.get(f"/api/candidates/{candidate.id}/summary").json()
        assert data["risk_score"] == 45
        assert data["overall_status"] == "REVIEW"
        assert data["remarks"] == [
            "One or more employment verifications have discrepancies",
            "Multiple previous employments detected",
        ]
        assert [(b["company"], b["status"], b["risk"]) for b in data["employment_breakdown"]] == [
            ("Acme", "DISCREPANCY", 40),
            ("Globex", "CLEAR", 0),
        ]
        assert len(data["hr_notes"]) == 5


class TestTimeline:
    def test_timeline_endpoint(self, client, db_session, make_candidate, make_verification):
        candidate = make_candidate()
        start = utcnow() - timedelta(days=5)
        verification = make_verification(
            candidate, S.CLEAR, created_at=start, previous_company_name="Acme"
        )
        response = VerificationResponse(
            employment_verification_id=verification.id,
            answers={"designation_match": True},
            submitted_at=start + timedelta(days=2),
        )
        response.documents.append(
            VerificationDocument(
                document_type=DocumentType.RELIEVING_LETTER,
                file_url="memory://relieving.pdf",
                uploaded_at=start + timedelta(days=2, minutes=1),
            )
        )
        db_session.add(response)
        db_session.add(
            CallingLog(
                employment_verification_id=verification.id,
                call_time=start + timedelta(days=1),
                outcome="Busy",
            )
        )
        db_session.commit()

        data = client.get(f"/api/candidates/{candidate.id}/employment-timeline").json()
        assert data["candidate_id"] == candidate.id
        assert [e["type"] for e in data["timeline"]] == [
            "EMPLOYMENT_ADDED",
            "CALL_LOGGED",
            "VERIFICATION_SUBMITTED",
            "DOCUMENT_UPLOADED",
        ]
        assert data["timeline"][3]["message"] == "RELIEVING LETTER uploaded"
        assert data["timeline"][1]["message"] == "Manual HR call logged: Busy"

    def test_timeline_unknown_candidate(self, client):
        assert client.get("/api/candidates/999/employment-timeline").status_code == 404


class TestQueue:
    def _seed(self, make_candidate, make_verification):
        pending = make_candidate(name="Pending Person", city="Pune", joining_designation="Backend Engineer")
        make_verification(pending, S.CLEAR)
        make_verification(pending, S.PENDING, created_at=utcnow() - timedelta(days=3, hours=1))

        failed = make_candidate(name="Failed Person", city="Mumbai", joining_designation="Data Analyst")
        make_verification(failed, S.FAILED)

        done = make_candidate(name="Done Person", city="pune", joining_designation="Frontend Engineer")
        make_verification(done, S.CLEAR)
        return pending, failed, done

    def test_all(self, client, make_candidate, make_verification):
        self._seed(make_candidate, make_verification)
        data = client.get("/api/candidates/queue").json()
        assert data["count"] == 3

    def test_bucket_filter(self, client, make_candidate, make_verification):
        pending, failed, done = self._seed(make_candidate, make_verification)

        data = client.get("/api/candidates/queue", params={"status": "pending"}).json()
        assert [r["id"] for r in data["results"]] == [pending.id]
        row = data["results"][0]
        assert row["progress"] == "1/2"
        assert row["risk_score"] == 10
        assert row["tat_days"] == 4

        data = client.get("/api/candidates/queue", params={"status": "failed"}).json()
        assert [r["id"] for r in data["results"]] == [failed.id]
        assert data["results"][0]["risk_score"] == 70

        data = client.get("/api/candidates/queue", params={"status": "completed"}).json()
        assert [r["id"] for r in data["results"]] == [done.id]

    def test_invalid_bucket(self, client):
        assert client.get("/api/candidates/queue", params={"status": "archived"}).status_code == 400

    def test_city_designation_and_text_filters(self, client, make_candidate, make_verification):
        pending, failed, done = self._seed(make_candidate, make_verification)

        data = client.get("/api/candidates/queue", params={"city": "PUNE"}).json()
        assert {r["id"] for r in data["results"]} == {pending.id, done.id}

        data = client.get("/api/candidates/queue", params={"city": "pune", "designation": "backend"}).json()
        assert [r["id"] for r in data["results"]] == [pending.id]

        data = client.get("/api/candidates/queue", params={"q": "FAILED person"}).json()
        assert [r["id"] for r in data["results"]] == [failed.id]

    def test_newest_first(self, client, make_candidate, make_verification):
        pending, failed, done = self._seed(make_candidate, make_verification)
        data = client.get("/api/candidates/queue").json()
        assert [r["id"] for r in data["results"]] == [done.id, failed.id, pending.id]


class TestSearch:
    def test_requires_two_characters(self, client):
        assert client.get("/api/candidates/search", params={"q": " a "}).status_code == 400
        assert client.get("/api/candidates/search").status_code == 400

    def test_matches_name_email_and_phone(self, client, make_candidate, make_verification):
        asha = make_candidate(name="Asha Rao", email="asha.rao@example.com", phone="9000011111")
        make_verification(asha, S.FAILED)
        make_candidate(name="Ravi Kumar", email="ravi@example.com", phone="9000022222")

        data = client.get("/api/candidates/search", params={"q": "asha"}).json()
        assert data["count"] == 1
        assert data["results"][0]["verification_status"] == "HIGH_RISK"

        data = client.get("/api/candidates/search", params={"q": "RAVI@EXAMPLE"}).json()
        assert data["count"] == 1

        data = client.get("/api/candidates/search", params={"q": "22222"}).json()
        assert [r["name"] for r in data["results"]] == ["Ravi Kumar"]

    def test_limit(self, client, make_candidate):
        for i in range(12):
            make_candidate(name=f"Batch {i}")
        data = client.get("/api/candidates/search", params={"q": "batch"}).json()
        assert data["count"] == 10


class TestNotes:
    def test_add_note(self, client, make_candidate):
        candidate = make_candidate()
        response = client.post(f"/api/candidates/{candidate.id}/notes", json={"note": "Called twice"})
        assert response.status_code == 201
        assert response.json()["note"] == "Called twice"

    def test_blank_note(self, client, make_candidate):
        candidate = make_candidate()
        response = client.post(f"/api/candidates/{candidate.id}/notes", json={"note": "   "})
        assert response.status_code == 400
        assert response.json()["message"] == "Note is required"

    def test_unknown_candidate(self, client):
        assert client.post("/api/candidates/999/notes", json={"note": "x"}).status_code == 404


class TestResume:
    def test_upload(self, client, storage, make_candidate):
        candidate = make_candidate()
        response = client.post(
            f"/api/candidates/{candidate.id}/resume",
            files={"resume": ("cv.pdf", b"%PDF-1.4 cv", "application/pdf")},
        )
        assert response.status_code == 200
        resume_url = response.json()["resume_url"]
        assert resume_url.startswith("memory://resumes/")
        assert storage.files[resume_url] == b"%PDF-1.4 cv"

    def test_missing_file(self, client, make_candidate):
        candidate = make_candidate()
        response = client.post(f"/api/candidates/{candidate.id}/resume")
        assert response.status_code == 400
        assert response.json()["message"] == "Resume file is required"

    def test_storage_failure(self, client, storage, make_candidate):
        candidate = make_candidate()
        storage.fail_on_save = 1
        response = client.post(
            f"/api/candidates/{candidate.id}/resume",
            files={"resume": ("cv.pdf", b"%PDF", "application/pdf")},
        )
        assert response.status_code == 500
        assert response.json()["message"] == "Failed to upload resume"
