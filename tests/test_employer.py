from pathlib import Path

from factories import auth_header, make_application, make_company, make_job, make_user


def _seed(app, with_resume=False):
    with app.app_context():
        employer = make_user("employer")
        company = make_company(employer)
        job = make_job(company)
        make_job(company, is_active=False)
        seeker = make_user("jobseeker")
        if with_resume:
            folder = Path(app.config["UPLOAD_FOLDER"]) / "resumes"
            folder.mkdir(parents=True, exist_ok=True)
            (folder / f"user_{seeker.id}_resume.pdf").write_bytes(b"%PDF-1.4 resume")
            seeker.resume_path = f"resumes/user_{seeker.id}_resume.pdf"
        application = make_application(job, seeker)
        make_application(job, make_user("jobseeker"), status="accepted")
        return application.id, auth_header(employer), auth_header(seeker)


def test_dashboard(app, client):
    _, employer, _ = _seed(app)
    data = client.get("/api/employer/dashboard", headers=employer).get_json()["data"]
    assert data["stats"] == {"totalJobs": 2, "activeJobs": 1, "totalApplications": 2, "pendingApplications": 1}
    assert data["company"]["name"] == "Acme Labs"
    assert len(data["recentApplications"]) == 2


def test_role_gate(app, client):
    _, _, seeker = _seed(app)
    assert client.get("/api/employer/dashboard", headers=seeker).status_code == 403
    assert client.get("/api/employer/dashboard").status_code == 401


def test_dashboard_status_subset(app, client):
    app_id, employer, _ = _seed(app)
    url = f"/api/employer/applications/{app_id}/status"
    assert client.put(url, json={"status": "reviewed"}, headers=employer).status_code == 400
    resp = client.put(url, json={"status": "shortlisted"}, headers=employer)
    assert resp.get_json()["data"]["status"] == "shortlisted"


def test_applications_listing(app, client):
    _, employer, _ = _seed(app)
    listing = client.get("/api/employer/applications", headers=employer).get_json()
    assert listing["total"] == 2


def test_resume_download(app, client):
    app_id, employer, _ = _seed(app, with_resume=True)
    resp = client.get(f"/api/employer/applications/{app_id}/resume", headers=employer)
    assert resp.status_code == 200
    assert resp.data == b"%PDF-1.4 resume"
    assert "attachment" in resp.headers["Content-Disposition"]
