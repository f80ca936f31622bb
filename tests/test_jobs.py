import logging
from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import SQLAlchemyError

from jobportal.errors import Forbidden, PreconditionError, ValidationError
from jobportal.extensions import db
from jobportal.models import Application, Job
from jobportal.services import applications as app_service
from jobportal.services import jobs as svc

from factories import COVER_LETTER, JOB_DESCRIPTION, auth_header, make_application, make_company, make_job, make_user


def _payload(**overrides):
    body = {
        "title": "Platform Engineer",
        "description": JOB_DESCRIPTION,
        "location": "Kampala",
        "type": "contract",
        "experience": "senior",
        "category": "engineering",
        "salary": {"min": 70000, "max": 90000, "currency": "EUR"},
        "skills": ["python", "postgres"],
        "isRemote": True,
        "applicationDeadline": (datetime.utcnow() + timedelta(days=14)).isoformat() + "Z",
    }
    body.update(overrides)
    return body


class TestNormalize:

    def test_nested_salary(self):
        fields = svc.normalize_job_payload(_payload())
        assert fields["salary_min"] == 70000
        assert fields["salary_max"] == 90000
        assert fields["salary_currency"] == "EUR"
        assert fields["job_type"] == "contract"
        assert "type" not in fields

    def test_flat_salary(self):
        body = _payload(salaryMin=1000, salaryMax=2000)
        del body["salary"]
        fields = svc.normalize_job_payload(body)
        assert (fields["salary_min"], fields["salary_max"]) == (1000, 2000)
        assert "salary_currency" not in fields

    def test_only_present_keys(self):
        assert svc.normalize_job_payload({"title": "  Data Analyst "}) == {"title": "Data Analyst"}


class TestJobService:

    def test_create_needs_company(self, ctx):
        employer = make_user("employer")
        with pytest.raises(PreconditionError):
            svc.create_job(employer, svc.normalize_job_payload(_payload()))

    def test_create(self, ctx):
        employer = make_user("employer")
        company = make_company(employer)
        job = svc.create_job(employer, svc.normalize_job_payload(_payload()))
        assert job.company_id == company.id
        assert job.posted_by_id == employer.id
        assert job.is_remote is True
        assert job.skills == ["python", "postgres"]
        assert company.job_ids == [job.id]

    def test_create_rejects_inverted_salary(self, ctx):
        employer = make_user("employer")
        make_company(employer)
        with pytest.raises(ValidationError) as exc:
            svc.create_job(employer, svc.normalize_job_payload(_payload(salary={"min": 5, "max": 1})))
        assert "salary_max" in exc.value.fields

    def test_only_poster_or_admin_manages(self, ctx):
        employer = make_user("employer")
        job = make_job(make_company(employer))
        stranger = make_user("employer")
        with pytest.raises(Forbidden):
            svc.update_job(stranger, job.id, {"title": "Hijacked title"})
        with pytest.raises(Forbidden):
            svc.delete_job(stranger, job.id)

        admin = make_user("admin")
        assert svc.toggle_active(admin, job.id).is_active is False

    def test_partial_update(self, ctx):
        employer = make_user("employer")
        job = make_job(make_company(employer))
        updated = svc.update_job(employer, job.id, {"title": "Senior Backend Engineer"})
        assert updated.title == "Senior Backend Engineer"
        assert updated.salary_min == 40000

    def test_delete_leaves_applications(self, ctx):
        employer = make_user("employer")
        job = make_job(make_company(employer))
        make_application(job, make_user("jobseeker"))
        svc.delete_job(employer, job.id)
        assert Job.query.count() == 0
        assert Application.query.count() == 1

    def test_search_filters_and_sort(self, ctx):
        employer = make_user("employer")
        company = make_company(employer)
        make_job(company, title="Python Developer", salary_min=30000, salary_max=45000)
        make_job(company, title="Data Scientist", job_type="part-time", salary_min=80000, salary_max=95000, is_remote=True)
        make_job(company, title="Office Manager", category="operations", salary_min=20000, salary_max=25000)

        assert [j.title for j in svc.search_jobs(q="python")] == ["Python Developer"]
        assert svc.search_jobs(filters={"type": "part-time"}).count() == 1
        assert svc.search_jobs(filters={"isRemote": "true"}).count() == 1
        assert svc.search_jobs(filters={"minSalary": "40000"}).count() == 2
        assert svc.search_jobs(filters={"maxSalary": "25000"}).count() == 1
        titles = [j.title for j in svc.search_jobs(sort="-salaryMin")]
        assert titles == ["Data Scientist", "Python Developer", "Office Manager"]
        with pytest.raises(ValidationError):
            svc.search_jobs(filters={"minSalary": "plenty"})


    def test_views_failure_is_not_fatal(self, ctx, monkeypatch, caplog):
        job_id = make_job(make_company(make_user("employer"))).id

        def broken_commit():
            raise SQLAlchemyError("store went away")

        monkeypatch.setattr(db.session(), "commit", broken_commit)
        with caplog.at_level(logging.WARNING, logger="jobportal.services.jobs"):
            job = svc.get_job(job_id)

        assert job.id == job_id
        assert job.views == 0
        assert "views increment failed" in caplog.text


class TestDeletedIds:

    def test_new_job_does_not_inherit_orphaned_applications(self, ctx):
        first_employer = make_user("employer")
        old_job = make_job(make_company(first_employer))
        seeker = make_user("jobseeker")
        make_application(old_job, seeker)
        old_id = old_job.id
        svc.delete_job(first_employer, old_id)

        second_employer = make_user("employer")
        new_job = make_job(make_company(second_employer, name="Beta Works"))

        assert new_job.id != old_id
        assert app_service.list_for_employer_jobs(second_employer).count() == 0
        application = app_service.submit_application(
            seeker, new_job.id, COVER_LETTER, "resume.pdf", 50000, "immediately")
        assert application.job_id == new_job.id


class TestJobsApi:

    def test_create_and_read(self, app, client):
        with app.app_context():
            employer = make_user("employer")
            make_company(employer)
            headers = auth_header(employer)

        resp = client.post("/api/jobs/", json=_payload(), headers=headers)
        assert resp.status_code == 201
        job = resp.get_json()["data"]
        assert job["salary"] == {"min": 70000, "max": 90000, "currency": "EUR"}

        detail = client.get(f"/api/jobs/{job['id']}").get_json()["data"]
        assert detail["views"] == 1
        assert detail["applicationIds"] == []
        assert detail["company"]["name"] == "Acme Labs"
        assert client.get(f"/api/jobs/{job['id']}").get_json()["data"]["views"] == 2

    def test_create_without_company(self, app, client):
        with app.app_context():
            headers = auth_header(make_user("employer"))
        resp = client.post("/api/jobs/", json=_payload(), headers=headers)
        assert resp.status_code == 400
        assert resp.get_json()["error"]["kind"] == "precondition_failed"

    def test_jobseeker_cannot_post(self, app, client):
        with app.app_context():
            headers = auth_header(make_user("jobseeker"))
        assert client.post("/api/jobs/", json=_payload(), headers=headers).status_code == 403

    def test_public_listing_paginates(self, app, client):
        with app.app_context():
            company = make_company(make_user("employer"))
            for i in range(12):
                make_job(company, title=f"Engineer number {i}")

        page = client.get("/api/jobs/?limit=5&page=2").get_json()
        assert page["count"] == 5
        assert page["total"] == 12
        assert page["pagination"] == {"next": {"page": 3, "limit": 5}, "prev": {"page": 1, "limit": 5}}

    def test_my_jobs_and_company_jobs(self, app, client):
        with app.app_context():
            employer = make_user("employer")
            company = make_company(employer)
            make_job(company)
            make_job(company, is_active=False)
            headers = auth_header(employer)
            company_id = company.id

        assert client.get("/api/jobs/my-jobs", headers=headers).get_json()["total"] == 2
        assert client.get(f"/api/jobs/company/{company_id}").get_json()["total"] == 1

    def test_missing_job(self, client):
        resp = client.get("/api/jobs/404")
        assert resp.status_code == 404
        assert resp.get_json()["error"]["kind"] == "not_found"
