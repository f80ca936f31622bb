import pytest

from jobportal.errors import Conflict, Forbidden, NotFound, ValidationError
from jobportal.models import Company, Job
from jobportal.services import companies as svc

from factories import auth_header, make_company, make_job, make_user


def _payload(**overrides):
    body = {
        "name": "Savanna Analytics",
        "description": "Data tooling for agricultural cooperatives.",
        "industry": "technology",
        "size": "51-200",
        "website": "https://savanna.acme.com",
        "founded": 2015,
        "location": {"city": "Arusha", "country": "Tanzania"},
        "contact": {"email": "hello@savanna.acme.com", "phone": "+255 700 000"},
        "benefits": ["Remote Fridays", " "],
    }
    body.update(overrides)
    return body


class TestCompanyService:

    def test_upsert_creates_then_updates(self, ctx):
        employer = make_user("employer")
        first = svc.upsert_company(employer, svc.normalize_company_payload(_payload()))
        assert first.contact_email == employer.email
        assert first.benefits == ["Remote Fridays"]
        assert first.founded == 2015

        second = svc.upsert_company(employer, svc.normalize_company_payload(_payload(size="201-500")))
        assert second.id == first.id
        assert second.size == "201-500"
        assert Company.query.count() == 1

    def test_strict_create_conflicts(self, ctx):
        employer = make_user("employer")
        svc.create_company_strict(employer, svc.normalize_company_payload(_payload()))
        with pytest.raises(Conflict):
            svc.create_company_strict(employer, svc.normalize_company_payload(_payload(name="Second Co")))

    def test_strict_create_validates(self, ctx):
        employer = make_user("employer")
        with pytest.raises(ValidationError) as exc:
            svc.create_company_strict(employer, svc.normalize_company_payload(
                _payload(industry="space-mining", contact={"email": "nope"})))
        assert {"industry", "contact_email"} <= set(exc.value.fields)

    def test_update_by_owner_only(self, ctx):
        owner = make_user("employer")
        company = make_company(owner)
        with pytest.raises(Forbidden):
            svc.update_company(make_user("employer"), company.id, {"name": "Taken Over"})
        assert svc.update_company(owner, company.id, {"name": "Acme Renamed"}).name == "Acme Renamed"
        with pytest.raises(ValidationError):
            svc.update_company(owner, company.id, {"size": "huge"})

    def test_delete_leaves_jobs(self, ctx):
        owner = make_user("employer")
        company = make_company(owner)
        make_job(company)
        company_id = company.id
        svc.delete_company(owner, company_id)
        assert Job.query.count() == 1
        with pytest.raises(NotFound):
            svc.get_company(company_id)

    def test_verification_is_admin_only(self, ctx):
        company = make_company(make_user("employer"))
        with pytest.raises(Forbidden):
            svc.set_verified(make_user("employer"), company.id, True)
        assert svc.set_verified(make_user("admin"), company.id, True).is_verified is True

    def test_search_hides_inactive(self, ctx):
        make_company(make_user("employer"), name="Visible Co")
        make_company(make_user("employer"), name="Hidden Co", is_active=False)
        make_company(make_user("employer"), name="Clinic Co", industry="healthcare")
        assert [c.name for c in svc.search_companies(sort="name")] == ["Clinic Co", "Visible Co"]
        assert svc.search_companies(industry="healthcare").count() == 1
        assert svc.search_companies(q="visible").count() == 1


class TestCompaniesApi:

    def test_strict_path_conflict(self, app, client):
        with app.app_context():
            headers = auth_header(make_user("employer"))
        assert client.post("/api/companies/", json=_payload(), headers=headers).status_code == 201
        resp = client.post("/api/companies/", json=_payload(), headers=headers)
        assert resp.status_code == 409

    def test_employer_upsert_path(self, app, client):
        with app.app_context():
            headers = auth_header(make_user("employer"))
        first = client.put("/api/employer/company", json=_payload(), headers=headers).get_json()["data"]
        second = client.put("/api/employer/company", json=_payload(name="Savanna Labs"), headers=headers).get_json()["data"]
        assert first["id"] == second["id"]
        assert second["name"] == "Savanna Labs"

    def test_detail_lists_active_jobs(self, app, client):
        with app.app_context():
            company = make_company(make_user("employer"))
            make_job(company)
            make_job(company, is_active=False)
            company_id = company.id
        data = client.get(f"/api/companies/{company_id}").get_json()["data"]
        assert len(data["jobs"]) == 1

    def test_my_company(self, app, client):
        with app.app_context():
            employer = make_user("employer")
            make_job(make_company(employer))
            headers = auth_header(employer)
            lonely = auth_header(make_user("employer"))
        data = client.get("/api/companies/my-company", headers=headers).get_json()["data"]
        assert len(data["jobIds"]) == 1
        assert client.get("/api/companies/my-company", headers=lonely).status_code == 404
