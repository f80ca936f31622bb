"""Row builders for tests. Call them inside an app context."""
from datetime import datetime, timedelta
from itertools import count

from jobportal.extensions import db
from jobportal.models import Application, Company, Job, User
from jobportal.security import issue_token

PASSWORD = "secret123"
COVER_LETTER = (
    "I have spent six years building and operating Flask services "
    "and would enjoy bringing that experience to your team."
)
JOB_DESCRIPTION = (
    "Build and maintain the public REST API, review pull requests "
    "and help the team ship reliable features every week."
)

_seq = count(1)


def make_user(role="jobseeker", **kw):
    n = next(_seq)
    user = User(
        name=kw.pop("name", f"User {n}"),
        email=kw.pop("email", f"user{n}@acme.com"),
        role=role,
        **kw,
    )
    user.set_password(PASSWORD)
    db.session.add(user)
    db.session.commit()
    return user


def make_company(owner, **kw):
    fields = dict(
        name="Acme Labs",
        description="We build tools for people who build tools.",
        industry="technology",
        size="11-50",
        contact_email=owner.email,
    )
    fields.update(kw)
    company = Company(owner_id=owner.id, **fields)
    db.session.add(company)
    db.session.commit()
    return company


def make_job(company, poster_id=None, **kw):
    fields = dict(
        title="Backend Engineer",
        description=JOB_DESCRIPTION,
        location="Nairobi",
        job_type="full-time",
        experience="mid",
        category="technology",
        salary_min=40000,
        salary_max=60000,
        is_active=True,
        application_deadline=datetime.utcnow() + timedelta(days=1),
    )
    fields.update(kw)
    job = Job(company_id=company.id, posted_by_id=poster_id or company.owner_id, **fields)
    db.session.add(job)
    db.session.commit()
    return job


def make_application(job, applicant, **kw):
    fields = dict(
        cover_letter=COVER_LETTER,
        resume="resume.pdf",
        expected_salary=50000,
        availability="immediately",
        status="pending",
    )
    fields.update(kw)
    application = Application(job_id=job.id, applicant_id=applicant.id, company_id=job.company_id, **fields)
    db.session.add(application)
    db.session.commit()
    return application


def auth_header(user) -> dict:
    return {"Authorization": f"Bearer {issue_token(user)}"}
