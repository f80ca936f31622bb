# jobportal/services/applications.py
"""
Application engine.

Lifecycle of an Application: created by a job seeker against an active job
whose deadline has not passed, moved between statuses by the owner of the
job's company (or an admin), and deleted by its applicant while still
``pending``. One application per (job, applicant) pair; the unique
constraint on the table is the authority, the pre-insert lookup only gives
a friendlier answer in the common case.

Reading an application as the owning employer marks it viewed. That write
is a side effect of the read and never fails it.
"""
import logging
import os
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import Conflict, Forbidden, InvalidState, NotFound, ValidationError
from ..extensions import db, _
from ..forms import ApplicationForm, StatusForm, validate_fields
from ..models.application import Application, STATUSES, EMPLOYER_STATUSES
from ..models.job import Job
from . import storage_service
from .companies import company_for_owner

log = logging.getLogger(__name__)


# -----------------
# Authorization
# -----------------

def owns_company_of(actor, application: Application) -> bool:
    """True when ``actor`` owns the company the application was filed with."""
    company = application.company
    return company is not None and company.owner_id == actor.id


def can_view(actor, application: Application) -> bool:
    return (
        application.applicant_id == actor.id
        or owns_company_of(actor, application)
        or actor.is_admin
    )


def _get_or_404(application_id) -> Application:
    application = db.session.get(Application, application_id)
    if not application:
        raise NotFound(_("Application not found with id of %(id)s", id=application_id))
    return application


# -----------------
# Create
# -----------------

def submit_application(actor, job_id, cover_letter, resume, expected_salary, availability) -> Application:
    if actor.role != "jobseeker":
        raise Forbidden(_("Only job seekers can apply for jobs"))

    try:
        job_id = int(job_id)
    except (TypeError, ValueError):
        raise ValidationError(fields={"job": [_("Job id must be an integer")]})
    job = db.session.get(Job, job_id)
    if not job:
        raise NotFound(_("Job not found"))
    if not job.is_active:
        raise InvalidState(_("This job is no longer accepting applications"))
    if datetime.utcnow() > job.application_deadline:
        raise InvalidState(_("Application deadline has passed"))

    existing = Application.query.filter_by(job_id=job.id, applicant_id=actor.id).first()
    if existing:
        raise Conflict(_("You have already applied for this job"))

    fields = {
        "cover_letter": cover_letter.strip() if isinstance(cover_letter, str) else cover_letter,
        "resume": resume.strip() if isinstance(resume, str) else resume,
        "expected_salary": expected_salary,
        "availability": availability,
    }
    form = validate_fields(ApplicationForm, fields)

    application = Application(
        job_id=job.id,
        applicant_id=actor.id,
        company_id=job.company_id,
        cover_letter=form.cover_letter.data,
        resume=form.resume.data,
        expected_salary=form.expected_salary.data,
        availability=form.availability.data,
        status="pending",
        applied_at=datetime.utcnow(),
    )
    db.session.add(application)
    try:
        db.session.commit()
    except IntegrityError:
        # a concurrent submit won the race past the lookup above
        db.session.rollback()
        raise Conflict(_("You have already applied for this job"))

    log.info("Application %s submitted: job=%s applicant=%s", application.id, job.id, actor.id)
    return application


# -----------------
# Read
# -----------------

def get_application(actor, application_id) -> Application:
    application = _get_or_404(application_id)
    if not can_view(actor, application):
        raise Forbidden(_("User %(uid)s is not authorized to view this application", uid=actor.id))

    if owns_company_of(actor, application) and not application.is_viewed:
        application.is_viewed = True
        application.viewed_at = datetime.utcnow()
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            log.warning("could not mark application %s viewed: %s", application.id, e)
    return application


def list_for_applicant(actor):
    return (Application.query
            .filter(Application.applicant_id == actor.id)
            .order_by(Application.applied_at.desc()))


def list_for_company(actor, status: str | None = None, job_id=None):
    """Applications filed with the actor's company, optionally filtered."""
    if status and status not in STATUSES:
        raise ValidationError(fields={"status": [_("Invalid status")]})

    company = company_for_owner(actor.id)
    if not company:
        return Application.query.filter(db.false())

    qry = Application.query.filter(Application.company_id == company.id)
    if status:
        qry = qry.filter(Application.status == status)
    if job_id:
        qry = qry.filter(Application.job_id == job_id)
    return qry.order_by(Application.applied_at.desc())


def list_for_employer_jobs(actor):
    """Applications on jobs the actor posted, traversed through Job.posted_by_id."""
    posted = select(Job.id).where(Job.posted_by_id == actor.id)
    return (Application.query
            .filter(Application.job_id.in_(posted))
            .order_by(Application.applied_at.desc()))


# -----------------
# Mutate
# -----------------

def update_status(actor, application_id, status, notes=None, allowed=STATUSES) -> Application:
    """
    Move an application to ``status``. ``allowed`` is the status set of the
    calling surface (all statuses, or ``EMPLOYER_STATUSES`` for the
    employer dashboard). Any allowed status may follow any other.
    """
    if status not in allowed:
        raise ValidationError(fields={"status": [_("Invalid status")]})
    if notes is not None:
        if not isinstance(notes, str):
            raise ValidationError(fields={"notes": [_("Notes must be text")]})
        validate_fields(StatusForm, {"notes": notes})

    application = _get_or_404(application_id)
    if not (actor.is_admin or owns_company_of(actor, application)):
        raise Forbidden(_("User %(uid)s is not authorized to update this application", uid=actor.id))

    previous = application.status
    application.status = status
    if notes is not None:
        application.notes = notes.strip()
    application.updated_at = datetime.utcnow()
    db.session.commit()

    log.info("Application %s status %s -> %s by %s", application.id, previous, status, actor.id)
    return application


def update_status_from_dashboard(actor, application_id, status) -> Application:
    return update_status(actor, application_id, status, allowed=EMPLOYER_STATUSES)


def delete_application(actor, application_id):
    application = _get_or_404(application_id)
    if application.applicant_id != actor.id:
        raise Forbidden(_("User %(uid)s is not authorized to delete this application", uid=actor.id))
    if not application.is_pending:
        raise InvalidState(_("Cannot delete application that has been processed"))

    db.session.delete(application)
    db.session.commit()
    log.info("Application %s withdrawn by applicant %s", application_id, actor.id)


# -----------------
# Resume
# -----------------

def download_resume(actor, application_id) -> tuple[bytes, str]:
    """Return ``(data, filename)`` of the applicant's resume."""
    application = _get_or_404(application_id)
    if not owns_company_of(actor, application):
        raise Forbidden(_("Not authorized to access this application's resume"))

    applicant = application.applicant
    ref = (applicant.resume_path if applicant else None) or application.resume
    if not ref:
        raise NotFound(_("No resume found for this applicant"))

    try:
        data = storage_service.read_file(ref)
    except Forbidden:
        log.warning("resume reference %r of application %s is outside the upload folder", ref, application.id)
        raise NotFound(_("No resume found for this applicant"))
    return data, os.path.basename(ref)
