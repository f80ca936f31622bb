# jobportal/services/jobs.py
"""Job directory: postings owned by an employer's company."""
import logging
from sqlalchemy import or_, String
from sqlalchemy.exc import SQLAlchemyError

from ..errors import Forbidden, NotFound, PreconditionError, ValidationError
from ..extensions import db, _
from ..forms import JobForm, parse_datetime, validate_fields
from ..models.job import Job
from .companies import company_for_owner
from .pagination import sort_clauses

log = logging.getLogger(__name__)

_LIST_FIELDS = ("requirements", "responsibilities", "skills", "benefits")
_SCALARS = ("title", "description", "location", "job_type", "experience", "category", "salary_currency")

SORT_KEYS = {
    "createdAt": Job.created_at,
    "title": Job.title,
    "salaryMin": Job.salary_min,
    "salaryMax": Job.salary_max,
    "views": Job.views,
    "applicationDeadline": Job.application_deadline,
}


def _as_bool(val):
    if isinstance(val, bool):
        return val
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def normalize_job_payload(payload: dict) -> dict:
    """
    Map the wire shape to canonical fields, keeping only keys that are present.

    Salary arrives either nested (``salary: {min, max, currency}``) or flat
    (``salaryMin``/``salaryMax``); both end up as ``salary_min``,
    ``salary_max`` and ``salary_currency``.
    """
    payload = payload or {}
    out = {}
    for key in ("title", "description", "location", "experience", "category") + _LIST_FIELDS:
        if key in payload:
            out[key] = payload[key]
    if "type" in payload:
        out["job_type"] = payload["type"]
    if "isRemote" in payload:
        out["is_remote"] = payload["isRemote"]
    if "applicationDeadline" in payload:
        out["application_deadline"] = payload["applicationDeadline"]

    salary = payload.get("salary")
    if isinstance(salary, dict):
        if salary.get("min") is not None:
            out["salary_min"] = salary["min"]
        if salary.get("max") is not None:
            out["salary_max"] = salary["max"]
        if salary.get("currency"):
            out["salary_currency"] = salary["currency"]
    if "salary_min" not in out and payload.get("salaryMin") is not None:
        out["salary_min"] = payload["salaryMin"]
    if "salary_max" not in out and payload.get("salaryMax") is not None:
        out["salary_max"] = payload["salaryMax"]

    for key in ("title", "description", "location"):
        if isinstance(out.get(key), str):
            out[key] = out[key].strip()
    return out


def _apply(job: Job, fields: dict):
    for key in _SCALARS:
        if key in fields:
            setattr(job, key, fields[key])
    for key in ("salary_min", "salary_max"):
        if key in fields:
            setattr(job, key, float(fields[key]))
    for key in _LIST_FIELDS:
        if key in fields:
            if not isinstance(fields[key], (list, tuple)):
                raise ValidationError(fields={key: [_("Must be a list")]})
            setattr(job, key, [str(v).strip() for v in fields[key] if str(v).strip()])
    if "is_remote" in fields:
        job.is_remote = _as_bool(fields["is_remote"])
    if "application_deadline" in fields:
        job.application_deadline = parse_datetime(fields["application_deadline"])


def _get_or_404(job_id) -> Job:
    job = db.session.get(Job, job_id)
    if not job:
        raise NotFound(_("Job not found with id of %(id)s", id=job_id))
    return job


def _ensure_can_manage(actor, job: Job):
    if job.posted_by_id != actor.id and not actor.is_admin:
        raise Forbidden(_("User %(uid)s is not authorized to modify this job", uid=actor.id))


def create_job(actor, fields: dict) -> Job:
    validate_fields(JobForm, fields)

    company = company_for_owner(actor.id)
    if not company:
        raise PreconditionError(_("You must create a company profile first"))

    job = Job(company_id=company.id, posted_by_id=actor.id)
    _apply(job, fields)
    if not job.salary_currency:
        job.salary_currency = "USD"
    db.session.add(job)
    db.session.commit()
    log.info("Job %s created for company %s by %s", job.id, company.id, actor.id)
    return job


def get_job(job_id, count_view: bool = True) -> Job:
    job = _get_or_404(job_id)
    if count_view:
        # best effort, no dedup
        try:
            Job.query.filter_by(id=job.id).update({Job.views: Job.views + 1}, synchronize_session=False)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            log.warning("views increment failed for job %s: %s", job_id, e)
        db.session.refresh(job)
    return job


def update_job(actor, job_id, fields: dict) -> Job:
    job = _get_or_404(job_id)
    _ensure_can_manage(actor, job)
    validate_fields(JobForm, fields, only=set(fields))
    _apply(job, fields)
    if job.salary_max < job.salary_min:
        db.session.rollback()
        raise ValidationError(fields={"salary_max": [_("Maximum salary cannot be lower than minimum salary")]})
    db.session.commit()
    return job


def toggle_active(actor, job_id) -> Job:
    job = _get_or_404(job_id)
    _ensure_can_manage(actor, job)
    job.is_active = not job.is_active
    db.session.commit()
    log.info("Job %s is_active=%s by %s", job.id, job.is_active, actor.id)
    return job


def delete_job(actor, job_id):
    """Applications referencing the job are left in place."""
    job = _get_or_404(job_id)
    _ensure_can_manage(actor, job)
    db.session.delete(job)
    db.session.commit()
    log.info("Job %s deleted by %s", job_id, actor.id)


def list_by_company(company_id, active_only: bool = True):
    qry = Job.query.filter(Job.company_id == company_id)
    if active_only:
        qry = qry.filter(Job.is_active.is_(True))
    return qry.order_by(Job.created_at.desc())


def list_by_owner(actor):
    return Job.query.filter(Job.posted_by_id == actor.id).order_by(Job.created_at.desc())


def search_jobs(q: str = "", filters: dict | None = None, sort: str = ""):
    filters = filters or {}
    qry = Job.query

    q = (q or "").strip()
    if q:
        like = f"%{q}%"
        qry = qry.filter(or_(
            Job.title.ilike(like),
            Job.description.ilike(like),
            Job.location.ilike(like),
            db.cast(Job.skills, String).ilike(like),
        ))

    for key, col in (("type", Job.job_type), ("experience", Job.experience), ("category", Job.category)):
        if filters.get(key):
            qry = qry.filter(col == filters[key])
    if filters.get("location"):
        qry = qry.filter(Job.location.ilike(f"%{filters['location']}%"))
    if filters.get("company"):
        qry = qry.filter(Job.company_id == filters["company"])
    if filters.get("isRemote") not in (None, ""):
        qry = qry.filter(Job.is_remote.is_(_as_bool(filters["isRemote"])))
    if filters.get("isActive") not in (None, ""):
        qry = qry.filter(Job.is_active.is_(_as_bool(filters["isActive"])))
    try:
        if filters.get("minSalary") not in (None, ""):
            qry = qry.filter(Job.salary_max >= float(filters["minSalary"]))
        if filters.get("maxSalary") not in (None, ""):
            qry = qry.filter(Job.salary_min <= float(filters["maxSalary"]))
    except (TypeError, ValueError):
        raise ValidationError(fields={"salary": [_("Salary filters must be numbers")]})

    return qry.order_by(*sort_clauses(sort, SORT_KEYS, Job.created_at))
