# jobportal/services/admin.py
"""
Admin oversight: aggregation and moderation across users, companies, jobs
and applications. Every entry point checks the admin role first.

The user cascade commits step by step. A failure part-way leaves the
earlier deletions in place.
"""
import logging
from sqlalchemy import asc, desc, or_

from ..errors import Forbidden, InvalidState, NotFound, Unavailable, ValidationError
from ..extensions import db, _
from ..forms import RoleForm, validate_fields
from ..models.application import Application, STATUSES
from ..models.company import Company
from ..models.job import Job
from ..models.user import User, _iso
from . import companies as company_service
from . import storage_service

log = logging.getLogger(__name__)

RECENT_LIMIT = 5


def require_admin(actor):
    if not actor or not getattr(actor, "is_authenticated", False) or actor.role != "admin":
        raise Forbidden(_("Administrator access required"))


def _get_user_or_404(user_id) -> User:
    user = db.session.get(User, user_id)
    if not user:
        raise NotFound(_("User not found with id of %(id)s", id=user_id))
    return user


# -----------------
# Dashboard
# -----------------

def dashboard(actor) -> dict:
    require_admin(actor)
    stats = {
        "totalUsers": User.query.count(),
        "totalJobs": Job.query.count(),
        "totalCompanies": Company.query.count(),
        "totalApplications": Application.query.count(),
        "activeJobs": Job.query.filter(Job.is_active.is_(True)).count(),
        "pendingApplications": Application.query.filter_by(status="pending").count(),
    }
    recent_jobs = Job.query.order_by(desc(Job.created_at)).limit(RECENT_LIMIT).all()
    recent_apps = Application.query.order_by(desc(Application.applied_at)).limit(RECENT_LIMIT).all()
    return {
        "stats": stats,
        "recentJobs": [
            {**j.summary(), "createdAt": _iso(j.created_at),
             "company": {"id": j.company.id, "name": j.company.name} if j.company else None}
            for j in recent_jobs
        ],
        "recentApplications": [
            {
                "id": a.id,
                "status": a.status,
                "appliedAt": _iso(a.applied_at),
                "job": {"id": a.job.id, "title": a.job.title} if a.job else None,
                "applicant": {"id": a.applicant.id, "name": a.applicant.name} if a.applicant else None,
            }
            for a in recent_apps
        ],
    }


# -----------------
# Listings (queries; the caller paginates)
# -----------------

def users_query(actor, q: str = "", role: str = "", sort: str = "-created"):
    require_admin(actor)
    base = User.query
    q = (q or "").strip()
    if q:
        like = f"%{q}%"
        base = base.filter(or_(User.name.ilike(like), User.email.ilike(like)))
    if role:
        base = base.filter(User.role == role)

    if sort == "created":
        base = base.order_by(asc(User.created_at))
    elif sort == "name":
        base = base.order_by(asc(User.name))
    elif sort == "last_login":
        base = base.order_by(desc(User.last_login_at))
    else:
        base = base.order_by(desc(User.created_at))
    return base


def companies_query(actor):
    require_admin(actor)
    return Company.query.order_by(desc(Company.created_at))


def jobs_query(actor):
    require_admin(actor)
    return Job.query.order_by(desc(Job.created_at))


def applications_query(actor):
    require_admin(actor)
    return Application.query.order_by(desc(Application.applied_at))


# -----------------
# Moderation
# -----------------

def set_user_role(actor, user_id, role) -> User:
    require_admin(actor)
    validate_fields(RoleForm, {"role": role})
    user = _get_user_or_404(user_id)
    user.role = role
    db.session.commit()
    log.info("User %s role -> %s by admin %s", user.id, role, actor.id)
    return user


def set_user_verified(actor, user_id, verified: bool) -> User:
    require_admin(actor)
    user = _get_user_or_404(user_id)
    user.is_verified = bool(verified)
    db.session.commit()
    return user


def set_company_verified(actor, company_id, verified: bool = True) -> Company:
    require_admin(actor)
    return company_service.set_verified(actor, company_id, verified)


def toggle_job_active(actor, job_id) -> Job:
    require_admin(actor)
    job = db.session.get(Job, job_id)
    if not job:
        raise NotFound(_("Job not found with id of %(id)s", id=job_id))
    job.is_active = not job.is_active
    db.session.commit()
    log.info("Job %s is_active=%s by admin %s", job.id, job.is_active, actor.id)
    return job


def bulk_update_status(actor, application_ids, status) -> dict:
    require_admin(actor)
    if status not in STATUSES:
        raise ValidationError(fields={"status": [_("Invalid status")]})
    ids = sorted({int(i) for i in (application_ids or []) if str(i).isdigit()})
    if not ids:
        raise ValidationError(fields={"ids": [_("Select at least one application.")]})

    apps = Application.query.filter(Application.id.in_(ids)).all()
    for a in apps:
        a.status = status
    db.session.commit()

    log.info("Bulk status %s on %d application(s) by admin %s", status, len(apps), actor.id)
    return {"updated": len(apps), "skipped": len(ids) - len(apps)}


def delete_user(actor, user_id) -> dict:
    """
    Delete a user with their applications; for employers also the jobs they
    posted and every application on those jobs. The employer's company stays.
    """
    require_admin(actor)
    user = _get_user_or_404(user_id)
    if user.id == actor.id:
        raise InvalidState(_("Admin cannot delete their own account"))

    removed = {"applications": 0, "jobs": 0}

    removed["applications"] += (Application.query
                                .filter(Application.applicant_id == user.id)
                                .delete(synchronize_session=False))
    db.session.commit()

    if user.role == "employer":
        job_ids = [r[0] for r in db.session.execute(db.select(Job.id).where(Job.posted_by_id == user.id))]
        if job_ids:
            removed["applications"] += (Application.query
                                        .filter(Application.job_id.in_(job_ids))
                                        .delete(synchronize_session=False))
            db.session.commit()
            removed["jobs"] = (Job.query
                               .filter(Job.id.in_(job_ids))
                               .delete(synchronize_session=False))
            db.session.commit()

    resume_ref = user.resume_path
    db.session.delete(user)
    db.session.commit()

    if resume_ref:
        try:
            storage_service.delete_file(resume_ref)
        except (Forbidden, Unavailable) as e:
            log.warning("resume cleanup failed for user %s: %s", user_id, e)

    log.warning("User %s deleted by admin %s (cascade: %s)", user_id, actor.id, removed)
    return removed
