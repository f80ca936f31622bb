# jobportal/services/employer.py
"""Employer dashboard aggregates, scoped to the jobs the employer posted."""
from sqlalchemy import select

from ..models.application import Application
from ..models.job import Job
from .companies import company_for_owner

RECENT_LIMIT = 5


def dashboard(actor) -> dict:
    posted = select(Job.id).where(Job.posted_by_id == actor.id)
    apps = Application.query.filter(Application.job_id.in_(posted))

    stats = {
        "totalJobs": Job.query.filter(Job.posted_by_id == actor.id).count(),
        "activeJobs": Job.query.filter(Job.posted_by_id == actor.id, Job.is_active.is_(True)).count(),
        "totalApplications": apps.count(),
        "pendingApplications": apps.filter(Application.status == "pending").count(),
    }
    recent = apps.order_by(Application.applied_at.desc()).limit(RECENT_LIMIT).all()
    company = company_for_owner(actor.id)
    return {
        "stats": stats,
        "company": company.to_dict() if company else None,
        "recentApplications": [a.to_dict(expand=True) for a in recent],
    }
