# jobportal/blueprints/jobs/routes.py
from flask import request
from flask_login import login_required, current_user
from ...security import roles_required
from ...services import jobs as job_service
from ..utils import json_body, ok, paged
from . import jobs_bp

_FILTER_ARGS = ("type", "experience", "category", "location", "isRemote",
                "isActive", "company", "minSalary", "maxSalary")


# -----------------
# Public browsing
# -----------------

@jobs_bp.get('/')
def job_list():
    filters = {k: request.args.get(k) for k in _FILTER_ARGS if request.args.get(k) not in (None, "")}
    qry = job_service.search_jobs(
        q=request.args.get('search', ''),
        filters=filters,
        sort=request.args.get('sort', ''),
    )
    return paged(qry, lambda j: j.to_dict())


@jobs_bp.get('/<int:job_id>')
def job_detail(job_id):
    job = job_service.get_job(job_id)
    return ok(job.to_dict(detail=True))


@jobs_bp.get('/company/<int:company_id>')
def jobs_by_company(company_id):
    qry = job_service.list_by_company(company_id)
    return paged(qry, lambda j: j.to_dict())


# -----------------
# Employer management
# -----------------

@jobs_bp.get('/my-jobs')
@login_required
@roles_required('employer', 'admin')
def my_jobs():
    return paged(job_service.list_by_owner(current_user), lambda j: j.to_dict())


@jobs_bp.post('/')
@login_required
@roles_required('employer', 'admin')
def job_create():
    fields = job_service.normalize_job_payload(json_body())
    job = job_service.create_job(current_user, fields)
    return ok(job.to_dict(), 201)


@jobs_bp.put('/<int:job_id>')
@login_required
@roles_required('employer', 'admin')
def job_update(job_id):
    fields = job_service.normalize_job_payload(json_body())
    job = job_service.update_job(current_user, job_id, fields)
    return ok(job.to_dict())


@jobs_bp.put('/<int:job_id>/toggle')
@login_required
@roles_required('employer', 'admin')
def job_toggle(job_id):
    job = job_service.toggle_active(current_user, job_id)
    return ok(job.to_dict())


@jobs_bp.delete('/<int:job_id>')
@login_required
@roles_required('employer', 'admin')
def job_delete(job_id):
    job_service.delete_job(current_user, job_id)
    return ok()
