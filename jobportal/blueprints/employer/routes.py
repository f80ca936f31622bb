# jobportal/blueprints/employer/routes.py
from io import BytesIO

from flask import send_file
from flask_login import login_required, current_user
from ...security import roles_required
from ...services import applications as app_service
from ...services import companies as company_service
from ...services import employer as employer_service
from ...services import jobs as job_service
from ..utils import json_body, ok, paged
from . import employer_bp


@employer_bp.before_request
@login_required
@roles_required('employer')
def _guard():
    pass


# -----------------
# Dashboard & company
# -----------------

@employer_bp.get('/dashboard')
def dashboard():
    return ok(employer_service.dashboard(current_user))


@employer_bp.get('/company')
def company_get():
    return ok(company_service.get_my_company(current_user).to_dict(with_jobs=True))


@employer_bp.put('/company')
def company_upsert():
    fields = company_service.normalize_company_payload(json_body())
    company = company_service.upsert_company(current_user, fields)
    return ok(company.to_dict())


# -----------------
# Jobs
# -----------------

@employer_bp.get('/jobs')
def jobs_list():
    return paged(job_service.list_by_owner(current_user), lambda j: j.to_dict())


@employer_bp.post('/jobs')
def jobs_create():
    fields = job_service.normalize_job_payload(json_body())
    return ok(job_service.create_job(current_user, fields).to_dict(), 201)


@employer_bp.put('/jobs/<int:job_id>')
def jobs_update(job_id):
    fields = job_service.normalize_job_payload(json_body())
    return ok(job_service.update_job(current_user, job_id, fields).to_dict())


@employer_bp.put('/jobs/<int:job_id>/toggle')
def jobs_toggle(job_id):
    return ok(job_service.toggle_active(current_user, job_id).to_dict())


@employer_bp.delete('/jobs/<int:job_id>')
def jobs_delete(job_id):
    job_service.delete_job(current_user, job_id)
    return ok()


# -----------------
# Applications
# -----------------

@employer_bp.get('/applications')
def applications_list():
    qry = app_service.list_for_employer_jobs(current_user)
    return paged(qry, lambda a: a.to_dict(expand=True))


@employer_bp.get('/applications/<int:application_id>')
def applications_detail(application_id):
    application = app_service.get_application(current_user, application_id)
    return ok(application.to_dict(expand=True))


@employer_bp.put('/applications/<int:application_id>/status')
def applications_status(application_id):
    status = json_body().get('status')
    application = app_service.update_status_from_dashboard(current_user, application_id, status)
    return ok(application.to_dict())


@employer_bp.get('/applications/<int:application_id>/resume')
def applications_resume(application_id):
    data, filename = app_service.download_resume(current_user, application_id)
    return send_file(BytesIO(data), as_attachment=True, download_name=filename)
