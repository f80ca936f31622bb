# jobportal/blueprints/admin/routes.py
from flask import request
from flask_login import login_required, current_user
from ...security import roles_required
from ...services import admin as admin_service
from ..utils import flag, json_body, ok, paged
from . import admin_bp


@admin_bp.before_request
@login_required
@roles_required('admin')
def _guard():
    pass


@admin_bp.get('/dashboard')
def dashboard():
    return ok(admin_service.dashboard(current_user))


# -----------------
# Users
# -----------------

@admin_bp.get('/users')
def users_list():
    qry = admin_service.users_query(
        current_user,
        q=request.args.get('q', ''),
        role=request.args.get('role', ''),
        sort=request.args.get('sort', '-created'),
    )
    return paged(qry, lambda u: u.to_dict())


@admin_bp.put('/users/<int:user_id>/role')
def users_role(user_id):
    user = admin_service.set_user_role(current_user, user_id, json_body().get('role'))
    return ok(user.to_dict())


@admin_bp.put('/users/<int:user_id>/verify')
def users_verify(user_id):
    user = admin_service.set_user_verified(current_user, user_id, flag('isVerified', True))
    return ok(user.to_dict())


@admin_bp.delete('/users/<int:user_id>')
def users_delete(user_id):
    removed = admin_service.delete_user(current_user, user_id)
    return ok({"removed": removed})


# -----------------
# Companies / Jobs
# -----------------

@admin_bp.get('/companies')
def companies_list():
    return paged(admin_service.companies_query(current_user), lambda c: c.to_dict())


@admin_bp.put('/companies/<int:company_id>/verify')
def companies_verify(company_id):
    company = admin_service.set_company_verified(current_user, company_id, flag('isVerified', True))
    return ok(company.to_dict())


@admin_bp.get('/jobs')
def jobs_list():
    return paged(admin_service.jobs_query(current_user), lambda j: j.to_dict())


@admin_bp.put('/jobs/<int:job_id>/toggle')
def jobs_toggle(job_id):
    return ok(admin_service.toggle_job_active(current_user, job_id).to_dict())


# -----------------
# Applications
# -----------------

@admin_bp.get('/applications')
def applications_list():
    return paged(admin_service.applications_query(current_user), lambda a: a.to_dict(expand=True))


@admin_bp.post('/applications/bulk-status')
def applications_bulk_status():
    body = json_body()
    result = admin_service.bulk_update_status(current_user, body.get('ids'), body.get('status'))
    return ok(result)
