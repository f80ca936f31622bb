# jobportal/blueprints/applications/routes.py
from flask import request
from flask_login import login_required, current_user
from ...security import roles_required
from ...services import applications as app_service
from ..utils import json_body, ok, paged
from . import applications_bp


@applications_bp.get('/')
@login_required
@roles_required('employer', 'admin')
def application_list():
    qry = app_service.list_for_company(
        current_user,
        status=request.args.get('status') or None,
        job_id=request.args.get('job', type=int),
    )
    return paged(qry, lambda a: a.to_dict(expand=True))


@applications_bp.get('/my-applications')
@login_required
@roles_required('jobseeker')
def my_applications():
    return paged(app_service.list_for_applicant(current_user), lambda a: a.to_dict(expand=True))


@applications_bp.get('/<int:application_id>')
@login_required
def application_detail(application_id):
    application = app_service.get_application(current_user, application_id)
    return ok(application.to_dict(expand=True))


@applications_bp.post('/')
@login_required
@roles_required('jobseeker')
def application_submit():
    body = json_body()
    application = app_service.submit_application(
        current_user,
        job_id=body.get('job'),
        cover_letter=body.get('coverLetter'),
        resume=body.get('resume'),
        expected_salary=body.get('expectedSalary'),
        availability=body.get('availability'),
    )
    return ok(application.to_dict(), 201)


@applications_bp.put('/<int:application_id>/status')
@login_required
@roles_required('employer', 'admin')
def application_status(application_id):
    body = json_body()
    application = app_service.update_status(
        current_user, application_id, body.get('status'), notes=body.get('notes'),
    )
    return ok(application.to_dict())


@applications_bp.delete('/<int:application_id>')
@login_required
@roles_required('jobseeker')
def application_withdraw(application_id):
    app_service.delete_application(current_user, application_id)
    return ok()
