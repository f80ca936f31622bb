# jobportal/blueprints/companies/routes.py
from flask import request
from flask_login import login_required, current_user
from ...security import roles_required
from ...services import companies as company_service
from ...services import jobs as job_service
from ..utils import json_body, ok, paged
from . import companies_bp


@companies_bp.get('/')
def company_list():
    qry = company_service.search_companies(
        q=request.args.get('search', ''),
        industry=request.args.get('industry', ''),
        size=request.args.get('size', ''),
        sort=request.args.get('sort', ''),
    )
    return paged(qry, lambda c: c.to_dict())


@companies_bp.get('/<int:company_id>')
def company_detail(company_id):
    company = company_service.get_company(company_id)
    data = company.to_dict()
    data["jobs"] = [j.summary() for j in job_service.list_by_company(company.id)]
    return ok(data)


@companies_bp.get('/my-company')
@login_required
@roles_required('employer')
def my_company():
    return ok(company_service.get_my_company(current_user).to_dict(with_jobs=True))


@companies_bp.post('/')
@login_required
@roles_required('employer', 'admin')
def company_create():
    fields = company_service.normalize_company_payload(json_body())
    company = company_service.create_company_strict(current_user, fields)
    return ok(company.to_dict(), 201)


@companies_bp.put('/<int:company_id>')
@login_required
@roles_required('employer', 'admin')
def company_update(company_id):
    fields = company_service.normalize_company_payload(json_body())
    company = company_service.update_company(current_user, company_id, fields)
    return ok(company.to_dict())


@companies_bp.delete('/<int:company_id>')
@login_required
@roles_required('employer', 'admin')
def company_delete(company_id):
    company_service.delete_company(current_user, company_id)
    return ok()
