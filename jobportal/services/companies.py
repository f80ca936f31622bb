# jobportal/services/companies.py
"""Company directory: one company per employer, verification owned by admins."""
import logging
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from ..errors import Conflict, Forbidden, NotFound, ValidationError
from ..extensions import db, _
from ..forms import CompanyForm, CompanyUpsertForm, validate_fields
from ..models.company import Company
from .pagination import sort_clauses

log = logging.getLogger(__name__)

_NESTED = ("location", "social_media")
_SCALARS = ("name", "description", "logo", "website", "industry", "size", "contact_email", "contact_phone")

SORT_KEYS = {
    "createdAt": Company.created_at,
    "name": Company.name,
    "size": Company.size,
    "industry": Company.industry,
}


def normalize_company_payload(payload: dict) -> dict:
    """camelCase wire shape -> snake_case fields (only keys present)."""
    payload = payload or {}
    out = {}
    for key in ("name", "description", "logo", "website", "industry", "size", "founded", "location", "benefits"):
        if key in payload:
            out[key] = payload[key]
    if "socialMedia" in payload:
        out["social_media"] = payload["socialMedia"]
    contact = payload.get("contact")
    if isinstance(contact, dict):
        if "email" in contact:
            out["contact_email"] = contact["email"]
        if "phone" in contact:
            out["contact_phone"] = contact["phone"]
    for key in ("name", "description", "website", "contact_email"):
        if isinstance(out.get(key), str):
            out[key] = out[key].strip()
    return out


def _apply(company: Company, fields: dict):
    for key in _SCALARS:
        if key in fields:
            setattr(company, key, fields[key])
    for key in _NESTED:
        if key in fields:
            if fields[key] is not None and not isinstance(fields[key], dict):
                raise ValidationError(fields={key: [_("Must be an object")]})
            setattr(company, key, dict(fields[key] or {}))
    if "benefits" in fields:
        if not isinstance(fields["benefits"], (list, tuple)):
            raise ValidationError(fields={"benefits": [_("Must be a list")]})
        company.benefits = [str(b).strip() for b in fields["benefits"] if str(b).strip()]
    if "founded" in fields:
        company.founded = int(fields["founded"]) if fields["founded"] not in (None, "") else None


def company_for_owner(user_id):
    return Company.query.filter_by(owner_id=user_id).first()


def _get_or_404(company_id) -> Company:
    company = db.session.get(Company, company_id)
    if not company:
        raise NotFound(_("Company not found with id of %(id)s", id=company_id))
    return company


def _ensure_can_manage(actor, company: Company):
    if company.owner_id != actor.id and not actor.is_admin:
        raise Forbidden(_("User %(uid)s is not authorized to modify this company", uid=actor.id))


def _commit_new(company: Company):
    db.session.add(company)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict(_("You already have a company profile"))


def upsert_company(actor, fields: dict) -> Company:
    """Employer self-service: first call creates, later calls update in place."""
    validate_fields(CompanyUpsertForm, fields)
    fields = dict(fields)
    fields["contact_email"] = actor.email

    company = company_for_owner(actor.id)
    if company:
        _apply(company, fields)
        db.session.commit()
        log.info("Company %s updated by owner %s", company.id, actor.id)
        return company

    company = Company(owner_id=actor.id)
    _apply(company, fields)
    _commit_new(company)
    log.info("Company %s created by owner %s", company.id, actor.id)
    return company


def create_company_strict(actor, fields: dict) -> Company:
    """Public creation path: a second company for the same owner is a Conflict."""
    validate_fields(CompanyForm, fields)
    if company_for_owner(actor.id):
        raise Conflict(_("You already have a company profile"))

    company = Company(owner_id=actor.id)
    _apply(company, fields)
    _commit_new(company)
    log.info("Company %s created by owner %s", company.id, actor.id)
    return company


def get_company(company_id) -> Company:
    return _get_or_404(company_id)


def get_my_company(actor) -> Company:
    company = company_for_owner(actor.id)
    if not company:
        raise NotFound(_("No company profile found"))
    return company


def update_company(actor, company_id, fields: dict) -> Company:
    company = _get_or_404(company_id)
    _ensure_can_manage(actor, company)
    validate_fields(CompanyForm, fields, only=set(fields))
    _apply(company, fields)
    db.session.commit()
    return company


def delete_company(actor, company_id):
    """Jobs keep their company_id; they are not removed with the company."""
    company = _get_or_404(company_id)
    _ensure_can_manage(actor, company)
    db.session.delete(company)
    db.session.commit()
    log.info("Company %s deleted by %s", company_id, actor.id)


def set_verified(actor, company_id, verified: bool) -> Company:
    if not actor.is_admin:
        raise Forbidden(_("Only administrators can verify companies"))
    company = _get_or_404(company_id)
    company.is_verified = bool(verified)
    db.session.commit()
    log.info("Company %s verified=%s by admin %s", company.id, company.is_verified, actor.id)
    return company


def search_companies(q: str = "", industry: str = "", size: str = "", sort: str = ""):
    qry = Company.query.filter(Company.is_active.is_(True))
    q = (q or "").strip()
    if q:
        like = f"%{q}%"
        qry = qry.filter(or_(Company.name.ilike(like), Company.description.ilike(like)))
    if industry:
        qry = qry.filter(Company.industry == industry)
    if size:
        qry = qry.filter(Company.size == size)
    return qry.order_by(*sort_clauses(sort, SORT_KEYS, Company.created_at))
