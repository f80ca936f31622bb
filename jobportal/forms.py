# jobportal/forms.py
"""
Field validation for service inputs.

Services receive plain dicts (already snake_case); ``validate_fields`` runs
them through a WTForms form and raises ``ValidationError`` with one list of
messages per offending field.
"""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional

from werkzeug.datastructures import MultiDict
from wtforms import Form, StringField, FloatField, IntegerField
from wtforms.validators import (
    DataRequired,
    InputRequired,
    Email,
    Length,
    AnyOf,
    NumberRange,
    URL,
    Optional as Opt,
    ValidationError as FieldError,
)

from .errors import ValidationError
from .extensions import _l
from .models.application import AVAILABILITY
from .models.company import INDUSTRIES, SIZES
from .models.job import JOB_TYPES, EXPERIENCE_LEVELS, CATEGORIES
from .models.user import ROLES


# ---------------------
# Helpers
# ---------------------

def parse_datetime(val) -> Optional[datetime]:
    """ISO-8601 string (or datetime) -> naive UTC datetime, None if unparseable."""
    if isinstance(val, datetime):
        dt = val
    elif isinstance(val, str) and val.strip():
        try:
            dt = datetime.fromisoformat(val.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def _formdata(fields: dict) -> MultiDict:
    # scalars only; lists, dicts and booleans are handled by the services
    data = MultiDict()
    for key, value in (fields or {}).items():
        if value is None or isinstance(value, (bool, list, tuple, dict)):
            continue
        data.add(key, value if isinstance(value, str) else str(value))
    return data


def validate_fields(form_cls, fields: dict, only: Optional[set] = None):
    """Validate ``fields`` against ``form_cls``; return the bound form.

    ``only`` restricts validation to the named fields (partial updates).
    """
    form = form_cls(formdata=_formdata(fields))
    ok = form.validate()
    errors = dict(form.errors)
    if only is not None:
        errors = {k: v for k, v in errors.items() if k in only}
        ok = not errors
    if not ok:
        raise ValidationError(_l("Please correct the highlighted fields."), fields=errors)
    return form


def _iso_datetime(form, field):
    if field.data and parse_datetime(field.data) is None:
        raise FieldError(_l("Invalid deadline date"))


def _salary_range(form, field):
    lo = form.salary_min.data
    if lo is not None and field.data is not None and field.data < lo:
        raise FieldError(_l("Maximum salary cannot be lower than minimum salary"))


# ---------------------
# Applications
# ---------------------

class ApplicationForm(Form):
    cover_letter = StringField(validators=[
        DataRequired(_l("Cover letter is required")),
        Length(min=50, max=2000, message=_l("Cover letter must be between 50 and 2000 characters")),
    ])
    resume = StringField(validators=[DataRequired(_l("Resume is required")), Length(max=500)])
    expected_salary = FloatField(validators=[InputRequired(_l("Expected salary must be a number"))])
    availability = StringField(validators=[
        DataRequired(_l("Availability is required")),
        AnyOf(AVAILABILITY, message=_l("Invalid availability")),
    ])


class StatusForm(Form):
    notes = StringField(validators=[Opt(), Length(max=500, message=_l("Notes cannot be more than 500 characters"))])


# ---------------------
# Jobs
# ---------------------

class JobForm(Form):
    title = StringField(validators=[
        DataRequired(_l("Job title is required")),
        Length(min=5, max=100, message=_l("Title must be between 5 and 100 characters")),
    ])
    description = StringField(validators=[
        DataRequired(_l("Job description is required")),
        Length(min=50, max=2000, message=_l("Description must be between 50 and 2000 characters")),
    ])
    location = StringField(validators=[DataRequired(_l("Location is required")), Length(max=200)])
    job_type = StringField(validators=[DataRequired(_l("Job type is required")), AnyOf(JOB_TYPES, message=_l("Invalid job type"))])
    experience = StringField(validators=[
        DataRequired(_l("Experience level is required")),
        AnyOf(EXPERIENCE_LEVELS, message=_l("Invalid experience level")),
    ])
    category = StringField(validators=[DataRequired(_l("Category is required")), AnyOf(CATEGORIES, message=_l("Invalid category"))])
    salary_min = FloatField(validators=[
        InputRequired(_l("Minimum salary must be a number")),
        NumberRange(min=0, message=_l("Salary cannot be negative")),
    ])
    salary_max = FloatField(validators=[
        InputRequired(_l("Maximum salary must be a number")),
        NumberRange(min=0, message=_l("Salary cannot be negative")),
        _salary_range,
    ])
    salary_currency = StringField(validators=[Opt(), Length(min=3, max=10)])
    application_deadline = StringField(validators=[DataRequired(_l("Application deadline is required")), _iso_datetime])


# ---------------------
# Companies
# ---------------------

class CompanyUpsertForm(Form):
    """Employer self-service: presence and enum checks only."""
    name = StringField(validators=[DataRequired(_l("Company name is required")), Length(max=100)])
    description = StringField(validators=[DataRequired(_l("Company description is required")), Length(max=1000)])
    industry = StringField(validators=[DataRequired(_l("Industry is required")), AnyOf(INDUSTRIES, message=_l("Invalid industry"))])
    size = StringField(validators=[DataRequired(_l("Company size is required")), AnyOf(SIZES, message=_l("Invalid company size"))])
    website = StringField(validators=[Opt(), URL(message=_l("Please provide a valid website URL"))])
    founded = IntegerField(validators=[Opt(), NumberRange(min=1800, max=datetime.utcnow().year, message=_l("Invalid founded year"))])


class CompanyForm(Form):
    name = StringField(validators=[
        DataRequired(_l("Company name is required")),
        Length(min=2, max=100, message=_l("Company name must be between 2 and 100 characters")),
    ])
    description = StringField(validators=[
        DataRequired(_l("Company description is required")),
        Length(min=20, max=1000, message=_l("Description must be between 20 and 1000 characters")),
    ])
    industry = StringField(validators=[DataRequired(_l("Industry is required")), AnyOf(INDUSTRIES, message=_l("Invalid industry"))])
    size = StringField(validators=[DataRequired(_l("Company size is required")), AnyOf(SIZES, message=_l("Invalid company size"))])
    contact_email = StringField(validators=[
        DataRequired(_l("Please provide a contact email")),
        Email(message=_l("Please provide a valid contact email")),
    ])
    website = StringField(validators=[Opt(), URL(message=_l("Please provide a valid website URL"))])
    founded = IntegerField(validators=[Opt(), NumberRange(min=1800, max=datetime.utcnow().year, message=_l("Invalid founded year"))])


# ---------------------
# Users
# ---------------------

class ProfileForm(Form):
    name = StringField(validators=[Opt(), Length(min=2, max=50, message=_l("Name must be between 2 and 50 characters"))])
    phone = StringField(validators=[Opt(), Length(max=50)])
    location = StringField(validators=[Opt(), Length(max=120)])
    bio = StringField(validators=[Opt(), Length(max=500, message=_l("Bio cannot be more than 500 characters"))])
    experience = StringField(validators=[Opt(), AnyOf(EXPERIENCE_LEVELS, message=_l("Invalid experience level"))])


class RoleForm(Form):
    role = StringField(validators=[DataRequired(_l("Role is required")), AnyOf(ROLES, message=_l("Invalid role"))])
