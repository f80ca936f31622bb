# jobportal/blueprints/auth/forms.py
from __future__ import annotations

from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, BooleanField, SelectField
from wtforms.validators import DataRequired, Email, Length, Optional as Opt, Regexp, ValidationError

from ...extensions import _l
from ...models.user import User


# ---------------------
# Validators / Helpers
# ---------------------

PASSWORD_VALIDATORS = [
    DataRequired(),
    Length(min=8, message=_l("Password must be at least 8 characters.")),
    # at least one letter and number
    Regexp(r"^(?=.*[A-Za-z])(?=.*\d).+$", message=_l("Use letters and numbers.")),
]


def _email_exists(email: str) -> bool:
    return User.query.filter(User.email == email.lower().strip()).first() is not None


# -------------
# Auth Forms (JSON bodies are wrapped by Flask-WTF)
# -------------

class RegisterForm(FlaskForm):
    class Meta:
        csrf = False

    name = StringField("Full name", validators=[DataRequired(), Length(min=2, max=120)])
    email = StringField("Email", validators=[DataRequired(), Email(), Length(max=255)])
    phone = StringField("Phone", validators=[Opt(), Length(max=50)])
    role = SelectField(
        "Account type",
        choices=[("jobseeker", "Job seeker"), ("employer", "Employer")],
        validators=[DataRequired()],
        default="jobseeker",
    )
    password = PasswordField("Password", validators=PASSWORD_VALIDATORS)

    def validate_email(self, field):  # type: ignore[override]
        if _email_exists(field.data):
            raise ValidationError(_l("This email is already registered."))


class LoginForm(FlaskForm):
    class Meta:
        csrf = False

    email = StringField("Email", validators=[DataRequired(), Email(), Length(max=255)])
    password = PasswordField("Password", validators=[DataRequired()])
    remember = BooleanField("Keep me signed in")
