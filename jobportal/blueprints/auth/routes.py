# jobportal/blueprints/auth/routes.py
from flask import current_app
from flask_login import login_user, logout_user, login_required, current_user
from ...errors import ValidationError, Forbidden
from ...extensions import db, _
from ...models.user import User
from ...security import issue_token
from ..utils import ok
from . import auth_bp
from .forms import RegisterForm, LoginForm


def _session_payload(user: User) -> dict:
    return {"token": issue_token(user), "user": user.to_dict()}


# -----------------
# Register
# -----------------

@auth_bp.post('/register')
def register():
    form = RegisterForm()
    if not form.validate_on_submit():
        raise ValidationError(fields=form.errors)

    user = User(
        name=form.name.data.strip(),
        email=form.email.data.strip().lower(),
        phone=(form.phone.data or '').strip() or None,
        role=form.role.data,
    )
    user.set_password(form.password.data)
    db.session.add(user)
    db.session.commit()

    current_app.logger.info("User %s registered as %s", user.id, user.role)
    return ok(_session_payload(user), 201)


# -----------------
# Login / Logout
# -----------------

@auth_bp.post('/login')
def login():
    form = LoginForm()
    if not form.validate_on_submit():
        raise ValidationError(fields=form.errors)

    email = form.email.data.strip().lower()
    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(form.password.data):
        raise ValidationError(_('Invalid email or password.'))

    if user.is_suspended:
        raise Forbidden(_('Your account is suspended. Contact support.'))

    login_user(user, remember=bool(form.remember.data))
    user.mark_login()
    db.session.commit()
    return ok(_session_payload(user))


@auth_bp.post('/logout')
@login_required
def logout():
    logout_user()
    return ok()


@auth_bp.get('/me')
@login_required
def me():
    return ok(current_user.to_dict())
