# jobportal/security.py
from functools import wraps
from typing import Optional

from flask import current_app
from flask_login import current_user
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from .errors import Forbidden
from .extensions import db, _
from .models.user import User


# -----------------
# Bearer tokens
# -----------------

def _ts() -> URLSafeTimedSerializer:
    secret_key = current_app.config.get("SECRET_KEY")
    salt = current_app.config.get("TOKEN_SALT", "api-auth")
    return URLSafeTimedSerializer(secret_key=secret_key, salt=salt)


def issue_token(user: User) -> str:
    return _ts().dumps({"uid": user.id, "role": user.role})


def verify_token(token: str, max_age: Optional[int] = None) -> Optional[int]:
    if max_age is None:
        max_age = current_app.config.get("TOKEN_MAX_AGE", 60 * 60 * 24 * 30)
    try:
        data = _ts().loads(token, max_age=max_age)
        return int(data.get("uid"))
    except (BadSignature, SignatureExpired, ValueError, TypeError, AttributeError):
        return None


def load_user_from_request(request) -> Optional[User]:
    header = request.headers.get("Authorization", "")
    scheme, _sep, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    uid = verify_token(token.strip())
    if not uid:
        return None
    user = db.session.get(User, uid)
    if not user or user.is_suspended:
        return None
    return user


# -----------------
# Role gates
# -----------------

def roles_required(*roles):
    """Restrict a view to authenticated users holding one of ``roles``."""
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            if not current_user.is_authenticated:
                return current_app.login_manager.unauthorized()
            if current_user.role not in roles:
                raise Forbidden(_("User role %(role)s is not authorized to access this route", role=current_user.role))
            return view(*args, **kwargs)
        return wrapped
    return decorator
