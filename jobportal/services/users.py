# jobportal/services/users.py
import logging
from pathlib import Path

from ..errors import Forbidden, NotFound, Unavailable, ValidationError
from ..extensions import db, _
from ..forms import ProfileForm, validate_fields
from ..models.user import User
from . import storage_service

log = logging.getLogger(__name__)

_PROFILE_FIELDS = ("name", "phone", "location", "bio", "experience")


def _get_or_404(user_id) -> User:
    user = db.session.get(User, user_id)
    if not user:
        raise NotFound(_("User not found with id of %(id)s", id=user_id))
    return user


def _ensure_self_or_admin(actor, user: User):
    if user.id != actor.id and not actor.is_admin:
        raise Forbidden(_("User %(uid)s is not authorized to access this profile", uid=actor.id))


def get_profile(actor, user_id) -> User:
    user = _get_or_404(user_id)
    _ensure_self_or_admin(actor, user)
    return user


def update_profile(actor, user_id, fields: dict) -> User:
    user = _get_or_404(user_id)
    _ensure_self_or_admin(actor, user)

    fields = {k: v for k, v in (fields or {}).items() if k in _PROFILE_FIELDS + ("skills",)}
    validate_fields(ProfileForm, fields, only=set(fields))
    for key in _PROFILE_FIELDS:
        if key in fields:
            value = fields[key]
            setattr(user, key, value.strip() if isinstance(value, str) else value)
    if "skills" in fields:
        if not isinstance(fields["skills"], (list, tuple)):
            raise ValidationError(fields={"skills": [_("Skills must be an array")]})
        user.skills = [str(s).strip() for s in fields["skills"] if str(s).strip()]
    db.session.commit()
    return user


def store_resume(actor, user_id, file_storage) -> User:
    """Save an uploaded resume as ``resumes/user_<id>_resume<ext>``."""
    user = _get_or_404(user_id)
    if user.id != actor.id:
        raise Forbidden(_("User %(uid)s is not authorized to upload resume for this user", uid=actor.id))
    if not file_storage or not file_storage.filename:
        raise ValidationError(_("Please upload a file"), fields={"resume": [_("Please upload a file")]})
    if not storage_service.allowed_resume(file_storage.filename):
        raise ValidationError(fields={"resume": [_("Only PDF, DOC, and DOCX files are allowed!")]})

    ext = Path(file_storage.filename).suffix.lower()
    previous = user.resume_path
    user.resume_path = storage_service.save_upload(file_storage, subdir="resumes", filename=f"user_{user.id}_resume{ext}")
    db.session.commit()

    if previous and previous != user.resume_path:
        try:
            storage_service.delete_file(previous)
        except (Forbidden, Unavailable) as e:
            log.warning("old resume cleanup failed for user %s: %s", user.id, e)
    log.info("Resume stored for user %s at %s", user.id, user.resume_path)
    return user
