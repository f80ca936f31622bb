from flask import request
from flask_login import login_required, current_user
from ...services import users as user_service
from ..utils import json_body, ok
from . import users_bp


@users_bp.get('/<int:user_id>')
@login_required
def user_detail(user_id):
    return ok(user_service.get_profile(current_user, user_id).to_dict())


@users_bp.put('/<int:user_id>')
@login_required
def user_update(user_id):
    user = user_service.update_profile(current_user, user_id, json_body())
    return ok(user.to_dict())


@users_bp.post('/<int:user_id>/resume')
@login_required
def user_resume_upload(user_id):
    user = user_service.store_resume(current_user, user_id, request.files.get('resume'))
    return ok({"resume": user.resume_path, "user": user.to_dict()})
