from flask import jsonify, request
from ..services.pagination import page_args, paginate


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def ok(data=None, code: int = 200, **extra):
    body = {"success": True, "data": data if data is not None else {}}
    body.update(extra)
    return jsonify(body), code


def paged(query, serialize):
    """Paginate ``query`` with ``page``/``limit`` from the query string."""
    page, limit = page_args(request.args)
    result = paginate(query, page, limit, serialize=serialize)
    return jsonify({"success": True, **result})


def flag(name: str, default=None):
    """Boolean from the JSON body (``{"isVerified": true}``)."""
    val = json_body().get(name, default)
    if isinstance(val, str):
        return val.strip().lower() in {"1", "true", "yes", "on"}
    return bool(val) if val is not None else None
