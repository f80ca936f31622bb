# jobportal/services/storage_service.py
import logging
import os
from pathlib import Path
from werkzeug.utils import secure_filename
from flask import current_app

from ..errors import Forbidden, NotFound, Unavailable, ValidationError
from ..extensions import _

log = logging.getLogger(__name__)


def _ensure_base() -> Path:
    # Fallback to <instance>/uploads if UPLOAD_FOLDER not configured yet
    base = current_app.config.get("UPLOAD_FOLDER")
    if not base:
        base = Path(current_app.instance_path) / "uploads"
    else:
        base = Path(base)
    base.mkdir(parents=True, exist_ok=True)
    return base


def _safe_abs_path(relpath: str) -> Path:
    base = os.path.realpath(_ensure_base())
    abs_path = os.path.realpath(os.path.join(base, relpath or ""))
    if not abs_path.startswith(base + os.sep):
        # path traversal or outside allowed dir
        raise Forbidden(_("File reference is outside the upload folder."))
    return Path(abs_path)


def allowed_resume(filename: str) -> bool:
    exts = current_app.config.get("RESUME_EXTENSIONS") or {"pdf", "doc", "docx"}
    suffix = Path(filename).suffix.lower().lstrip(".")
    return bool(suffix) and suffix in exts


def save_upload(file_storage, subdir: str = "", filename: str | None = None) -> str:
    """
    Saves file to UPLOAD_FOLDER / subdir / <safe_name>, returns relative path from base.
    """
    base = _ensure_base()
    safe_name = secure_filename(filename or file_storage.filename or "")
    if not safe_name:
        raise ValidationError(_("Please upload a file"), fields={"file": [_("Empty filename")]})

    target_dir = base / subdir if subdir else base
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        dest = target_dir / safe_name
        file_storage.save(dest)
    except OSError as e:
        log.exception("save_upload failed: %s", e)
        raise Unavailable(_("File storage is unavailable."))

    # Return path relative to base for storage in DB
    return str(dest.relative_to(base))


def read_file(ref: str) -> bytes:
    if not ref:
        raise NotFound(_("No file reference."))
    path = _safe_abs_path(ref)
    try:
        with open(path, "rb") as f:
            return f.read()
    except (FileNotFoundError, IsADirectoryError):
        raise NotFound(_("File not found on server."))
    except OSError as e:
        log.exception("read_file failed for %s: %s", ref, e)
        raise Unavailable(_("File storage is unavailable."))


def delete_file(ref: str) -> bool:
    """Remove a stored file; returns False if it was already gone."""
    if not ref:
        return False
    path = _safe_abs_path(ref)
    try:
        path.unlink()
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        log.exception("delete_file failed for %s: %s", ref, e)
        raise Unavailable(_("File storage is unavailable."))
