# jobportal/models/user.py
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from flask_login import UserMixin
from ..extensions import db


ROLES = ("jobseeker", "employer", "admin")


class User(UserMixin, db.Model):
    __tablename__ = "user"
    # soft references point at ids; never reuse a deleted row's id
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    phone = db.Column(db.String(50))

    password_hash = db.Column(db.String(255))

    # jobseeker|employer|admin
    role = db.Column(db.String(20), nullable=False, default="jobseeker", index=True)
    is_verified = db.Column(db.Boolean, default=False, nullable=False)

    # active|suspended
    status = db.Column(db.String(20), default="active", index=True)

    # Job seeker profile
    location = db.Column(db.String(120))
    bio = db.Column(db.Text)
    skills = db.Column(db.JSON, default=list)
    experience = db.Column(db.String(20))        # entry|mid|senior|executive
    resume_path = db.Column(db.String(512))      # relative to UPLOAD_FOLDER

    last_login_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # An employer owns at most one company (unique Company.owner_id)
    company = db.relationship(
        "Company",
        primaryjoin="foreign(Company.owner_id) == User.id",
        uselist=False,
        viewonly=True,
    )

    # --- Auth helpers ---
    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return bool(self.password_hash) and check_password_hash(self.password_hash, password)

    # --- Convenience flags ---
    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def is_employer(self) -> bool:
        return self.role == "employer"

    @property
    def is_suspended(self) -> bool:
        return self.status == "suspended"

    @property
    def company_id(self):
        return self.company.id if self.company else None

    def mark_login(self):
        self.last_login_at = datetime.utcnow()

    def summary(self) -> dict:
        return {"id": self.id, "name": self.name, "email": self.email}

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "role": self.role,
            "isVerified": bool(self.is_verified),
            "status": self.status,
            "companyId": self.company_id,
            "location": self.location,
            "bio": self.bio,
            "skills": list(self.skills or []),
            "experience": self.experience,
            "resume": self.resume_path,
            "lastLoginAt": _iso(self.last_login_at),
            "createdAt": _iso(self.created_at),
        }


def _iso(value):
    return value.isoformat() if value else None
