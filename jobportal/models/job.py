# jobportal/models/job.py
from datetime import datetime
from ..extensions import db
from .user import _iso


JOB_TYPES = ("full-time", "part-time", "contract", "internship", "freelance")
EXPERIENCE_LEVELS = ("entry", "mid", "senior", "executive")
CATEGORIES = (
    "technology", "healthcare", "finance", "education", "marketing",
    "sales", "design", "engineering", "operations", "other",
)


class Job(db.Model):
    __tablename__ = "job"
    # soft references point at ids; never reuse a deleted row's id
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    # soft references: company.id / user.id
    company_id = db.Column(db.Integer, nullable=False, index=True)
    posted_by_id = db.Column(db.Integer, nullable=False, index=True)

    title = db.Column(db.String(100), nullable=False, index=True)
    description = db.Column(db.Text, nullable=False)
    requirements = db.Column(db.JSON, default=list)
    responsibilities = db.Column(db.JSON, default=list)
    skills = db.Column(db.JSON, default=list)
    benefits = db.Column(db.JSON, default=list)

    location = db.Column(db.String(200), nullable=False)
    job_type = db.Column("type", db.String(20), nullable=False, index=True)
    experience = db.Column(db.String(20), nullable=False, index=True)
    category = db.Column(db.String(40), nullable=False, index=True)

    salary_min = db.Column(db.Float, nullable=False)
    salary_max = db.Column(db.Float, nullable=False)
    salary_currency = db.Column(db.String(10), default="USD", nullable=False)

    is_remote = db.Column(db.Boolean, default=False, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)
    application_deadline = db.Column(db.DateTime, nullable=False, index=True)

    views = db.Column(db.Integer, default=0, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    company = db.relationship(
        "Company",
        primaryjoin="foreign(Job.company_id) == Company.id",
        viewonly=True,
    )
    posted_by = db.relationship(
        "User",
        primaryjoin="foreign(Job.posted_by_id) == User.id",
        viewonly=True,
    )

    @property
    def application_ids(self) -> list:
        # derived, never stored
        from .application import Application
        rows = db.session.execute(
            db.select(Application.id).where(Application.job_id == self.id).order_by(Application.applied_at.desc())
        )
        return [r[0] for r in rows]

    def accepts_applications(self, now=None) -> bool:
        now = now or datetime.utcnow()
        return bool(self.is_active) and now <= self.application_deadline

    def summary(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "location": self.location,
            "type": self.job_type,
            "experience": self.experience,
            "companyId": self.company_id,
        }

    def to_dict(self, detail: bool = False) -> dict:
        data = {
            "id": self.id,
            "companyId": self.company_id,
            "postedById": self.posted_by_id,
            "title": self.title,
            "description": self.description,
            "requirements": list(self.requirements or []),
            "responsibilities": list(self.responsibilities or []),
            "skills": list(self.skills or []),
            "benefits": list(self.benefits or []),
            "location": self.location,
            "type": self.job_type,
            "experience": self.experience,
            "category": self.category,
            "salary": {"min": self.salary_min, "max": self.salary_max, "currency": self.salary_currency},
            "isRemote": bool(self.is_remote),
            "isActive": bool(self.is_active),
            "applicationDeadline": _iso(self.application_deadline),
            "views": self.views or 0,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
            "company": self.company.summary() if self.company else None,
        }
        if detail:
            data["applicationIds"] = self.application_ids
            data["postedBy"] = self.posted_by.summary() if self.posted_by else None
        return data
