# jobportal/models/company.py
from datetime import datetime
from ..extensions import db
from .user import _iso


INDUSTRIES = (
    "technology", "healthcare", "finance", "education", "marketing",
    "sales", "design", "engineering", "operations", "retail", "manufacturing",
    "consulting", "non-profit", "government", "other",
)
SIZES = ("1-10", "11-50", "51-200", "201-500", "501-1000", "1000+")


class Company(db.Model):
    __tablename__ = "company"
    # soft references point at ids; never reuse a deleted row's id
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    # soft reference to user.id; one company per owner
    owner_id = db.Column(db.Integer, nullable=False, unique=True, index=True)

    name = db.Column(db.String(100), nullable=False, index=True)
    description = db.Column(db.Text, nullable=False)
    logo = db.Column(db.String(500), default="")
    website = db.Column(db.String(255))
    industry = db.Column(db.String(40), nullable=False, index=True)
    size = db.Column(db.String(20), nullable=False, index=True)
    founded = db.Column(db.Integer)

    location = db.Column(db.JSON, default=dict)      # address/city/state/country/zipCode
    contact_email = db.Column(db.String(255), nullable=False)
    contact_phone = db.Column(db.String(50))
    social_media = db.Column(db.JSON, default=dict)  # linkedin/twitter/facebook/instagram
    benefits = db.Column(db.JSON, default=list)

    is_verified = db.Column(db.Boolean, default=False, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    owner = db.relationship(
        "User",
        primaryjoin="foreign(Company.owner_id) == User.id",
        viewonly=True,
    )

    @property
    def job_ids(self) -> list:
        # derived, never stored
        from .job import Job
        rows = db.session.execute(
            db.select(Job.id).where(Job.company_id == self.id).order_by(Job.created_at.desc())
        )
        return [r[0] for r in rows]

    def summary(self) -> dict:
        return {"id": self.id, "name": self.name, "logo": self.logo, "industry": self.industry}

    def to_dict(self, with_jobs: bool = False) -> dict:
        data = {
            "id": self.id,
            "ownerId": self.owner_id,
            "name": self.name,
            "description": self.description,
            "logo": self.logo or "",
            "website": self.website,
            "industry": self.industry,
            "size": self.size,
            "founded": self.founded,
            "location": dict(self.location or {}),
            "contact": {"email": self.contact_email, "phone": self.contact_phone},
            "socialMedia": dict(self.social_media or {}),
            "benefits": list(self.benefits or []),
            "isVerified": bool(self.is_verified),
            "isActive": bool(self.is_active),
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }
        if with_jobs:
            data["jobIds"] = self.job_ids
        return data
