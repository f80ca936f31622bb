# jobportal/models/application.py
from datetime import datetime
from ..extensions import db
from .user import _iso


STATUSES = ("pending", "reviewed", "shortlisted", "interviewed", "accepted", "rejected")
# Subset offered by the employer dashboard
EMPLOYER_STATUSES = ("pending", "shortlisted", "accepted", "rejected")
AVAILABILITY = ("immediately", "2-weeks", "1-month", "3-months", "negotiable")


class Application(db.Model):
    __tablename__ = "application"
    __table_args__ = (
        # one application per job per applicant
        db.UniqueConstraint("job_id", "applicant_id", name="uq_application_job_applicant"),
        db.Index("ix_application_company_status", "company_id", "status"),
        # ids of deleted rows are never handed out again
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    # soft references; fixed at creation
    job_id = db.Column(db.Integer, nullable=False, index=True)
    applicant_id = db.Column(db.Integer, nullable=False, index=True)
    # copy of Job.company_id at creation time, never refreshed
    company_id = db.Column(db.Integer, nullable=False, index=True)

    cover_letter = db.Column(db.Text, nullable=False)
    resume = db.Column(db.String(500), nullable=False)
    expected_salary = db.Column(db.Float, nullable=False)
    availability = db.Column(db.String(20), nullable=False)

    status = db.Column(db.String(20), default="pending", nullable=False, index=True)
    notes = db.Column(db.String(500))

    is_viewed = db.Column(db.Boolean, default=False, nullable=False)
    viewed_at = db.Column(db.DateTime)

    applied_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    job = db.relationship(
        "Job",
        primaryjoin="foreign(Application.job_id) == Job.id",
        viewonly=True,
    )
    applicant = db.relationship(
        "User",
        primaryjoin="foreign(Application.applicant_id) == User.id",
        viewonly=True,
    )
    company = db.relationship(
        "Company",
        primaryjoin="foreign(Application.company_id) == Company.id",
        viewonly=True,
    )

    @property
    def is_pending(self) -> bool:
        return self.status == "pending"

    def to_dict(self, expand: bool = False) -> dict:
        data = {
            "id": self.id,
            "jobId": self.job_id,
            "applicantId": self.applicant_id,
            "companyId": self.company_id,
            "coverLetter": self.cover_letter,
            "resume": self.resume,
            "expectedSalary": self.expected_salary,
            "availability": self.availability,
            "status": self.status,
            "notes": self.notes,
            "isViewed": bool(self.is_viewed),
            "viewedAt": _iso(self.viewed_at),
            "appliedAt": _iso(self.applied_at),
            "updatedAt": _iso(self.updated_at),
        }
        if expand:
            # restricted projections; a deleted parent serializes as None
            data["job"] = self.job.summary() if self.job else None
            data["applicant"] = self.applicant.summary() if self.applicant else None
            data["company"] = self.company.summary() if self.company else None
        return data
