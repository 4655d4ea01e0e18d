from datetime import datetime, timezone

from feedback_desk.extensions import db

STATUS_PENDING = "pending"
STATUS_PROCESSING = "processing"
STATUS_RESOLVED = "resolved"
STATUS_REJECTED = "rejected"
FEEDBACK_STATUSES = (STATUS_PENDING, STATUS_PROCESSING, STATUS_RESOLVED, STATUS_REJECTED)

# Column limits, also enforced by submission validation so every backend
# rejects the same inputs.
FIELD_MAX_LENGTHS = {
    "type": 50,
    "department": 100,
    "target_role": 100,
    "target_name": 100,
    "submitter_name": 100,
    "submitter_phone": 50,
}


def _utcnow():
    return datetime.now(timezone.utc)


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite and MySQL hand back naive datetimes; values are always written in UTC.
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Feedback(db.Model):
    __tablename__ = "feedbacks"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    type = db.Column(db.String(50), nullable=False, index=True)
    department = db.Column(db.String(100), nullable=False)
    target_role = db.Column(db.String(100), nullable=False, default="")
    target_name = db.Column(db.String(100), nullable=False, default="")
    description = db.Column(db.Text, nullable=False)
    submitter_name = db.Column(db.String(100), nullable=False, default="")
    submitter_phone = db.Column(db.String(50), nullable=False, default="")
    ip_address = db.Column(db.String(64), nullable=False, default="")
    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        db.Index("ix_feedbacks_created_at", "created_at"),
    )

    @property
    def created_at_utc(self) -> datetime | None:
        return _as_utc(self.created_at)

    def to_dict(self) -> dict:
        created = self.created_at_utc
        return {
            "id": self.id,
            "type": self.type,
            "department": self.department,
            "targetRole": self.target_role,
            "targetName": self.target_name,
            "description": self.description,
            "submitterName": self.submitter_name,
            "submitterPhone": self.submitter_phone,
            "ipAddress": self.ip_address,
            "status": self.status,
            "createdAt": created.isoformat() if created else None,
        }

    def __repr__(self):
        return f"<Feedback {self.id} {self.type} {self.status}>"
