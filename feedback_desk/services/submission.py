import logging
from typing import Iterable

from feedback_desk.errors import ValidationError
from feedback_desk.models import FIELD_MAX_LENGTHS
from .sanitizer import sanitize
from .store import FeedbackStore

logger = logging.getLogger(__name__)

# Request (camelCase) -> column names
FIELD_MAP = {
    "type": "type",
    "department": "department",
    "targetRole": "target_role",
    "targetName": "target_name",
    "description": "description",
    "submitterName": "submitter_name",
    "submitterPhone": "submitter_phone",
}

REQUIRED_FIELDS = ("type", "department", "targetRole", "description")
STRICT_REQUIRED_FIELDS = REQUIRED_FIELDS + ("submitterName",)


class SubmissionService:
    def __init__(self, store: FeedbackStore, feedback_types: Iterable[str] = ("praise", "complaint", "suggestion"),
                 strict: bool = False):
        self.store = store
        self.feedback_types = tuple(feedback_types)
        self.required = STRICT_REQUIRED_FIELDS if strict else REQUIRED_FIELDS

    def validate(self, raw: dict) -> dict:
        """Check presence and shape, then sanitize. Returns column-keyed values."""
        if not isinstance(raw, dict):
            raise ValidationError("Request body must be a JSON object")

        missing = [
            name for name in self.required
            if not isinstance(raw.get(name), str) or not raw.get(name).strip()
        ]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        for name in FIELD_MAP:
            value = raw.get(name)
            if value is not None and not isinstance(value, str):
                raise ValidationError(f"Field {name} must be a string")

        values = {column: sanitize(raw.get(name)) for name, column in FIELD_MAP.items()}

        # Markup-only input sanitizes down to nothing
        blank = [name for name in self.required if not values[FIELD_MAP[name]]]
        if blank:
            raise ValidationError(f"Missing required fields: {', '.join(blank)}")

        if values["type"] not in self.feedback_types:
            raise ValidationError(f"Unknown feedback type. Must be one of: {', '.join(self.feedback_types)}")

        for column, max_len in FIELD_MAX_LENGTHS.items():
            if len(values[column]) > max_len:
                raise ValidationError(f"Field {column} exceeds {max_len} characters")
        return values

    def submit(self, raw: dict, client_identity: str) -> int:
        values = self.validate(raw)
        values["ip_address"] = (client_identity or "")[:64]
        new_id = self.store.insert(values)
        # Never log free text or phone numbers
        logger.info(
            "feedback_submitted",
            extra={
                "event": "feedback_submitted",
                "feedback_id": new_id,
                "type": values["type"],
                "department": values["department"],
                "description_len": len(values["description"]),
            },
        )
        return new_id
