# fabtrack/models/enums/decision.py
import enum
from typing import Optional


class Decision(str, enum.Enum):
    """Tri-state answer to a client-side question.

    Persisted as a nullable boolean: ``None`` is unset, ``True`` approved,
    ``False`` rejected. For the inspection questions ``approved`` reads as
    "inspection needed".
    """

    unset = "unset"
    approved = "approved"
    rejected = "rejected"

    @classmethod
    def from_bool(cls, value: Optional[bool]) -> "Decision":
        if value is None:
            return cls.unset
        return cls.approved if value else cls.rejected

    def to_bool(self) -> Optional[bool]:
        if self is Decision.unset:
            return None
        return self is Decision.approved
