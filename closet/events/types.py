from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from closet.core.timeutil import utcnow

RECOMMENDATION_GENERATED = "recommendation.generated"
CHALLENGE_CREATED = "challenge.created"
CHALLENGE_COMPLETED = "challenge.completed"


@dataclass(frozen=True)
class AnalyticsEvent:
    kind: str
    user_id: str
    payload: Dict[str, Any] = field(default_factory=dict)
    occurred_at: datetime = field(default_factory=utcnow)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "user_id": self.user_id,
            "payload": self.payload,
            "occurred_at": self.occurred_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalyticsEvent":
        return cls(
            kind=data["kind"],
            user_id=data["user_id"],
            payload=data.get("payload") or {},
            occurred_at=datetime.fromisoformat(data["occurred_at"]),
        )
