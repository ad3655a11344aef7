from __future__ import annotations

import random
from datetime import UTC, datetime
from typing import Any

from tracepoc.telemetry.helpers import Instrumentation

ANONYMOUS_SESSION = "anonymous"

RECOMMENDATIONS = [
    "Enable real-time tracing",
    "Configure custom spans",
    "Monitor performance metrics",
]


class DynamicContentService:
    """Per-request section keyed on the caller's session cookie."""

    def __init__(self, instrumentation: Instrumentation, rng: random.Random | None = None) -> None:
        self.instrumentation = instrumentation
        self.rng = rng or random.Random()

    def _load_user_data(self, session_id: str) -> dict[str, Any]:
        return self.instrumentation.component.load(
            "dynamic.user.data",
            lambda: {
                "sessionId": session_id,
                "userId": self.rng.randrange(1000),
                "preferences": {"notifications": True, "theme": "auto"},
            },
            {"user.session_id": session_id, "data.source": "session", "cache.enabled": False},
        )

    def _load_realtime(self) -> dict[str, Any]:
        return self.instrumentation.component.load(
            "dynamic.realtime",
            lambda: {
                "timestamp": datetime.now(UTC).isoformat(),
                "requests": self.rng.randrange(100),
                "activeUsers": self.rng.randrange(50),
            },
            {"data.type": "realtime", "data.freshness": "live"},
        )

    def _personalize(self, user_id: int) -> dict[str, Any]:
        return self.instrumentation.with_span(
            "dynamic.personalize.content",
            lambda: {"greeting": f"Hello, User {user_id}!", "recommendations": list(RECOMMENDATIONS)},
            {"personalization.user_id": str(user_id), "personalization.type": "content"},
        )

    def fetch(self, session_id: str | None) -> dict[str, Any]:
        def render() -> dict[str, Any]:
            user_data = self._load_user_data(session_id or ANONYMOUS_SESSION)
            return {
                "userData": user_data,
                "realtimeData": self._load_realtime(),
                "personalizedContent": self._personalize(user_data["userId"]),
            }

        return self.instrumentation.component.fetch("dynamic.component", render)
