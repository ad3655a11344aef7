from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from tracepoc.core.logging import get_logger
from tracepoc.telemetry.helpers import Instrumentation

USERS_QUERY = "SELECT * FROM users"
STATUS_URL = "https://api.example.com/status"

SAMPLE_USERS: tuple[dict[str, Any], ...] = (
    {"id": 1, "name": "Alice"},
    {"id": 2, "name": "Bob"},
    {"id": 3, "name": "Charlie"},
)


def _now() -> str:
    return datetime.now(UTC).isoformat()


class DataService:
    """Simulated user listing: a database read, a status call and a transform."""

    def __init__(self, instrumentation: Instrumentation) -> None:
        self.instrumentation = instrumentation
        self.logger = get_logger(__name__)

    def query_users(self) -> dict[str, Any]:
        return self.instrumentation.db.query(
            lambda: {"users": [dict(user) for user in SAMPLE_USERS]},
            USERS_QUERY,
        )

    def fetch_external_status(self) -> dict[str, Any]:
        return self.instrumentation.api.call(
            lambda: {"status": "success", "timestamp": _now()},
            STATUS_URL,
        )

    def load_processed_data(self) -> dict[str, Any]:
        data = self.query_users()
        external = self.fetch_external_status()
        processed = self.instrumentation.component.process(
            lambda: {**data, "metadata": external, "processedAt": _now()},
            "transform",
            len(data["users"]),
        )
        self.logger.info(
            "data.processed",
            extra={"event": "data_processed", "record_count": len(data["users"])},
        )
        return processed
