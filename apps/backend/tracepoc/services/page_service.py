from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from tracepoc.core.config import Settings
from tracepoc.services.data_service import SAMPLE_USERS
from tracepoc.services.dynamic_content_service import DynamicContentService
from tracepoc.services.static_content_service import StaticContentService
from tracepoc.telemetry.helpers import Instrumentation

PAGE_TITLE = "Trace POC"
DATA_PATH = "/api/data"


@dataclass
class SimulatedResponse:
    ok: bool
    payload: dict[str, Any]

    def json(self) -> dict[str, Any]:
        return self.payload


class PageService:
    def __init__(self, instrumentation: Instrumentation, settings: Settings) -> None:
        self.instrumentation = instrumentation
        self.settings = settings
        self.static_content = StaticContentService(instrumentation)
        self.dynamic_content = DynamicContentService(instrumentation)

    async def _request_data(self) -> SimulatedResponse:
        await asyncio.sleep(self.settings.simulated_latency_ms / 1000)
        now = datetime.now(UTC).isoformat()
        return SimulatedResponse(
            ok=True,
            payload={
                "users": [dict(user) for user in SAMPLE_USERS],
                "metadata": {"status": "success", "timestamp": now},
                "processedAt": now,
            },
        )

    async def fetch_api_data(self) -> dict[str, Any]:
        async def fetch() -> dict[str, Any]:
            base_url = self.settings.public_base_url.rstrip("/")
            response = await self.instrumentation.with_span(
                "page.http.request",
                self._request_data,
                {
                    "http.method": "GET",
                    "http.url": f"{base_url}{DATA_PATH}",
                    "http.target": DATA_PATH,
                },
            )
            if not response.ok:
                raise RuntimeError("Failed to fetch data")
            return response.json()

        return await self.instrumentation.with_span("page.fetch.api", fetch)

    async def render(self, session_id: str | None) -> dict[str, Any]:
        return {
            "title": PAGE_TITLE,
            "apiData": await self.fetch_api_data(),
            "staticSection": self.static_content.fetch(),
            "dynamicSection": self.dynamic_content.fetch(session_id),
        }
