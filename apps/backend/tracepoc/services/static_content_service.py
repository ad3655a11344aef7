from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from tracepoc.telemetry.helpers import Instrumentation


class StaticContentService:
    def __init__(self, instrumentation: Instrumentation) -> None:
        self.instrumentation = instrumentation

    def _load_config(self) -> dict[str, Any]:
        return self.instrumentation.component.load(
            "static.config",
            lambda: {
                "theme": "light",
                "version": "1.0.0",
                "features": ["tracing", "analytics", "caching"],
            },
            {"data.source": "config", "cache.hit": False},
        )

    def _load_content(self) -> dict[str, Any]:
        return self.instrumentation.component.load(
            "static.content",
            lambda: {
                "title": "Static Content Section",
                "description": "This section is rendered from static content with custom tracing spans.",
                "items": [
                    "Traced configuration loading",
                    "Traced content rendering",
                    "Traced data transformation",
                ],
            },
            {"content.type": "static", "content.locale": "en"},
        )

    def _render(self) -> dict[str, Any]:
        config = self._load_config()
        content = self._load_content()
        return self.instrumentation.component.process(
            lambda: {**content, "config": config, "renderedAt": datetime.now(UTC).isoformat()},
            "merge",
            2,
        )

    def fetch(self) -> dict[str, Any]:
        return self.instrumentation.component.fetch("static.component", self._render)
