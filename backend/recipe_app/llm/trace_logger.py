"""
AI generation traces.

Appends one JSON line per LLM call so prompts and outcomes can be replayed
when a model starts returning junk.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Any

from ..core.config import get_settings

logger = logging.getLogger(__name__)

PROMPT_EXCERPT_CHARS = 500


class AiTraceLogger:
    """Append-only JSONL logger for AI generation calls."""

    def __init__(self, log_path: Path | str | None = None, enabled: bool | None = None):
        settings = get_settings()
        self.log_path = Path(log_path or settings.ai_trace_path)
        # An explicit path means the caller wants traces.
        if enabled is None:
            enabled = settings.enable_ai_traces or log_path is not None
        self.enabled = enabled
        self._lock = Lock()

    def log_generation(
        self,
        endpoint: str,
        prompt: str,
        text: str,
        recipe_count: int | None = None,
        metadata: dict | None = None,
    ) -> None:
        if not self.enabled:
            return

        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "endpoint": endpoint,
            "prompt": (prompt or "")[:PROMPT_EXCERPT_CHARS],
            "text_length": len(text or ""),
            "recipe_count": recipe_count,
            "metadata": metadata or {},
        }

        try:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            serialized = json.dumps(entry, ensure_ascii=False)
            with self._lock:
                with self.log_path.open("a", encoding="utf-8") as log_file:
                    log_file.write(serialized + "\n")
        except OSError as exc:  # pragma: no cover - a full disk must not fail the request
            logger.warning("Failed to persist AI trace: %s", exc)


_TRACE_LOGGER: AiTraceLogger | None = None


def get_trace_logger() -> AiTraceLogger:
    """Return a singleton AiTraceLogger instance."""
    global _TRACE_LOGGER
    if _TRACE_LOGGER is None:
        _TRACE_LOGGER = AiTraceLogger()
    return _TRACE_LOGGER


def set_trace_logger(logger_instance: AiTraceLogger | None) -> None:
    """Override the global trace logger (tests)."""
    global _TRACE_LOGGER
    _TRACE_LOGGER = logger_instance
