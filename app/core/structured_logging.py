"""Structured logging helpers (PII-safe)."""

import logging
from typing import Any

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def build_log_context(
    *,
    user_id: int | None = None,
    enterprise_id: int | None = None,
    route: str | None = None,
    method: str | None = None,
) -> dict[str, Any]:
    """Return a PII-safe log context dict (no usernames, tokens or complaint text)."""
    context: dict[str, Any] = {}
    if user_id is not None:
        context["user_id"] = user_id
    if enterprise_id is not None:
        context["enterprise_id"] = enterprise_id
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    return context
