"""Named loggers for the ingestion API and the widget pipeline.

``get_logger`` hands out plain ``logging.Logger`` objects under a dotted
component name. ``bind`` wraps one so a fixed set of structured fields
(the site, the visitor session) rides along on every record without each
call site repeating them in ``extra=``.

Until ``shared.logging.json.configure_logging`` runs, the first auto-configuring
``get_logger`` call installs a plain text handler so scripts and REPL
sessions still see output.
"""

from __future__ import annotations

import logging
from typing import Any, MutableMapping

_configured = False

_FALLBACK_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class BoundLogger(logging.LoggerAdapter):
    """Logger adapter merging its bound fields under the call's own ``extra``."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs

    def bind(self, **fields: Any) -> "BoundLogger":
        return BoundLogger(self.logger, {**self.extra, **fields})


def get_logger(name: str, auto_configure: bool = True) -> logging.Logger:
    """Return the logger for ``name`` (dotted by component, e.g. ``widget.delivery``).

    Args:
        name: Logger name
        auto_configure: Install the text fallback if nothing is configured yet
    """
    global _configured

    if auto_configure and not _configured:
        logging.basicConfig(level=logging.INFO, format=_FALLBACK_FORMAT)
        _configured = True

    return logging.getLogger(name)


def bind(logger: logging.Logger | BoundLogger, **fields: Any) -> BoundLogger:
    """Attach ``fields`` to every record emitted through the returned adapter."""
    if isinstance(logger, BoundLogger):
        return logger.bind(**fields)
    return BoundLogger(logger, fields)


def mark_configured() -> None:
    """Called by ``configure_logging`` so the text fallback is never installed."""
    global _configured
    _configured = True


__all__ = ["BoundLogger", "bind", "get_logger", "mark_configured"]
