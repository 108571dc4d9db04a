from __future__ import annotations

import logging
import re

# Three base64url segments where the first is a JSON object header ("eyJ" = '{"').
_COMPACT_JWT = re.compile(r"eyJ[A-Za-z0-9_-]*\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]*")
REDACTED = "[redacted-token]"


class TokenRedactionFilter(logging.Filter):
    """Replace anything shaped like a compact JWT in a log record with a marker."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _COMPACT_JWT.sub(REDACTED, message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def configure_app_logging(level: str = "INFO") -> None:
    """
    Minimal logging configuration for this repo.

    Notes:
    - We intentionally use stdlib logging (no extra deps).
    - Uvicorn configures its own loggers but not the root one; add a basic root
      handler only when nothing else has.
    - Every root handler gets a `TokenRedactionFilter` so an ID token that ends up
      in a log message is never written out.
    - Set `APP_LOG_LEVEL=DEBUG` (or INFO/WARNING/ERROR) to control verbosity.
    """

    normalized = level.upper()
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    for handler in root.handlers:
        if not any(isinstance(f, TokenRedactionFilter) for f in handler.filters):
            handler.addFilter(TokenRedactionFilter())

    logging.getLogger("app").setLevel(normalized)
    # Ensure child loggers under app.* inherit this level.
    logging.getLogger("app").propagate = True
