"""Root logging setup.

Every record carries the request id bound by the request-id middleware
and, when tracing is on, the active trace id ("-" when absent).
"""

import logging
import sys

from app.core.config import get_settings
from app.shared.context import get_request_id
from app.shared.telemetry.tracing import current_trace_id

LOG_FORMAT = (
    "%(asctime)s %(levelname)s [%(name)s] [request_id=%(request_id)s "
    "trace_id=%(trace_id)s] %(message)s"
)


class RequestContextFilter(logging.Filter):
    """Stamp request_id and trace_id onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        record.trace_id = current_trace_id() or "-"
        return True


def setup_logging() -> None:
    """Configure stdout logging at DEBUG (settings.debug) or INFO."""
    settings = get_settings()
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        handlers=[handler],
        force=True,
    )
    if not settings.database_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
