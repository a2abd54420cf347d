from __future__ import annotations

import logging
from typing import Any, Optional

from ..core.results import Rejection
from ..logging_config import get_logger


class EventLogger:
    """Structured event emission injected into services.

    Every state transition and every rejection goes through here, so the
    log stream doubles as an audit trail of the accounting engine.
    """

    def __init__(self, source: str, logger: Optional[logging.Logger] = None):
        self._source = source
        self._logger = logger or get_logger(source)

    def transition(self, event: str, **fields: Any) -> None:
        self._logger.info(
            "%s %s",
            self._source,
            event,
            extra={"event": event, "source": self._source, "fields": fields},
        )

    def rejected(self, operation: str, rejection: Rejection, **fields: Any) -> None:
        level = logging.ERROR if rejection.is_fatal else logging.WARNING
        self._logger.log(
            level,
            "%s %s rejected: %s",
            self._source,
            operation,
            rejection.code.value,
            extra={
                "event": f"{operation}.rejected",
                "source": self._source,
                "code": rejection.code.value,
                "fields": {**fields, **dict(rejection.details)},
            },
        )

    def failure(self, operation: str, **fields: Any) -> None:
        """Log the exception currently being handled."""
        self._logger.exception(
            "%s %s failed",
            self._source,
            operation,
            extra={"event": f"{operation}.failed", "source": self._source, "fields": fields},
        )
