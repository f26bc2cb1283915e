import json
import logging

from animehub.core.request_context import get_category_id, get_entity_id, get_operation, get_request_id


class RequestIdFilter(logging.Filter):
    """Populate structured log records with request and operation IDs."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "unknown"
        record.operation = get_operation() or ""
        record.entity_id = get_entity_id() or ""
        # an explicit extra={"category_id": ...} wins over the scoped one
        if getattr(record, "category_id", None) is None:
            record.category_id = get_category_id()
        return True


class StructuredJsonFormatter(logging.Formatter):
    """Emit log records as JSON with consistent fields."""

    _SKIP_FIELDS = {
        "args",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
        "request_id",
        "operation",
        "entity_id",
        "category_id",
    }

    def format(self, record: logging.LogRecord) -> str:
        log_payload: dict[str, object | None] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", "unknown"),
            "operation": getattr(record, "operation", ""),
        }
        entity_id = getattr(record, "entity_id", None)
        if entity_id:
            log_payload["entity_id"] = entity_id
        category_id = getattr(record, "category_id", None)
        if category_id is not None:
            log_payload["category_id"] = category_id
        log_payload.update(self._extract_extra(record))
        if record.exc_info:
            log_payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            log_payload["stack_info"] = record.stack_info
        try:
            return json.dumps(log_payload, default=str)
        except (TypeError, ValueError):
            return super().format(record)

    def _extract_extra(self, record: logging.LogRecord) -> dict[str, object]:
        extras: dict[str, object] = {}
        for key, value in record.__dict__.items():
            if key in self._SKIP_FIELDS or key.startswith("_"):
                continue
            if value is None:
                continue
            extras[key] = value
        return extras
