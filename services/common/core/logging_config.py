"""
Logging Configuration

Provides:
- JsonLogFormatter: one JSON object per record, with request/trace IDs
- setup_logging: dictConfig from a YAML file with ${VAR} substitution
- VictoriaLogsHandler / configure_queue_logging: optional log shipping
"""

import atexit
import json
import logging
import logging.config
import logging.handlers
import os
import queue
import string
import sys
import urllib.error
import urllib.parse
import urllib.request
from datetime import datetime, timezone
from typing import Dict, Optional

import yaml

from .request_context import get_request_id, get_trace_id

# LogRecord attributes that are not user-supplied extras.
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
    | {"message", "asctime", "taskName"}
)


class JsonLogFormatter(logging.Formatter):
    """
    Fields:
      - _time: ISO8601 timestamp (millisecond precision)
      - level, logger, message
      - request_id / trace_id: from the current request context
      - any ``extra`` passed to the logging call
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "_time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = getattr(record, "request_id", None) or get_request_id()
        trace_id = getattr(record, "trace_id", None) or get_trace_id()
        if request_id:
            log_data["request_id"] = request_id
        if trace_id:
            log_data["trace_id"] = trace_id

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_") and key not in log_data:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(config_path: str = "logging.yml", log_level: Optional[str] = None):
    """
    Load the YAML config, substitute environment variables, and initialize logging.
    Falls back to basicConfig when the file does not exist.
    """
    level = log_level or os.environ.get("LOG_LEVEL", "INFO")
    if not os.path.exists(config_path):
        logging.basicConfig(level=level)
        return

    with open(config_path, "r", encoding="utf-8") as f:
        template = string.Template(f.read())

    mapping = os.environ.copy()
    mapping.setdefault("LOG_LEVEL", level)
    content = template.safe_substitute(mapping)
    logging.config.dictConfig(yaml.safe_load(content))


class VictoriaLogsHandler(logging.Handler):
    """
    Handler that sends logs to VictoriaLogs' jsonline endpoint.
    On failure, the entry is written to stderr instead.
    """

    def __init__(self, url: str, stream_fields: Optional[Dict[str, str]] = None, timeout: float = 0.5):
        super().__init__()
        self.url = url
        self.stream_fields = stream_fields or {}
        self.timeout = timeout

    def _endpoint(self) -> str:
        params = [
            ("_stream_fields", ",".join(self.stream_fields.keys())),
            ("_msg_field", "message"),
            ("_time_field", "_time"),
        ]
        params.extend((k, str(v)) for k, v in self.stream_fields.items())
        return f"{self.url}?{urllib.parse.urlencode(params)}"

    def emit(self, record: logging.LogRecord):
        try:
            msg = self.format(record)
            try:
                log_entry = json.loads(msg)
            except json.JSONDecodeError:
                log_entry = {"message": msg, "level": record.levelname}
            for k, v in self.stream_fields.items():
                log_entry.setdefault(k, v)

            req = urllib.request.Request(
                self._endpoint(),
                data=json.dumps(log_entry, ensure_ascii=False).encode("utf-8"),
                headers={"Content-Type": "application/json"},
                method="POST",
            )
            try:
                with urllib.request.urlopen(req, timeout=self.timeout) as res:
                    res.read()
            except (OSError, urllib.error.URLError) as e:
                stream = getattr(sys, "__stderr__", None) or sys.stderr
                stream.write(
                    json.dumps(
                        {"fallback": "victorialogs_failed", "error": str(e), "original_log": log_entry},
                        ensure_ascii=False,
                        default=str,
                    )
                    + "\n"
                )
        except Exception:
            self.handleError(record)


def configure_queue_logging(service_name: str, vl_url: Optional[str] = None):
    """
    Ship logs asynchronously through a QueueHandler so request handling never
    waits on the log endpoint.
    """
    if not vl_url:
        return None

    real_handler = VictoriaLogsHandler(
        url=vl_url, stream_fields={"container_name": service_name, "job": "services"}
    )
    real_handler.setFormatter(JsonLogFormatter())

    log_queue: queue.Queue = queue.Queue(-1)
    listener = logging.handlers.QueueListener(log_queue, real_handler)
    listener.start()
    atexit.register(listener.stop)

    logging.getLogger().addHandler(logging.handlers.QueueHandler(log_queue))
    return listener
