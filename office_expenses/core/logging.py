import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any, Dict

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
request_path_ctx: ContextVar[str | None] = ContextVar("request_path", default=None)

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"


class RequestContextFilter(logging.Filter):
    """Stamp every record with the id and path of the request being served."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        record.request_id = request_id_ctx.get() or "-"
        record.request_path = request_path_ctx.get() or "-"
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, Any] = {
            "time": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", "-"),
            "path": getattr(record, "request_path", "-"),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def init_logging(debug: bool = False, json_logs: bool = True) -> None:
    root = logging.getLogger()
    root.handlers.clear()
    level = logging.DEBUG if debug else logging.INFO
    root.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(JsonFormatter() if json_logs else logging.Formatter(TEXT_FORMAT))
    root.addHandler(handler)


async def request_context_middleware(request, call_next):  # type: ignore
    rid = request.headers.get("x-request-id") or uuid.uuid4().hex
    id_token = request_id_ctx.set(rid)
    path_token = request_path_ctx.set(f"{request.method} {request.url.path}")
    logger = logging.getLogger("office_expenses.request")
    started = time.perf_counter()
    try:
        response = await call_next(request)
        response.headers["x-request-id"] = rid
        logger.debug(
            "%s in %.1fms", response.status_code, (time.perf_counter() - started) * 1000
        )
        return response
    finally:
        request_path_ctx.reset(path_token)
        request_id_ctx.reset(id_token)
