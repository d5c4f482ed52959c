"""
JSON形式のログ設定とアクセスログミドルウェア

リクエストIDはコンテキスト変数に保持され、同じリクエストの中で出力された
ログ（ユースケース層のモジュールロガーを含む）すべてに request_id として付く。
"""
import logging
import json
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Dict, Union

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# LogRecordが標準で持つ属性（extraとして出力しない）
_RESERVED_ATTRS = frozenset([
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs', 'message',
    'pathname', 'process', 'processName', 'relativeCreated',
    'thread', 'threadName', 'taskName', 'exc_info', 'exc_text',
    'stack_info', 'asctime',
])


class RequestContextFilter(logging.Filter):
    """処理中のリクエストIDをレコードに付与する"""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            request_id = request_id_var.get()
            if request_id is not None:
                record.request_id = request_id
        return True


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_obj[key] = value

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, default=str, ensure_ascii=False)


def _json_handler(handler: logging.Handler) -> logging.Handler:
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestContextFilter())
    return handler


def setup_logging(
    name: str,
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    console: bool = False
) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()

    if console:
        logger.addHandler(_json_handler(logging.StreamHandler(sys.stdout)))

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.addHandler(_json_handler(logging.FileHandler(log_file, encoding="utf-8")))

    # ファイル指定がなければ標準出力
    if not logger.handlers:
        logger.addHandler(_json_handler(logging.StreamHandler(sys.stdout)))

    return logger


_loggers: Dict[str, logging.Logger] = {}


def get_logger(name: str, **kwargs) -> logging.Logger:
    if name not in _loggers:
        _loggers[name] = setup_logging(name, **kwargs)
    return _loggers[name]


def access_log_level(status_code: int) -> int:
    """5xxはERROR、4xxはWARNING、それ以外はINFO"""
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class LoggingMiddleware(BaseHTTPMiddleware):
    """リクエストごとにIDを振り、完了または失敗を1行のアクセスログに記録する"""

    def __init__(self, app):
        super().__init__(app)
        self.logger = get_logger("api.access")

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        token = request_id_var.set(request_id)
        start_time = time.perf_counter()
        access = {
            "method": request.method,
            "path": request.url.path,
            "query": request.url.query or None,
            "client": request.client.host if request.client else None,
        }

        try:
            response = await call_next(request)
        except Exception:
            access["duration_ms"] = round((time.perf_counter() - start_time) * 1000, 2)
            self.logger.exception("Request failed", extra=access)
            raise
        else:
            access["status_code"] = response.status_code
            access["duration_ms"] = round((time.perf_counter() - start_time) * 1000, 2)
            self.logger.log(access_log_level(response.status_code), "Request completed", extra=access)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            request_id_var.reset(token)
