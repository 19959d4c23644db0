"""
Pure ASGI middleware that logs API requests and responses.

JSON bodies are logged after sensitive keys and inline image data are
masked. Multipart uploads (report and chat images) are never logged, only
their size.
"""

import json
import logging
import time
from typing import Optional
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..core.logging_config import filter_sensitive_data, truncate_large_data

logger = logging.getLogger(__name__)


def _sanitize_body(body: bytes, content_type: str) -> Optional[str]:
    """Render a request/response body for the log, or None when empty."""
    if not body:
        return None
    if content_type.startswith("multipart/"):
        return f"<multipart body, {len(body)} bytes>"
    text = body.decode("utf-8", errors="ignore")
    try:
        payload = filter_sensitive_data(json.loads(text))
        return truncate_large_data(json.dumps(payload, ensure_ascii=False), max_length=5000)
    except json.JSONDecodeError:
        return truncate_large_data(text, max_length=5000)


def _extract_error_reason(body_text: Optional[str]) -> Optional[str]:
    """Pull ``detail``/``message`` out of an error body."""
    if not body_text:
        return None
    try:
        payload = json.loads(body_text)
    except json.JSONDecodeError:
        return truncate_large_data(body_text, max_length=500)
    if isinstance(payload, dict):
        for key in ("detail", "message", "error"):
            if payload.get(key):
                return str(payload[key])
    return truncate_large_data(body_text, max_length=500)


class RequestLoggingMiddleware:
    """Log method, path, status, duration and sanitized bodies."""

    def __init__(self, app: ASGIApp, exclude_paths: Optional[list] = None):
        self.app = app
        self.exclude_paths = exclude_paths or ["/health", "/"]

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope.get("path", "") in self.exclude_paths:
            await self.app(scope, receive, send)
            return

        start_time = time.time()
        request_id = id(scope)
        method = scope.get("method", "UNKNOWN")
        path = scope.get("path", "")
        headers = {
            k.decode("latin-1"): v.decode("latin-1")
            for k, v in scope.get("headers", [])
        }
        request_content_type = headers.get("content-type", "")

        request_chunks = []
        response_chunks = []
        response_content_type = ""
        status_code = 0

        async def logging_receive() -> Message:
            message = await receive()
            if message["type"] == "http.request":
                request_chunks.append(message.get("body", b""))
            return message

        async def logging_send(message: Message) -> None:
            nonlocal status_code, response_content_type
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
                for k, v in message.get("headers", []):
                    if k.lower() == b"content-type":
                        response_content_type = v.decode("latin-1")
            elif message["type"] == "http.response.body":
                response_chunks.append(message.get("body", b""))
            await send(message)

        logger.info(
            f"Request started: {method} {path}",
            extra={"extra_fields": {
                "request_id": request_id,
                "method": method,
                "path": path,
                "client": scope["client"][0] if scope.get("client") else None,
                "user_agent": headers.get("user-agent"),
            }}
        )

        try:
            await self.app(scope, logging_receive, logging_send)
        except Exception as e:
            logger.error(
                f"Request failed: {method} {path} - {e}",
                exc_info=True,
                extra={"extra_fields": {
                    "request_id": request_id,
                    "method": method,
                    "path": path,
                    "duration_ms": round((time.time() - start_time) * 1000, 2),
                    "error": str(e),
                }}
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        request_body = _sanitize_body(b"".join(request_chunks), request_content_type)
        response_body = _sanitize_body(b"".join(response_chunks), response_content_type)
        error_reason = _extract_error_reason(response_body) if status_code >= 400 else None

        if status_code < 400:
            log_level = logging.INFO
        elif status_code < 500:
            log_level = logging.WARNING
        else:
            log_level = logging.ERROR

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Request body: {request_body or '-'} | Response body: {response_body or '-'}")

        message = f"Request completed: {method} {path} - {status_code} ({duration_ms:.2f}ms)"
        if error_reason:
            message += f" | error_reason={error_reason}"

        logger.log(
            log_level,
            message,
            extra={"extra_fields": {
                "request_id": request_id,
                "method": method,
                "path": path,
                "status_code": status_code,
                "duration_ms": round(duration_ms, 2),
                "request_body": request_body,
                "response_body": response_body,
                "error_reason": error_reason,
            }}
        )
