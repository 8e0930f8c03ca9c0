"""API 错误定义：业务错误统一转换为 {success: false, error} 信封。"""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from paramview.api.v1.query import sanitize_message
from paramview.api.v1.schemas import error_payload

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """携带 HTTP 状态码与说明的接口错误。"""

    def __init__(self, status_code: int, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    logger.info(
        "api request rejected: status=%s message=%s",
        exc.status_code,
        exc.message,
        extra={"event": "http.request.rejected", "op": f"{request.method} {request.url.path}", "status_code": exc.status_code},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(sanitize_message(exc.message) or "", sanitize_message(exc.details)),
    )
