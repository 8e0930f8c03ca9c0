"""日志上下文：基于 contextvars 透传 request/job/parameter 标识。"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any, Iterator

_UNSET = object()

_request_id_var: ContextVar[str | None] = ContextVar("log_request_id", default=None)
_job_var: ContextVar[str | None] = ContextVar("log_job", default=None)
_parameter_var: ContextVar[str | None] = ContextVar("log_parameter", default=None)

CONTEXT_KEYS: tuple[str, ...] = ("request_id", "job", "parameter")


def get_log_context() -> dict[str, str | None]:
    """返回当前协程/线程下的日志上下文字段。"""
    return {
        "request_id": _request_id_var.get(),
        "job": _job_var.get(),
        "parameter": _parameter_var.get(),
    }


@contextmanager
def bind_log_context(
    *,
    request_id: str | None | object = _UNSET,
    job: str | None | object = _UNSET,
    parameter: str | None | object = _UNSET,
) -> Iterator[None]:
    """在上下文范围内绑定日志字段，并在退出时自动恢复。"""
    tokens: list[tuple[ContextVar[Any], Token[Any]]] = []
    if request_id is not _UNSET:
        tokens.append((_request_id_var, _request_id_var.set(request_id)))
    if job is not _UNSET:
        tokens.append((_job_var, _job_var.set(job)))
    if parameter is not _UNSET:
        tokens.append((_parameter_var, _parameter_var.set(parameter)))
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)
