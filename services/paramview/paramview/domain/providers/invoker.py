"""provider 调用器：按固定优先级探测候选操作，返回第一个非空的归一化结果。

扩展的 provider 契约随版本演进，同一个 provider 实例可能只实现其中部分操作。
调用器不关心具体版本，只按下列顺序逐个尝试，与交互式表单的选择保持一致：

1. ``render(values)``：与表单渲染时触发的同一次计算；
2. ``get_choices(values, job=job)``：需要作业上下文的 provider；
3. ``get_choices(values)``：旧版契约；
4. ``get_choices_for_ui()``：静态/默认选项，忽略当前值。

方法不存在或签名不兼容记为 unsupported 并跳过；执行抛错记为 failed 并继续；
超时记为 timeout 并终止整条链。所有结果都以值返回，不向调用方抛出异常。
"""

from __future__ import annotations

import contextvars
import inspect
import logging
import threading
import time
from collections.abc import Callable, Mapping
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from typing import Any

from paramview.domain.enums import CandidateOutcome
from paramview.domain.providers.normalizer import ResultNormalizer

logger = logging.getLogger(__name__)


class ProviderTimeoutError(Exception):
    """候选操作在限定时间内未返回。"""


@dataclass(slots=True, frozen=True)
class CandidateCall:
    """候选操作定义：方法名与参数构造方式。"""
    name: str
    method: str
    build_args: Callable[[Any, Mapping[str, str]], tuple[tuple[Any, ...], dict[str, Any]]]


DEFAULT_CANDIDATES: tuple[CandidateCall, ...] = (
    CandidateCall("form_render", "render", lambda job, values: ((values,), {})),
    CandidateCall("job_scoped", "get_choices", lambda job, values: ((values,), {"job": job})),
    CandidateCall("values_only", "get_choices", lambda job, values: ((values,), {})),
    CandidateCall("static_default", "get_choices_for_ui", lambda job, values: ((), {})),
)


@dataclass(slots=True)
class CandidateResult:
    """单个候选操作的执行记录。"""
    candidate: str
    outcome: CandidateOutcome
    raw: Any = None
    choices: list[str] = field(default_factory=list)
    error: str | None = None
    duration_ms: float | None = None


@dataclass(slots=True)
class InvocationResult:
    """整条候选链的执行结果。"""
    choices: list[str]
    ok: bool
    raw: Any = None
    candidate: str | None = None
    attempts: list[CandidateResult] = field(default_factory=list)

    @property
    def executed_any(self) -> bool:
        return any(item.outcome in {CandidateOutcome.empty, CandidateOutcome.produced} for item in self.attempts)

    @property
    def failure(self) -> CandidateResult | None:
        """链失败时返回应上报的失败记录。

        超时总是上报；其余情况下只要有候选正常执行过（包括返回空结果）就返回 None，
        否则返回最后一次失败记录。
        """
        if self.ok:
            return None
        for item in self.attempts:
            if item.outcome == CandidateOutcome.timeout:
                return item
        if self.executed_any:
            return None
        failures = [item for item in self.attempts if item.outcome == CandidateOutcome.failed]
        return failures[-1] if failures else None


def _accepts(func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]) -> bool:
    """检查可调用对象能否接受给定参数形态。"""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        # 部分内建/C 扩展对象拿不到签名，只能按可调用处理。
        return True
    try:
        signature.bind(*args, **kwargs)
    except TypeError:
        return False
    return True


class ProviderInvoker:
    """按候选顺序调用 provider，并可为每个候选施加超时。"""

    def __init__(
        self,
        normalizer: ResultNormalizer,
        *,
        candidates: tuple[CandidateCall, ...] = DEFAULT_CANDIDATES,
        timeout_seconds: float | None = None,
    ) -> None:
        self._normalizer = normalizer
        self._candidates = candidates
        self._timeout_seconds = timeout_seconds if timeout_seconds and timeout_seconds > 0 else None
        self._stranded_lock = threading.Lock()
        self._stranded: set[threading.Thread] = set()

    @property
    def stranded_count(self) -> int:
        """超时后仍在运行、已被放弃的 provider 线程数。"""
        with self._stranded_lock:
            self._stranded = {thread for thread in self._stranded if thread.is_alive()}
            return len(self._stranded)

    def invoke(self, provider: Any, job: Any, values: Mapping[str, str]) -> InvocationResult:
        attempts: list[CandidateResult] = []
        for candidate in self._candidates:
            result = self._attempt(provider, candidate, job, values)
            attempts.append(result)
            if result.outcome == CandidateOutcome.produced:
                return InvocationResult(
                    choices=result.choices,
                    ok=True,
                    raw=result.raw,
                    candidate=candidate.name,
                    attempts=attempts,
                )
            if result.outcome == CandidateOutcome.timeout:
                break
        return InvocationResult(choices=[], ok=False, attempts=attempts)

    def _attempt(self, provider: Any, candidate: CandidateCall, job: Any, values: Mapping[str, str]) -> CandidateResult:
        method = getattr(provider, candidate.method, None)
        args, kwargs = candidate.build_args(job, values)
        if not callable(method) or not _accepts(method, args, kwargs):
            return CandidateResult(candidate=candidate.name, outcome=CandidateOutcome.unsupported)

        started = time.perf_counter()
        try:
            raw = self._call(method, args, kwargs)
        except ProviderTimeoutError as exc:
            duration_ms = round((time.perf_counter() - started) * 1000, 2)
            message = str(exc)
            logger.warning(
                "provider candidate timed out: stranded=%s",
                self.stranded_count,
                extra={
                    "event": "provider.candidate.timeout",
                    "candidate": candidate.name,
                    "op": candidate.method,
                    "duration_ms": duration_ms,
                },
            )
            return CandidateResult(
                candidate=candidate.name,
                outcome=CandidateOutcome.timeout,
                error=message,
                duration_ms=duration_ms,
            )
        except Exception as exc:
            duration_ms = round((time.perf_counter() - started) * 1000, 2)
            logger.warning(
                "provider candidate failed",
                extra={
                    "event": "provider.candidate.failed",
                    "candidate": candidate.name,
                    "op": candidate.method,
                    "duration_ms": duration_ms,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            return CandidateResult(
                candidate=candidate.name,
                outcome=CandidateOutcome.failed,
                error=f"{type(exc).__name__}: {exc}",
                duration_ms=duration_ms,
            )

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        choices = self._normalizer.normalize(raw)
        outcome = CandidateOutcome.produced if choices else CandidateOutcome.empty
        logger.debug(
            "provider candidate completed",
            extra={
                "event": "provider.candidate.completed",
                "candidate": candidate.name,
                "op": candidate.method,
                "duration_ms": duration_ms,
            },
        )
        return CandidateResult(
            candidate=candidate.name,
            outcome=outcome,
            raw=raw,
            choices=choices,
            duration_ms=duration_ms,
        )

    def _call(self, method: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        if self._timeout_seconds is None:
            return method(*args, **kwargs)
        name = getattr(method, "__name__", "operation")
        # 每次调用独占一个守护线程，挂起的 provider 不会占住其他调用的执行槽位。
        future: Future[Any] = Future()
        ctx = contextvars.copy_context()

        def run() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                result = ctx.run(method, *args, **kwargs)
            except BaseException as exc:
                future.set_exception(exc)
            else:
                future.set_result(result)

        thread = threading.Thread(target=run, name=f"provider-{name}", daemon=True)
        thread.start()
        try:
            return future.result(timeout=self._timeout_seconds)
        except FutureTimeoutError:
            if future.done():
                # provider 自身抛出的 TimeoutError，按普通失败处理。
                raise
            with self._stranded_lock:
                self._stranded.add(thread)
            raise ProviderTimeoutError(
                f"provider operation {name} timed out after {self._timeout_seconds}s"
            ) from None
