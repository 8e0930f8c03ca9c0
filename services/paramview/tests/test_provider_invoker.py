"""provider 调用器测试：验证候选操作的优先级、失败回退与超时处理。"""

from __future__ import annotations

import threading
from collections.abc import Mapping

from paramview.domain.enums import CandidateOutcome
from paramview.domain.providers.invoker import ProviderInvoker
from paramview.domain.providers.normalizer import ResultNormalizer
from paramview.infra.logging.context import bind_log_context, get_log_context


class _StaticOnly:
    def get_choices_for_ui(self) -> list[str]:
        return ["a", "b"]


class _RenderAndStatic:
    def render(self, values: Mapping[str, str]) -> list[str]:
        return [f"rendered-{values.get('env', '')}"]

    def get_choices_for_ui(self) -> list[str]:
        return ["static"]


class _LegacyAfterFailure:
    def render(self, values: Mapping[str, str]) -> list[str]:
        raise RuntimeError("render broken")

    def get_choices(self, values: Mapping[str, str]) -> dict[str, str]:
        return {"Stable": "stable", "Beta": "beta"}


class _JobScoped:
    def __init__(self) -> None:
        self.seen_job = None

    def get_choices(self, values: Mapping[str, str], job=None) -> list[str]:
        self.seen_job = job
        return ["scoped"]


class _AlwaysFails:
    def render(self, values: Mapping[str, str]) -> list[str]:
        raise ValueError("render failed")

    def get_choices(self, values: Mapping[str, str], job=None) -> list[str]:
        raise ValueError("choices failed")

    def get_choices_for_ui(self) -> list[str]:
        raise ValueError("static failed")


class _EmptyThenStatic:
    def render(self, values: Mapping[str, str]) -> list[str]:
        return []

    def get_choices_for_ui(self) -> list[str]:
        return ["fallback"]


class _Hanging:
    def __init__(self) -> None:
        self.release = threading.Event()
        self.static_called = False

    def render(self, values: Mapping[str, str]) -> list[str]:
        self.release.wait(5)
        return ["late"]

    def get_choices_for_ui(self) -> list[str]:
        self.static_called = True
        return ["static"]


class _RaisesTimeoutError:
    def render(self, values: Mapping[str, str]) -> list[str]:
        raise TimeoutError("upstream timed out")

    def get_choices_for_ui(self) -> list[str]:
        return ["static"]


def _invoker(**kwargs) -> ProviderInvoker:
    return ProviderInvoker(ResultNormalizer(), **kwargs)


def test_only_static_operation_is_used() -> None:
    """只实现零参操作时直接返回其结果。"""
    result = _invoker().invoke(_StaticOnly(), None, {})

    assert result.ok is True
    assert result.choices == ["a", "b"]
    assert result.candidate == "static_default"
    assert [item.outcome for item in result.attempts] == [CandidateOutcome.unsupported] * 3 + [
        CandidateOutcome.produced
    ]


def test_form_render_wins_over_static_choices() -> None:
    result = _invoker().invoke(_RenderAndStatic(), None, {"env": "prod"})

    assert result.ok is True
    assert result.choices == ["rendered-prod"]
    assert result.candidate == "form_render"


def test_failed_candidate_falls_through_to_legacy_contract() -> None:
    """render 抛错后继续尝试；带 job 关键字的调用签名不兼容被跳过。"""
    result = _invoker().invoke(_LegacyAfterFailure(), None, {"env": "dev"})

    assert result.ok is True
    assert result.choices == ["stable", "beta"]
    assert result.candidate == "values_only"
    assert [item.outcome for item in result.attempts] == [
        CandidateOutcome.failed,
        CandidateOutcome.unsupported,
        CandidateOutcome.produced,
    ]
    assert result.failure is None


def test_job_scoped_candidate_receives_job() -> None:
    provider = _JobScoped()
    job = object()

    result = _invoker().invoke(provider, job, {})

    assert result.candidate == "job_scoped"
    assert provider.seen_job is job


def test_all_candidates_failing_is_reported_without_raising() -> None:
    result = _invoker().invoke(_AlwaysFails(), None, {})

    assert result.ok is False
    assert result.choices == []
    assert result.failure is not None
    assert "static failed" in (result.failure.error or "")


def test_empty_result_moves_to_next_candidate() -> None:
    result = _invoker().invoke(_EmptyThenStatic(), None, {})

    assert result.choices == ["fallback"]
    assert result.attempts[0].outcome == CandidateOutcome.empty


def test_provider_without_operations_is_not_a_failure() -> None:
    """没有任何候选操作时 ok=False，但不算失败。"""
    result = _invoker().invoke(object(), None, {})

    assert result.ok is False
    assert result.choices == []
    assert result.failure is None


def test_timeout_stops_the_chain() -> None:
    provider = _Hanging()
    invoker = _invoker(timeout_seconds=0.05)
    try:
        result = invoker.invoke(provider, None, {})
        assert invoker.stranded_count == 1
    finally:
        provider.release.set()

    assert result.ok is False
    assert [item.outcome for item in result.attempts] == [CandidateOutcome.timeout]
    assert provider.static_called is False
    assert result.failure is not None
    assert "timed out" in (result.failure.error or "")


def test_hung_provider_does_not_block_later_providers() -> None:
    """挂起的 provider 超时后，其他 provider 的调用不受影响。"""
    hung = [_Hanging() for _ in range(10)]
    invoker = _invoker(timeout_seconds=0.05)
    try:
        for provider in hung:
            assert invoker.invoke(provider, None, {}).attempts[0].outcome == CandidateOutcome.timeout
        result = invoker.invoke(_RenderAndStatic(), None, {"env": "dev"})
    finally:
        for provider in hung:
            provider.release.set()

    assert result.ok is True
    assert result.choices == ["rendered-dev"]
    assert [item.outcome for item in result.attempts] == [CandidateOutcome.produced]


def test_timed_call_keeps_log_context() -> None:
    """带超时的调用在独立线程执行，但仍能读到调用方绑定的日志上下文。"""
    seen: list[str | None] = []

    class _ContextReader:
        def get_choices_for_ui(self) -> list[str]:
            seen.append(get_log_context()["job"])
            return ["x"]

    with bind_log_context(job="ops/deploy"):
        result = _invoker(timeout_seconds=2).invoke(_ContextReader(), None, {})

    assert result.choices == ["x"]
    assert seen == ["ops/deploy"]


def test_provider_timeout_error_is_a_normal_failure() -> None:
    """provider 自己抛出的 TimeoutError 按普通失败处理，继续后续候选。"""
    result = _invoker(timeout_seconds=2).invoke(_RaisesTimeoutError(), None, {})

    assert result.choices == ["static"]
    assert result.attempts[0].outcome == CandidateOutcome.failed
