"""依赖提取：按固定顺序尝试多种访问约定，得到动态参数声明的上游参数名。"""

from __future__ import annotations

import array
import logging
from collections.abc import Callable, Collection, Sequence
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

_UNRESOLVED = object()


@dataclass(slots=True, frozen=True)
class DependencyStrategy:
    """一种依赖访问约定：属性名与对应的 getter 方法名。"""
    name: str
    attribute: str
    getter: str


DEFAULT_STRATEGIES: tuple[DependencyStrategy, ...] = (
    DependencyStrategy("referenced_parameters", "referenced_parameters", "get_referenced_parameters"),
    DependencyStrategy("filter_parameters", "filter_parameters", "get_filter_parameters"),
)


def split_dependencies(value: Any) -> list[str]:
    """把访问器返回值转换为有序名称列表，不排序不去重。"""
    if value is None:
        return []
    if isinstance(value, str):
        return [segment.strip() for segment in value.split(",") if segment.strip()]
    if isinstance(value, (Sequence, array.array, Collection)) and not isinstance(value, (bytes, bytearray)):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    text = str(value).strip()
    return [text] if text else []


class DependencyExtractor:
    """依赖提取器：依次在描述符与其 provider 上查找访问约定，取第一个可解析的结果。"""

    def __init__(self, strategies: Sequence[DependencyStrategy] = DEFAULT_STRATEGIES) -> None:
        self._strategies = tuple(strategies)

    def dependencies_of(self, descriptor: Any) -> list[str]:
        for name, resolve in self.strategy_resolvers(descriptor):
            value = resolve()
            if value is _UNRESOLVED:
                continue
            try:
                return split_dependencies(value)
            except Exception as exc:
                logger.debug(
                    "dependency value is not iterable",
                    extra={"event": "dependencies.split.failed", "op": name, "error_type": type(exc).__name__},
                )
                return []
        return []

    def strategy_resolvers(self, descriptor: Any) -> list[tuple[str, Callable[[], Any]]]:
        """返回按优先级排列的 (策略名, 解析函数) 列表。"""
        provider = getattr(descriptor, "provider", None)
        resolvers: list[tuple[str, Callable[[], Any]]] = []
        for strategy in self._strategies:
            for owner, target in (("descriptor", descriptor), ("provider", provider)):
                if target is None:
                    continue
                resolvers.append(
                    (f"{owner}.{strategy.name}", lambda t=target, s=strategy: self._resolve(t, s))
                )
        return resolvers

    @staticmethod
    def _resolve(target: Any, strategy: DependencyStrategy) -> Any:
        """读取一种访问约定；不存在、抛错或返回 None 均视为未解析。"""
        try:
            getter = getattr(target, strategy.getter, None)
            if callable(getter):
                value = getter()
            else:
                value = getattr(target, strategy.attribute, None)
                if callable(value):
                    value = value()
        except Exception as exc:
            logger.debug(
                "dependency accessor failed",
                extra={
                    "event": "dependencies.accessor.failed",
                    "op": strategy.name,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            return _UNRESOLVED
        if value is None:
            return _UNRESOLVED
        return value
