"""结果归一化：把 provider 返回的任意形态结果收敛为有序字符串选项列表。

识别的形态是一个封闭集合（见 ``ResultShape``），每种形态对应一个转换函数；
无法识别的对象统一走 opaque 分支，归一化过程本身从不抛出异常。
"""

from __future__ import annotations

import array
import logging
from collections.abc import Callable, Collection, Mapping, Sequence
from decimal import Decimal
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

_SCALAR_TYPES: tuple[type, ...] = (str, bytes, bytearray, int, float, bool, Decimal, Enum)


class ResultShape(str, Enum):
    """provider 原始结果的形态分类。"""
    empty = "empty"
    sequence = "sequence"
    mapping = "mapping"
    labeled_options = "labeled_options"
    array = "array"
    collection = "collection"
    scalar = "scalar"
    opaque = "opaque"


def stringify(value: Any) -> str:
    """把单个标量转换为选项字符串。"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return stringify(value.value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def _is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, _SCALAR_TYPES)


def as_option(item: Any) -> tuple[Any, Any] | None:
    """识别 (label, value) 形式的选项，返回 (label, value)；不是选项时返回 None。"""
    if isinstance(item, (tuple, list)):
        if len(item) == 2 and _is_scalar(item[0]) and _is_scalar(item[1]):
            return item[0], item[1]
        return None
    if isinstance(item, Mapping):
        if "value" in item and ("label" in item or "name" in item):
            return item.get("label", item.get("name")), item["value"]
        return None
    if _is_scalar(item):
        return None
    if hasattr(item, "value") and (hasattr(item, "label") or hasattr(item, "name")):
        label = getattr(item, "label", None)
        if label is None:
            label = getattr(item, "name", None)
        return label, getattr(item, "value")
    return None


def classify(raw: Any) -> ResultShape:
    """判定原始结果属于哪一种形态。"""
    if raw is None:
        return ResultShape.empty
    if _is_scalar(raw):
        return ResultShape.scalar
    if isinstance(raw, Mapping):
        return ResultShape.mapping
    if isinstance(raw, (list, tuple)) and raw and all(as_option(item) is not None for item in raw):
        return ResultShape.labeled_options
    if isinstance(raw, (tuple, array.array)):
        return ResultShape.array
    if isinstance(raw, Sequence):
        return ResultShape.sequence
    if isinstance(raw, Collection):
        return ResultShape.collection
    return ResultShape.opaque


def _from_iterable(raw: Any) -> list[str]:
    # None 元素不产生选项，其余元素按原顺序逐个字符串化。
    return [stringify(item) for item in raw if item is not None]


def _from_mapping(raw: Mapping[Any, Any]) -> list[str]:
    return [stringify(key if value is None else value) for key, value in raw.items()]


def _from_labeled_options(raw: Sequence[Any]) -> list[str]:
    choices: list[str] = []
    for item in raw:
        label, value = as_option(item) or (None, None)
        if value is not None and stringify(value) != "":
            choices.append(stringify(value))
        elif label is not None:
            choices.append(stringify(label))
    return choices


def _from_scalar(raw: Any) -> list[str]:
    text = stringify(raw)
    return [text] if text else []


def _from_opaque(raw: Any) -> list[str]:
    try:
        text = str(raw)
    except Exception as exc:
        logger.debug(
            "opaque provider result is not convertible",
            extra={"event": "normalize.opaque.failed", "error_type": type(exc).__name__, "error": str(exc)},
        )
        return []
    return [text] if text else []


_CONVERTERS: dict[ResultShape, Callable[[Any], list[str]]] = {
    ResultShape.empty: lambda _raw: [],
    ResultShape.sequence: _from_iterable,
    ResultShape.mapping: _from_mapping,
    ResultShape.labeled_options: _from_labeled_options,
    ResultShape.array: _from_iterable,
    ResultShape.collection: _from_iterable,
    ResultShape.scalar: _from_scalar,
    ResultShape.opaque: _from_opaque,
}


class ResultNormalizer:
    """把 provider 原始结果归一化为有序字符串列表，保持源顺序且不去重。"""

    def normalize(self, raw: Any) -> list[str]:
        shape = ResultShape.opaque
        try:
            shape = classify(raw)
            return _CONVERTERS[shape](raw)
        except Exception as exc:
            # 迭代或字符串化中途失败时退化为 opaque 分支。
            logger.debug(
                "provider result degraded to opaque",
                extra={
                    "event": "normalize.degraded",
                    "op": shape.value,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            return _from_opaque(raw)
