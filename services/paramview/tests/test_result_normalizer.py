"""结果归一化测试：覆盖各类 provider 返回形态到字符串选项列表的转换。"""

from __future__ import annotations

import array
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum

from paramview.domain.providers.normalizer import ResultNormalizer, ResultShape, classify


@dataclass
class _Option:
    label: str
    value: str


class _Color(Enum):
    red = "r"


class _Opaque:
    def __init__(self, text: str) -> None:
        self._text = text

    def __str__(self) -> str:
        return self._text


class _BrokenIterable(list):
    def __iter__(self):
        raise RuntimeError("boom")

    def __str__(self) -> str:
        return "broken"


def test_mapping_takes_values_in_insertion_order() -> None:
    """映射取值侧并保持插入顺序。"""
    assert ResultNormalizer().normalize({"a": "1", "b": "2"}) == ["1", "2"]


def test_mapping_null_value_falls_back_to_key() -> None:
    assert ResultNormalizer().normalize(OrderedDict([("x", None), ("y", "2")])) == ["x", "2"]


def test_labeled_options_take_value_then_label() -> None:
    """(label, value) 选项取 value，value 为空时回退到 label。"""
    normalizer = ResultNormalizer()

    assert normalizer.normalize([("Dev", "d"), ("Prod", "p")]) == ["d", "p"]
    assert normalizer.normalize([("Dev", ""), ("Prod", "p")]) == ["Dev", "p"]
    assert normalizer.normalize([_Option("Dev", "d"), {"label": "Prod", "value": "p"}]) == ["d", "p"]
    assert classify([("Dev", "d")]) == ResultShape.labeled_options


def test_scalars_and_empty_results() -> None:
    normalizer = ResultNormalizer()

    assert normalizer.normalize("x") == ["x"]
    assert normalizer.normalize("") == []
    assert normalizer.normalize(None) == []
    assert normalizer.normalize([]) == []
    assert normalizer.normalize(42) == ["42"]
    assert normalizer.normalize(True) == ["true"]
    assert normalizer.normalize(_Color.red) == ["r"]


def test_sequence_keeps_order_without_dedup_and_skips_none() -> None:
    """有序序列逐个字符串化，不去重；None 元素不产生选项。"""
    result = ResultNormalizer().normalize(["b", "a", "b", None, 3])

    assert result == ["b", "a", "b", "3"]


def test_tuple_and_array_are_array_shape() -> None:
    normalizer = ResultNormalizer()

    assert classify(("a", "b", "c")) == ResultShape.array
    assert normalizer.normalize(("a", "b", "c")) == ["a", "b", "c"]
    assert normalizer.normalize(array.array("i", [3, 1, 2])) == ["3", "1", "2"]


def test_collection_uses_native_enumeration_order() -> None:
    values = frozenset({"only"})

    assert classify(values) == ResultShape.collection
    assert ResultNormalizer().normalize(values) == ["only"]


def test_opaque_object_uses_string_form() -> None:
    normalizer = ResultNormalizer()

    assert normalizer.normalize(_Opaque("custom")) == ["custom"]
    assert normalizer.normalize(_Opaque("")) == []


def test_normalize_degrades_to_opaque_on_iteration_error() -> None:
    """迭代中途抛错时不向外抛出，退化为字符串形式。"""
    assert ResultNormalizer().normalize(_BrokenIterable(["a"])) == ["broken"]


def test_normalize_is_idempotent_for_string_lists() -> None:
    normalizer = ResultNormalizer()
    first = normalizer.normalize({"k1": "v1", "k2": "v2"})

    assert normalizer.normalize(first) == first
