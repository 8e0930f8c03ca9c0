"""依赖提取测试：验证访问约定的优先级与字符串/序列结果的规整。"""

from __future__ import annotations

from paramview.domain.parameters.base import CascadeChoiceParameter, DynamicChoiceParameter, StringParameter
from paramview.domain.providers.dependencies import DependencyExtractor, split_dependencies


class _GetterDescriptor:
    name = "region"

    def get_referenced_parameters(self) -> str:
        return "env, region , env"


class _FilterProvider:
    def get_filter_parameters(self) -> list[str]:
        return ["zone", "env"]


class _BrokenProvider:
    def get_referenced_parameters(self) -> str:
        raise RuntimeError("not ready")

    def get_filter_parameters(self) -> tuple[str, ...]:
        return ("cluster",)


def test_comma_string_is_trimmed_in_order_without_dedup() -> None:
    """逗号分隔字符串逐段去空白，保持顺序且不去重。"""
    assert DependencyExtractor().dependencies_of(_GetterDescriptor()) == ["env", "region", "env"]


def test_descriptor_attribute_accepts_string_and_sequence() -> None:
    extractor = DependencyExtractor()

    assert extractor.dependencies_of(CascadeChoiceParameter("region", referenced_parameters="env, region")) == [
        "env",
        "region",
    ]
    assert extractor.dependencies_of(DynamicChoiceParameter("channel", referenced_parameters=["env"])) == ["env"]


def test_falls_back_to_filter_parameters_on_provider() -> None:
    descriptor = DynamicChoiceParameter("zone", provider=_FilterProvider())

    assert DependencyExtractor().dependencies_of(descriptor) == ["zone", "env"]


def test_failing_accessor_is_skipped() -> None:
    """访问器抛错视为未解析，继续尝试下一个约定。"""
    descriptor = DynamicChoiceParameter("node", provider=_BrokenProvider())

    assert DependencyExtractor().dependencies_of(descriptor) == ["cluster"]


def test_no_accessor_yields_empty_list() -> None:
    extractor = DependencyExtractor()

    assert extractor.dependencies_of(DynamicChoiceParameter("free")) == []
    assert extractor.dependencies_of(StringParameter("name")) == []
    assert extractor.dependencies_of(object()) == []


def test_split_dependencies_drops_blank_segments() -> None:
    assert split_dependencies(" a,, b ,") == ["a", "b"]
    assert split_dependencies(None) == []
