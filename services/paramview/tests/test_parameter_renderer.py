"""单参数渲染测试：覆盖内置、动态与未知类型的渲染规则及错误不变量。"""

from __future__ import annotations

from collections.abc import Mapping

from paramview.application.renderer import ParameterRenderer
from paramview.domain.enums import InputKind
from paramview.domain.parameters.base import (
    BooleanParameter,
    CascadeChoiceParameter,
    ChoiceParameter,
    DynamicChoiceParameter,
    DynamicReferenceParameter,
    FileParameter,
    FunctionProvider,
    HiddenParameter,
    MultiSelectParameter,
    PasswordParameter,
    RadioParameter,
    StringParameter,
    TextParameter,
)
from paramview.domain.providers.dependencies import DependencyExtractor
from paramview.domain.providers.invoker import ProviderInvoker
from paramview.domain.providers.normalizer import ResultNormalizer


class ExoticChoiceParameter:
    """未知参数类型，仅暴露名称与描述。"""

    def __init__(self, name: str) -> None:
        self.name = name
        self.description = "from another plugin"
        self.default = "fallback"


class _BrokenDefaultChoice(ChoiceParameter):
    """默认值读取会抛错的下拉参数。"""

    def default_value(self) -> str | None:
        raise RuntimeError("default lookup failed")


class _Hostile:
    """除双下划线属性外，任何属性访问都抛错。"""

    def __getattribute__(self, item: str):
        if item.startswith("__"):
            return object.__getattribute__(self, item)
        raise RuntimeError(f"no attribute {item}")


class _FailingProvider:
    def render(self, values: Mapping[str, str]) -> list[str]:
        raise RuntimeError("backend down")

    def get_choices_for_ui(self) -> list[str]:
        raise RuntimeError("backend down")


class _NothingToOffer:
    def render(self, values: Mapping[str, str]) -> list[str]:
        return []


class _ExplodingExtractor(DependencyExtractor):
    def dependencies_of(self, descriptor):
        raise RuntimeError("extractor exploded")


def _renderer(extractor: DependencyExtractor | None = None) -> ParameterRenderer:
    return ParameterRenderer(extractor or DependencyExtractor(), ProviderInvoker(ResultNormalizer()))


def test_choice_parameter_echoes_declared_choices() -> None:
    """内置下拉参数原样返回声明的选项，且不是动态参数。"""
    descriptor = ChoiceParameter("env", choices=["dev", "staging", "prod"])

    record = _renderer().render(descriptor, {})

    assert record.choices == ["dev", "staging", "prod"]
    assert record.current_value == "dev"
    assert record.input_kind == InputKind.select
    assert record.is_dynamic is False
    assert record.dependencies == []
    assert record.type == "ChoiceParameter"


def test_supplied_value_overrides_default() -> None:
    record = _renderer().render(StringParameter("version", default="1.0.0", required=True), {"version": "2.0.0"})

    assert record.current_value == "2.0.0"
    assert record.input_kind == InputKind.text
    assert record.is_required is True


def test_password_never_reports_value() -> None:
    renderer = _renderer()
    descriptor = PasswordParameter("token", default="default-secret")

    assert renderer.render(descriptor, {"token": "s3cret"}).current_value == ""
    assert renderer.render(descriptor, {}).current_value == ""
    assert renderer.render(descriptor, {}).input_kind == InputKind.password


def test_builtin_kinds_map_to_input_kinds() -> None:
    renderer = _renderer()

    boolean = renderer.render(BooleanParameter("dry_run", default=True), {})
    assert boolean.input_kind == InputKind.checkbox
    assert boolean.choices == ["true", "false"]
    assert boolean.current_value == "true"

    assert renderer.render(TextParameter("notes"), {}).input_kind == InputKind.textarea
    file_record = renderer.render(FileParameter("artifact"), {})
    assert file_record.input_kind == InputKind.file
    assert file_record.current_value == ""


def test_unrecognized_kind_renders_as_text() -> None:
    """未知类型按文本渲染，type 仍回显原类型名。"""
    record = _renderer().render(ExoticChoiceParameter("custom"), {})

    assert record.type == "ExoticChoiceParameter"
    assert record.input_kind == InputKind.text
    assert record.current_value == "fallback"
    assert record.choices == []
    assert record.is_dynamic is False
    assert record.error_message is None


def test_cascade_parameter_passes_all_current_values() -> None:
    seen: dict[str, str] = {}

    def regions(values: Mapping[str, str]) -> list[str]:
        seen.update(values)
        return ["us-east-1", "us-west-1"] if values.get("env") == "prod" else []

    descriptor = CascadeChoiceParameter(
        "region", provider=FunctionProvider(regions), referenced_parameters="env", choice_type="single_select"
    )

    record = _renderer().render(descriptor, {"env": "prod", "other": "x", "region": "us-west-1"})

    assert record.choices == ["us-east-1", "us-west-1"]
    assert record.dependencies == ["env"]
    assert record.current_value == "us-west-1"
    assert record.input_kind == InputKind.cascade_select
    assert record.is_dynamic is True
    assert record.choice_type == "single_select"
    assert seen == {"env": "prod", "other": "x", "region": "us-west-1"}


def test_dynamic_reference_text_goes_to_data() -> None:
    descriptor = DynamicReferenceParameter("summary", provider=FunctionProvider(lambda values: "<b>hi</b>"))

    record = _renderer().render(descriptor, {})

    assert record.data == "<b>hi</b>"
    assert record.choices == []
    assert record.input_kind == InputKind.dynamic_reference


def test_dynamic_reference_list_goes_to_choices() -> None:
    descriptor = DynamicReferenceParameter("hosts", provider=FunctionProvider(lambda values: ["h1", "h2"]))

    record = _renderer().render(descriptor, {})

    assert record.choices == ["h1", "h2"]
    assert record.data is None


def test_dynamic_failure_sets_error_and_clears_choices() -> None:
    """所有候选失败时记录错误信息，选项为空，当前值只取调用方输入。"""
    descriptor = DynamicChoiceParameter("region", provider=_FailingProvider(), referenced_parameters="env")

    record = _renderer().render(descriptor, {"region": "eu"})

    assert record.error_message is not None
    assert "backend down" in record.error_message
    assert record.choices == []
    assert record.current_value == "eu"
    assert record.dependencies == ["env"]


def test_empty_dynamic_result_is_not_an_error() -> None:
    record = _renderer().render(DynamicChoiceParameter("region", provider=_NothingToOffer()), {})

    assert record.choices == []
    assert record.error_message is None


def test_missing_provider_is_reported() -> None:
    record = _renderer().render(DynamicChoiceParameter("region"), {})

    assert record.error_message == "No provider configured for dynamic parameter"
    assert record.choices == []


def test_unexpected_error_is_contained() -> None:
    """渲染过程中的意外异常被收敛为该参数的错误信息。"""
    descriptor = DynamicChoiceParameter("region", provider=FunctionProvider(lambda values: ["a"]))

    record = _renderer(_ExplodingExtractor()).render(descriptor, {"region": "a"})

    assert record.error_message is not None
    assert "extractor exploded" in record.error_message
    assert record.choices == []
    assert record.current_value == "a"
    assert record.is_dynamic is True


def test_failing_default_lookup_falls_back_to_empty_value() -> None:
    """默认值读取失败时按无默认值渲染，仍保留声明的选项。"""
    renderer = _renderer()
    descriptor = _BrokenDefaultChoice("env", choices=["a", "b"])

    record = renderer.render(descriptor, {})

    assert record.name == "env"
    assert record.current_value == ""
    assert record.choices == ["a", "b"]
    assert record.input_kind == InputKind.select
    assert renderer.render(descriptor, {"env": "b"}).current_value == "b"


def test_hostile_descriptor_still_yields_a_record() -> None:
    renderer = _renderer()

    record = renderer.render(_Hostile(), {})
    failed = renderer.error_record(_Hostile(), {}, "Failed to render parameter: boom")

    assert record.name == "<unnamed _Hostile>"
    assert record.type == "_Hostile"
    assert record.input_kind == InputKind.text
    assert record.current_value == ""
    assert failed.error_message == "Failed to render parameter: boom"
    assert failed.choices == []


def test_hidden_radio_and_multi_select_kinds() -> None:
    renderer = _renderer()

    hidden = renderer.render(HiddenParameter("template_id", default="release-v2"), {})
    radio = renderer.render(RadioParameter("audience", choices=["internal", "public"]), {})
    multi = renderer.render(MultiSelectParameter("channels", choices=["email", "slack", "web"]), {})
    preset = renderer.render(
        MultiSelectParameter("channels", choices=["email", "slack", "web"], default="email,slack"), {}
    )

    assert hidden.input_kind == InputKind.hidden
    assert hidden.current_value == "release-v2"
    assert radio.input_kind == InputKind.radio
    assert radio.current_value == "internal"
    assert radio.choices == ["internal", "public"]
    assert multi.input_kind == InputKind.multi_select
    assert multi.current_value == ""
    assert preset.current_value == "email,slack"
