"""参数描述符定义：内置固定参数与扩展提供的动态参数。

描述符由作业定义持有，渲染流程只读不写。动态参数通过 ``provider`` 持有
一个选项提供者对象，其可用方法因扩展版本不同而不同，由调用器在运行时探测。
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class ParameterDescriptor:
    """参数描述符基类，约束名称、描述、默认值与必填标记。"""
    name: str
    description: str | None = None
    default: Any = None
    required: bool = False

    @property
    def type_tag(self) -> str:
        """返回描述符类型标签，与类名保持一致。"""
        return type(self).__name__

    def default_value(self) -> str | None:
        """返回声明的默认值字符串；未声明时返回 None。"""
        if self.default is None:
            return None
        return str(self.default)


@dataclass(slots=True)
class StringParameter(ParameterDescriptor):
    """单行文本参数。"""


@dataclass(slots=True)
class TextParameter(ParameterDescriptor):
    """多行文本参数。"""


@dataclass(slots=True)
class BooleanParameter(ParameterDescriptor):
    """布尔参数，固定提供 true/false 两个选项。"""
    default: Any = False

    @property
    def choices(self) -> list[str]:
        return ["true", "false"]

    def default_value(self) -> str | None:
        return "true" if bool(self.default) else "false"


@dataclass(slots=True)
class ChoiceParameter(ParameterDescriptor):
    """固定选项下拉参数；未声明默认值时取第一个选项。"""
    choices: list[str] = field(default_factory=list)

    def default_value(self) -> str | None:
        if self.default is not None:
            return str(self.default)
        return self.choices[0] if self.choices else None


@dataclass(slots=True)
class PasswordParameter(ParameterDescriptor):
    """密文参数，任何情况下都不对外暴露取值。"""

    def default_value(self) -> str | None:
        return ""


@dataclass(slots=True)
class FileParameter(ParameterDescriptor):
    """文件上传参数，没有可渲染的默认值。"""

    def default_value(self) -> str | None:
        return None


@dataclass(slots=True)
class HiddenParameter(ParameterDescriptor):
    """隐藏参数，表单不展示但仍随构建提交默认值。"""


@dataclass(slots=True)
class MultiSelectParameter(ChoiceParameter):
    """多选参数，当前值为逗号分隔的已选项；未声明默认值时为空。"""

    def default_value(self) -> str | None:
        return None if self.default is None else str(self.default)


@dataclass(slots=True)
class RadioParameter(ChoiceParameter):
    """单选按钮参数，默认值规则与下拉参数一致。"""


@dataclass(slots=True)
class DynamicParameter(ParameterDescriptor):
    """动态参数公共基类，选项由 provider 在渲染时计算。"""
    provider: Any = None
    referenced_parameters: str | Sequence[str] | None = None
    choice_type: str | None = None


@dataclass(slots=True)
class DynamicChoiceParameter(DynamicParameter):
    """简单动态选项参数。"""


@dataclass(slots=True)
class CascadeChoiceParameter(DynamicParameter):
    """级联动态选项参数，选项依赖其他参数的当前值。"""


@dataclass(slots=True)
class DynamicReferenceParameter(DynamicParameter):
    """动态引用参数，可能返回选项列表或一段自由文本/HTML。"""


BUILTIN_PARAMETER_TYPES: tuple[type[ParameterDescriptor], ...] = (
    StringParameter,
    TextParameter,
    BooleanParameter,
    ChoiceParameter,
    PasswordParameter,
    FileParameter,
    HiddenParameter,
    MultiSelectParameter,
    RadioParameter,
)

DYNAMIC_PARAMETER_TYPES: tuple[type[DynamicParameter], ...] = (
    DynamicChoiceParameter,
    CascadeChoiceParameter,
    DynamicReferenceParameter,
)


class FunctionProvider:
    """把普通函数包装成 provider：``render(values)`` 直接转调该函数。"""

    def __init__(self, func: Callable[[Mapping[str, str]], Any], *, static_choices: Sequence[str] | None = None) -> None:
        self._func = func
        self._static_choices = list(static_choices) if static_choices is not None else None

    def render(self, values: Mapping[str, str]) -> Any:
        return self._func(values)

    def get_choices_for_ui(self) -> list[str]:
        return list(self._static_choices or [])

    def __repr__(self) -> str:
        name = getattr(self._func, "__name__", type(self._func).__name__)
        return f"FunctionProvider({name})"
