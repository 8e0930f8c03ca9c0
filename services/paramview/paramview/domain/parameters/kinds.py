"""参数类型识别：根据类型标签推导输入控件，并对描述符做内置/动态分类。"""

from __future__ import annotations

from typing import Any

from paramview.domain.enums import DescriptorCategory, InputKind
from paramview.domain.parameters.base import BUILTIN_PARAMETER_TYPES, DYNAMIC_PARAMETER_TYPES

# 顺序即优先级：更具体的关键字必须排在前面（cascadechoice 同时包含 choice）。
_KEYWORD_KINDS: tuple[tuple[str, InputKind], ...] = (
    ("cascade", InputKind.cascade_select),
    ("reference", InputKind.dynamic_reference),
    ("password", InputKind.password),
    ("boolean", InputKind.checkbox),
    ("file", InputKind.file),
    ("hidden", InputKind.hidden),
    ("multiselect", InputKind.multi_select),
    ("radio", InputKind.radio),
    ("choice", InputKind.select),
    ("textparameter", InputKind.textarea),
    ("textarea", InputKind.textarea),
    ("string", InputKind.text),
)


def input_kind_of(type_tag: str | None) -> InputKind:
    """按关键字匹配类型标签得到输入控件类型，无法识别时回退为 text。

    hidden、multi_select、radio 只由 ``HiddenParameter``、``MultiSelectParameter``、
    ``RadioParameter`` 这类标签命中；未知类型在渲染时仍强制为 text。
    """
    if not type_tag:
        return InputKind.text
    normalized = type_tag.lower().replace("_", "").replace("-", "")
    for keyword, kind in _KEYWORD_KINDS:
        if keyword in normalized:
            return kind
    return InputKind.text


def categorize(descriptor: Any) -> DescriptorCategory:
    """判断描述符属于内置类型、动态类型还是未知类型。"""
    if isinstance(descriptor, DYNAMIC_PARAMETER_TYPES):
        return DescriptorCategory.dynamic
    if isinstance(descriptor, BUILTIN_PARAMETER_TYPES):
        return DescriptorCategory.builtin
    return DescriptorCategory.unrecognized


def type_tag_of(descriptor: Any) -> str:
    try:
        tag = getattr(descriptor, "type_tag", None)
    except Exception:
        tag = None
    if isinstance(tag, str) and tag:
        return tag
    return type(descriptor).__name__
