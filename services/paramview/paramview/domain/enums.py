"""领域枚举定义：统一输入控件类型、描述符分类与候选调用结果取值。"""

from __future__ import annotations

from enum import Enum


class InputKind(str, Enum):
    """前端渲染使用的输入控件类型。"""
    text = "text"
    textarea = "textarea"
    select = "select"
    checkbox = "checkbox"
    password = "password"
    cascade_select = "cascade_select"
    dynamic_reference = "dynamic_reference"
    file = "file"
    hidden = "hidden"
    multi_select = "multi_select"
    radio = "radio"


class DescriptorCategory(str, Enum):
    """参数描述符分类：内置固定类型、扩展动态类型或未知类型。"""
    builtin = "builtin"
    dynamic = "dynamic"
    unrecognized = "unrecognized"


class CandidateOutcome(str, Enum):
    """单个候选操作的调用结果。"""
    unsupported = "unsupported"
    failed = "failed"
    timeout = "timeout"
    empty = "empty"
    produced = "produced"
