"""领域数据结构定义：渲染后的参数记录与作业参数聚合等值对象。"""

from __future__ import annotations

from dataclasses import dataclass, field

from paramview.domain.enums import InputKind


@dataclass(slots=True)
class RenderedParameter:
    """单个参数的规范化渲染结果。"""
    name: str
    type: str
    description: str | None
    current_value: str
    input_kind: InputKind
    choices: list[str] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    is_dynamic: bool = False
    is_required: bool = False
    error_message: str | None = None
    data: str | None = None
    choice_type: str | None = None

    @property
    def has_error(self) -> bool:
        return bool(self.error_message and self.error_message.strip())


@dataclass(slots=True)
class RenderedJobParameters:
    """一次渲染请求的聚合结果，参数顺序与作业声明顺序一致。"""
    job_name: str
    job_full_name: str
    job_url: str
    build_with_parameters_url: str
    extension_available: bool
    extension_version: str | None
    parameters: list[RenderedParameter] = field(default_factory=list)

    def find(self, name: str) -> RenderedParameter | None:
        """按名称查找参数渲染结果。"""
        for item in self.parameters:
            if item.name == name:
                return item
        return None
