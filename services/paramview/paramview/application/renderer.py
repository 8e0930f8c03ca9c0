"""单参数渲染：区分内置/动态/未知类型，产出规范化的 RenderedParameter。"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from paramview.domain.enums import DescriptorCategory, InputKind
from paramview.domain.models import RenderedParameter
from paramview.domain.parameters.base import DynamicReferenceParameter, PasswordParameter
from paramview.domain.parameters.kinds import categorize, input_kind_of, type_tag_of
from paramview.domain.providers.dependencies import DependencyExtractor
from paramview.domain.providers.invoker import ProviderInvoker

logger = logging.getLogger(__name__)


class ParameterRenderer:
    """参数渲染器，任何输入都返回一条记录，异常被收敛为 error_message。"""

    def __init__(self, extractor: DependencyExtractor, invoker: ProviderInvoker) -> None:
        self._extractor = extractor
        self._invoker = invoker

    def render(self, descriptor: Any, values: Mapping[str, str], job: Any = None) -> RenderedParameter:
        try:
            category = categorize(descriptor)
            if category == DescriptorCategory.dynamic:
                return self._render_dynamic(descriptor, values, job)
            if category == DescriptorCategory.builtin:
                return self._render_builtin(descriptor, values)
            return self._render_unrecognized(descriptor, values)
        except Exception as exc:
            logger.warning(
                "parameter render failed",
                extra={
                    "event": "render.parameter.failed",
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            return self.error_record(descriptor, values, f"Failed to render parameter: {exc}")

    def error_record(self, descriptor: Any, values: Mapping[str, str], message: str) -> RenderedParameter:
        """构造失败记录：选项为空，当前值只取调用方输入或声明默认值。"""
        try:
            record = self._base(descriptor)
            record.is_dynamic = categorize(descriptor) == DescriptorCategory.dynamic
            if record.is_dynamic:
                record.current_value = values.get(record.name, "")
            else:
                record.current_value = self._static_value(descriptor, values)
        except Exception as exc:
            logger.warning(
                "error record degraded to minimal record",
                extra={"event": "render.parameter.degraded", "error_type": type(exc).__name__, "error": str(exc)},
            )
            tag = type(descriptor).__name__
            record = RenderedParameter(
                name=f"<unnamed {tag}>",
                type=tag,
                description=None,
                current_value="",
                input_kind=InputKind.text,
            )
        record.error_message = message
        return record

    @staticmethod
    def _attr(descriptor: Any, attribute: str, default: Any = None) -> Any:
        """读取描述符属性；属性访问抛出任何异常都回退为 default。"""
        try:
            return getattr(descriptor, attribute, default)
        except Exception as exc:
            logger.debug(
                "descriptor attribute lookup failed: attribute=%s",
                attribute,
                extra={"event": "render.attribute.failed", "error_type": type(exc).__name__, "error": str(exc)},
            )
            return default

    def _base(self, descriptor: Any) -> RenderedParameter:
        tag = type_tag_of(descriptor)
        name = self._attr(descriptor, "name")
        if not isinstance(name, str) or not name:
            name = f"<unnamed {tag}>"
        description = self._attr(descriptor, "description")
        try:
            required = bool(self._attr(descriptor, "required", False))
        except Exception:
            required = False
        return RenderedParameter(
            name=name,
            type=tag,
            description=str(description) if description is not None else None,
            current_value="",
            input_kind=input_kind_of(tag),
            is_required=required,
        )

    @classmethod
    def _static_value(cls, descriptor: Any, values: Mapping[str, str]) -> str:
        if isinstance(descriptor, PasswordParameter):
            return ""
        name = cls._attr(descriptor, "name")
        if isinstance(name, str) and name in values:
            return values[name]
        # 默认值读取失败时按“无默认值”处理。
        try:
            getter = getattr(descriptor, "default_value", None)
            default = getter() if callable(getter) else getattr(descriptor, "default", None)
            return "" if default is None else str(default)
        except Exception as exc:
            logger.warning(
                "parameter default lookup failed",
                extra={"event": "render.default.failed", "error_type": type(exc).__name__, "error": str(exc)},
            )
            return ""

    def _render_builtin(self, descriptor: Any, values: Mapping[str, str]) -> RenderedParameter:
        record = self._base(descriptor)
        record.current_value = self._static_value(descriptor, values)
        record.choices = [str(item) for item in (getattr(descriptor, "choices", None) or [])]
        return record

    def _render_unrecognized(self, descriptor: Any, values: Mapping[str, str]) -> RenderedParameter:
        record = self._base(descriptor)
        # 未知类型一律按单行文本渲染，保证向前兼容。
        record.input_kind = InputKind.text
        record.current_value = self._static_value(descriptor, values)
        logger.info(
            "unrecognized parameter type rendered as text: type=%s",
            record.type,
            extra={"event": "render.parameter.unrecognized"},
        )
        return record

    def _render_dynamic(self, descriptor: Any, values: Mapping[str, str], job: Any) -> RenderedParameter:
        record = self._base(descriptor)
        record.is_dynamic = True
        record.dependencies = self._extractor.dependencies_of(descriptor)
        record.current_value = values.get(record.name, "")

        provider = getattr(descriptor, "provider", None)
        choice_type = getattr(descriptor, "choice_type", None) or getattr(provider, "choice_type", None)
        record.choice_type = str(choice_type) if choice_type else None
        if provider is None:
            record.error_message = "No provider configured for dynamic parameter"
            return record

        # 传入完整的当前值映射，由 provider 自行决定读取哪些参数。
        result = self._invoker.invoke(provider, job, values)
        if result.ok:
            if isinstance(descriptor, DynamicReferenceParameter) and isinstance(result.raw, str):
                record.data = result.raw
            else:
                record.choices = list(result.choices)
            logger.debug(
                "dynamic parameter rendered: candidate=%s choices=%s",
                result.candidate,
                len(record.choices),
                extra={"event": "render.parameter.dynamic", "candidate": result.candidate},
            )
            return record

        failure = result.failure
        if failure is not None:
            record.error_message = f"Failed to render dynamic parameter: {failure.error}"
            logger.warning(
                "dynamic parameter has no usable result",
                extra={
                    "event": "render.parameter.failed",
                    "candidate": failure.candidate,
                    "error": failure.error,
                },
            )
        return record
