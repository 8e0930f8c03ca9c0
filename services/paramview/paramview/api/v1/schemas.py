"""API 响应数据模型定义：统一 {success, data|error} 信封与驼峰字段名。"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from paramview.domain.jobs.catalog import JobDefinition
from paramview.domain.models import RenderedJobParameters, RenderedParameter


class CamelModel(BaseModel):
    """序列化使用驼峰字段名，构造时同时接受 snake_case。"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RenderedParameterItem(CamelModel):
    """单个参数的渲染结果。"""
    name: str
    type: str
    description: str | None
    current_value: str
    input_type: str
    choices: list[str]
    dependencies: list[str]
    is_dynamic: bool
    is_required: bool
    error_message: str | None
    data: str | None
    choice_type: str | None


class RenderedParametersResponse(CamelModel):
    """作业参数渲染结果。"""
    job_name: str
    job_full_name: str
    job_url: str
    build_with_parameters_url: str
    active_extension_available: bool
    active_extension_version: str | None
    parameters: list[RenderedParameterItem]


class JobSummary(CamelModel):
    """作业目录条目。"""
    name: str
    full_name: str
    url: str
    build_with_parameters_url: str
    description: str | None
    parameter_count: int


class ErrorBody(CamelModel):
    message: str
    details: str | None = None


class ParametersEnvelope(CamelModel):
    success: bool = True
    data: RenderedParametersResponse


class JobListEnvelope(CamelModel):
    success: bool = True
    data: list[JobSummary]


class ErrorEnvelope(CamelModel):
    success: bool = False
    error: ErrorBody


def parameter_item(item: RenderedParameter) -> RenderedParameterItem:
    return RenderedParameterItem(
        name=item.name,
        type=item.type,
        description=item.description,
        current_value=item.current_value,
        input_type=item.input_kind.value,
        choices=list(item.choices),
        dependencies=list(item.dependencies),
        is_dynamic=item.is_dynamic,
        is_required=item.is_required,
        error_message=item.error_message,
        data=item.data,
        choice_type=item.choice_type,
    )


def parameters_response(info: RenderedJobParameters) -> RenderedParametersResponse:
    return RenderedParametersResponse(
        job_name=info.job_name,
        job_full_name=info.job_full_name,
        job_url=info.job_url,
        build_with_parameters_url=info.build_with_parameters_url,
        active_extension_available=info.extension_available,
        active_extension_version=info.extension_version,
        parameters=[parameter_item(item) for item in info.parameters],
    )


def job_summary(job: JobDefinition) -> JobSummary:
    return JobSummary(
        name=job.name,
        full_name=job.full_name,
        url=job.url,
        build_with_parameters_url=job.build_with_parameters_url,
        description=job.description,
        parameter_count=len(job.parameters),
    )


def error_payload(message: str, details: str | None = None) -> dict[str, Any]:
    return ErrorEnvelope(error=ErrorBody(message=message, details=details)).model_dump(by_alias=True)
