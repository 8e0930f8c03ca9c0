"""参数渲染接口：按作业名或作业 URL 返回参数表单的 JSON 快照。"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from paramview.api.errors import ApiError
from paramview.api.v1.query import extract_job_name, parse_parameter_values
from paramview.api.v1.schemas import ParametersEnvelope, parameters_response
from paramview.application.container import get_rendering_service
from paramview.application.rendering import ParameterRenderingService
from paramview.config import get_settings

router = APIRouter()
logger = logging.getLogger(__name__)


def _service() -> ParameterRenderingService:
    return get_rendering_service()


@router.get("/parameters", response_model=ParametersEnvelope)
def render_parameters(
    job: str | None = None,
    params: str | None = None,
    service: ParameterRenderingService = Depends(_service),
) -> ParametersEnvelope:
    """渲染 ``job`` 指定作业的全部参数，``params`` 为 ``name:value,...`` 形式的当前值。"""
    if job is None or not job.strip():
        raise ApiError(400, "Missing required parameter: job", "Provide the job name or URL using ?job=JOB_NAME")
    full_name = extract_job_name(job)
    if full_name is None:
        raise ApiError(400, f"Invalid job name or URL: {job}", "Expected folder/name or https://host/job/name/")
    return _render(service, full_name, params)


@router.get("/jobs/{job_path:path}/parameters", response_model=ParametersEnvelope)
def render_job_parameters(
    job_path: str,
    params: str | None = None,
    service: ParameterRenderingService = Depends(_service),
) -> ParametersEnvelope:
    """按路径寻址作业的参数渲染接口。"""
    full_name = extract_job_name(job_path)
    if full_name is None:
        raise ApiError(400, f"Invalid job path: {job_path}")
    return _render(service, full_name, params)


def _render(service: ParameterRenderingService, full_name: str, params: str | None) -> ParametersEnvelope:
    settings = get_settings()
    try:
        values = parse_parameter_values(
            params,
            max_name_length=settings.max_parameter_name_length,
            max_value_length=settings.max_parameter_value_length,
        )
    except ValueError as exc:
        raise ApiError(400, "Invalid params", str(exc)) from exc

    logger.info(
        "render_parameters requested: job=%s values=%s",
        full_name,
        len(values),
        extra={"event": "render.parameters.requested"},
    )
    try:
        info = service.render_job_parameters(full_name, values)
    except KeyError as exc:
        raise ApiError(404, f"Job not found: {full_name}", "Check the job name and ensure it exists") from exc
    except PermissionError as exc:
        raise ApiError(403, f"Access denied to job: {full_name}", "No read permission for this job") from exc
    except Exception as exc:
        logger.exception(
            "render_parameters failed",
            extra={"event": "render.job.failed", "error_type": type(exc).__name__, "error": str(exc)},
        )
        raise ApiError(500, "Internal server error", f"Unexpected error: {exc}") from exc
    return ParametersEnvelope(data=parameters_response(info))
