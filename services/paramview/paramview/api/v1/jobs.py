"""作业目录接口：列出当前可读的作业。"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from paramview.api.v1.schemas import JobListEnvelope, job_summary
from paramview.application.container import get_rendering_service
from paramview.application.rendering import ParameterRenderingService

router = APIRouter()


def _service() -> ParameterRenderingService:
    return get_rendering_service()


@router.get("/jobs", response_model=JobListEnvelope)
def list_jobs(service: ParameterRenderingService = Depends(_service)) -> JobListEnvelope:
    return JobListEnvelope(data=[job_summary(job) for job in service.list_jobs()])
