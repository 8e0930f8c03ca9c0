"""作业参数渲染编排：按声明顺序逐个渲染参数，并附带扩展可用性元数据。"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any

from paramview.application.renderer import ParameterRenderer
from paramview.domain.enums import InputKind
from paramview.domain.jobs.catalog import JobCatalog, JobDefinition
from paramview.domain.models import RenderedJobParameters, RenderedParameter
from paramview.infra.extension.probe import ExtensionAvailabilityProbe, ExtensionStatus
from paramview.infra.logging.context import bind_log_context
from paramview.infra.security.access_policy import JobAccessPolicy

logger = logging.getLogger(__name__)


class ParameterRenderingService:
    """参数渲染门面：查找作业、校验读权限并渲染全部参数。"""

    def __init__(
        self,
        *,
        catalog: JobCatalog,
        access_policy: JobAccessPolicy,
        renderer: ParameterRenderer,
        probe: ExtensionAvailabilityProbe,
    ) -> None:
        self._catalog = catalog
        self._access_policy = access_policy
        self._renderer = renderer
        self._probe = probe

    def list_jobs(self) -> list[JobDefinition]:
        return [job for job in self._catalog.all() if self._access_policy.can_read(job.full_name)]

    def get_job(self, full_name: str) -> JobDefinition:
        """获取可读作业；不存在抛 KeyError，无读权限抛 PermissionError。"""
        job = self._catalog.get(full_name)
        self._access_policy.check_read(job.full_name)
        return job

    def render_job_parameters(self, full_name: str, values: Mapping[str, str]) -> RenderedJobParameters:
        return self.render(self.get_job(full_name), values)

    def render(self, job: JobDefinition, values: Mapping[str, str]) -> RenderedJobParameters:
        """渲染作业的全部参数；单个参数失败只体现在该参数的 error_message 上。"""
        started = time.perf_counter()
        snapshot = dict(values)
        with bind_log_context(job=job.full_name):
            status = self._extension_status()
            logger.info(
                "render job parameters started: parameters=%s extension_available=%s",
                len(job.parameters),
                status.available,
                extra={"event": "render.job.started"},
            )
            info = RenderedJobParameters(
                job_name=job.name,
                job_full_name=job.full_name,
                job_url=job.url,
                build_with_parameters_url=job.build_with_parameters_url,
                extension_available=status.available,
                extension_version=status.version,
            )
            # 扩展可用性只是响应元数据，不作为是否渲染动态参数的开关。
            for descriptor in job.parameters:
                info.parameters.append(self._render_one(descriptor, snapshot, job))

            failed = sum(1 for item in info.parameters if item.has_error)
            logger.info(
                "render job parameters completed: parameters=%s failed=%s",
                len(info.parameters),
                failed,
                extra={
                    "event": "render.job.completed",
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
        return info

    def _extension_status(self) -> ExtensionStatus:
        try:
            return self._probe.status()
        except Exception as exc:
            logger.warning(
                "extension probe failed",
                extra={"event": "extension.probe.failed", "error_type": type(exc).__name__, "error": str(exc)},
            )
            return ExtensionStatus(available=False)

    def _render_one(self, descriptor: Any, values: Mapping[str, str], job: JobDefinition) -> RenderedParameter:
        name = getattr(descriptor, "name", None)
        with bind_log_context(parameter=name if isinstance(name, str) else None):
            try:
                return self._renderer.render(descriptor, values, job=job)
            except Exception as exc:
                logger.exception(
                    "parameter render escaped renderer",
                    extra={"event": "render.parameter.failed", "error_type": type(exc).__name__},
                )
                return RenderedParameter(
                    name=name if isinstance(name, str) and name else type(descriptor).__name__,
                    type=type(descriptor).__name__,
                    description=None,
                    current_value="",
                    input_kind=InputKind.text,
                    error_message=f"Failed to render parameter: {exc}",
                )
