"""作业目录：管理作业定义的注册、查询，以及按模块路径批量加载。"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class JobDefinition:
    """作业定义：全名（含目录层级）与按声明顺序排列的参数描述符。"""
    full_name: str
    parameters: list[Any] = field(default_factory=list)
    description: str | None = None

    @property
    def name(self) -> str:
        return self.full_name.rsplit("/", 1)[-1]

    @property
    def url(self) -> str:
        """相对 URL，形如 ``job/folder/job/deploy/``。"""
        return "".join(f"job/{segment}/" for segment in self.full_name.split("/") if segment)

    @property
    def build_with_parameters_url(self) -> str:
        return f"{self.url}buildWithParameters"


class JobCatalog:
    """作业目录，按全名索引已注册的作业定义。"""

    def __init__(self, jobs: Iterable[JobDefinition] = ()) -> None:
        self._jobs: dict[str, JobDefinition] = {}
        for job in jobs:
            self.register(job)

    def register(self, job: JobDefinition) -> None:
        """注册作业定义；同名作业后注册者覆盖先注册者。"""
        full_name = job.full_name.strip("/")
        if not full_name:
            raise ValueError("job full_name is required")
        names = [getattr(item, "name", None) for item in job.parameters]
        if len(set(names)) != len(names):
            raise ValueError(f"duplicate parameter names in job: {full_name}")
        self._jobs[full_name] = job

    def get(self, full_name: str) -> JobDefinition:
        """按全名获取作业定义。"""
        try:
            return self._jobs[full_name.strip("/")]
        except KeyError as exc:
            raise KeyError(f"job not found: {full_name}") from exc

    def all(self) -> list[JobDefinition]:
        return list(self._jobs.values())

    def load_modules(self, module_names: Iterable[str]) -> None:
        """导入作业定义模块，并调用其 ``register_jobs(catalog)`` 完成注册。"""
        for module_name in module_names:
            module = importlib.import_module(module_name)
            register = getattr(module, "register_jobs", None)
            if not callable(register):
                raise ValueError(f"job module has no register_jobs(): {module_name}")
            before = len(self._jobs)
            register(self)
            logger.info(
                "job module loaded: module=%s registered=%s",
                module_name,
                len(self._jobs) - before,
                extra={"event": "catalog.module.loaded"},
            )
