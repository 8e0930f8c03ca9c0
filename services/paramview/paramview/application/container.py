"""依赖容器模块，负责单例化创建作业目录、探测器与渲染服务对象。"""

from __future__ import annotations

import logging
from functools import lru_cache

from paramview.application.renderer import ParameterRenderer
from paramview.application.rendering import ParameterRenderingService
from paramview.config import get_settings
from paramview.domain.jobs.catalog import JobCatalog
from paramview.domain.providers.dependencies import DependencyExtractor
from paramview.domain.providers.invoker import ProviderInvoker
from paramview.domain.providers.normalizer import ResultNormalizer
from paramview.infra.extension.probe import ExtensionAvailabilityProbe
from paramview.infra.security.access_policy import JobAccessPolicy

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_job_catalog() -> JobCatalog:
    """获取作业目录单例，并加载配置中的作业定义模块。"""
    catalog = JobCatalog()
    catalog.load_modules(get_settings().job_modules_list())
    return catalog


@lru_cache(maxsize=1)
def get_access_policy() -> JobAccessPolicy:
    return JobAccessPolicy(get_settings().job_read_deny_patterns_list())


@lru_cache(maxsize=1)
def get_extension_probe() -> ExtensionAvailabilityProbe:
    """获取扩展探测器单例；探测结果在进程生命周期内只计算一次。"""
    settings = get_settings()
    return ExtensionAvailabilityProbe(
        settings.extension_module,
        settings.extension_type,
        settings.extension_distribution,
    )


@lru_cache(maxsize=1)
def get_provider_invoker() -> ProviderInvoker:
    settings = get_settings()
    return ProviderInvoker(
        ResultNormalizer(),
        timeout_seconds=settings.provider_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_rendering_service() -> ParameterRenderingService:
    """获取参数渲染服务单例。"""
    return ParameterRenderingService(
        catalog=get_job_catalog(),
        access_policy=get_access_policy(),
        renderer=ParameterRenderer(DependencyExtractor(), get_provider_invoker()),
        probe=get_extension_probe(),
    )


def shutdown_container_resources() -> None:
    """清理依赖容器缓存；超时遗留的 provider 守护线程随进程退出。"""
    if get_provider_invoker.cache_info().currsize:
        stranded = get_provider_invoker().stranded_count
        if stranded:
            logger.warning(
                "provider threads still running at shutdown: stranded=%s",
                stranded,
                extra={"event": "provider.threads.stranded"},
            )

    # 探测器缓存随进程存活，这里一并清理以便测试或重启后重新探测。
    for provider in (
        get_rendering_service,
        get_provider_invoker,
        get_extension_probe,
        get_access_policy,
        get_job_catalog,
    ):
        provider.cache_clear()
