"""可选扩展探测：判断动态参数扩展是否安装及其版本，结果在进程生命周期内缓存。"""

from __future__ import annotations

import importlib
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from importlib import metadata
from types import ModuleType

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ExtensionStatus:
    """扩展探测结果。"""
    available: bool
    version: str | None = None


class ExtensionAvailabilityProbe:
    """按“计算一次、多读者共享”的方式缓存扩展可用性。

    扩展缺失是正常状态而不是错误，探测过程中的任何异常都只会得到 unavailable。
    """

    def __init__(
        self,
        module_name: str,
        type_name: str,
        distribution: str,
        *,
        importer: Callable[[str], ModuleType] = importlib.import_module,
        version_lookup: Callable[[str], str] = metadata.version,
    ) -> None:
        self._module_name = module_name
        self._type_name = type_name
        self._distribution = distribution
        self._importer = importer
        self._version_lookup = version_lookup
        self._lock = threading.Lock()
        self._status: ExtensionStatus | None = None

    def is_available(self) -> bool:
        return self.status().available

    def version(self) -> str | None:
        return self.status().version

    def status(self) -> ExtensionStatus:
        status = self._status
        if status is not None:
            return status
        with self._lock:
            if self._status is None:
                self._status = self._compute()
            return self._status

    def _compute(self) -> ExtensionStatus:
        try:
            module = self._importer(self._module_name)
            target: object = module
            for part in self._type_name.split("."):
                target = getattr(target, part)
        except Exception as exc:
            logger.info(
                "optional extension not available",
                extra={
                    "event": "extension.probe.completed",
                    "op": f"{self._module_name}.{self._type_name}",
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            return ExtensionStatus(available=False)

        version = self._read_version(module)
        logger.info(
            "optional extension available: version=%s",
            version,
            extra={"event": "extension.probe.completed", "op": f"{self._module_name}.{self._type_name}"},
        )
        return ExtensionStatus(available=True, version=version)

    def _read_version(self, module: ModuleType) -> str | None:
        try:
            return self._version_lookup(self._distribution)
        except metadata.PackageNotFoundError:
            pass
        except Exception as exc:
            logger.debug(
                "extension version lookup failed",
                extra={"event": "extension.version.failed", "error_type": type(exc).__name__, "error": str(exc)},
            )
        value = getattr(module, "__version__", None)
        return str(value) if value is not None else None
