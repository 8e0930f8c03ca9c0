"""作业读权限策略：按配置的拒绝模式判断作业是否允许被读取。"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from fnmatch import fnmatchcase


@dataclass(slots=True)
class AccessDecision:
    """读权限判定结果，包含是否放行与可选说明。"""
    allowed: bool
    message: str | None = None


class JobAccessPolicy:
    """作业读权限策略，命中任一拒绝模式即不可读。"""

    def __init__(self, deny_patterns: Iterable[str] = ()) -> None:
        self._deny_patterns = tuple(item.strip("/") for item in deny_patterns if item.strip("/"))

    def decide(self, full_name: str) -> AccessDecision:
        """根据作业全名给出读权限判定。"""
        normalized = full_name.strip("/")
        for pattern in self._deny_patterns:
            # 目录模式同时覆盖目录下的所有作业，例如 "internal" 拒绝 "internal/cleanup"。
            if fnmatchcase(normalized, pattern) or normalized.startswith(f"{pattern}/"):
                return AccessDecision(allowed=False, message=f"read access denied by pattern: {pattern}")
        return AccessDecision(allowed=True)

    def can_read(self, full_name: str) -> bool:
        return self.decide(full_name).allowed

    def check_read(self, full_name: str) -> None:
        decision = self.decide(full_name)
        if not decision.allowed:
            raise PermissionError(f"access denied to job: {full_name}")
