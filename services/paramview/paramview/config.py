"""全局配置加载模块：从环境变量构建运行参数并提供缓存访问。"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _csv_to_list(value: str) -> list[str]:
    """将逗号分隔字符串转换为去空白列表。"""
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """服务运行配置对象，从环境变量读取并提供类型化访问。"""
    model_config = SettingsConfigDict(
        env_prefix="PARAMVIEW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Parameter View API"
    api_prefix: str = "/api/v1"
    environment: str = "dev"
    cors_allowed_origins: str = ""
    cors_allowed_methods: str = "GET,OPTIONS"
    cors_allowed_headers: str = "Authorization,Content-Type,X-Request-Id"
    cors_allow_credentials: bool = False

    log_dir: Path = Field(default=Path("./logs"))
    log_level: str = "INFO"
    log_debug_modules: str = ""
    log_debug_jobs: str = ""
    log_redaction_mode: str = "standard"
    log_max_bytes: int = 20 * 1024 * 1024
    log_backup_count: int = 5

    # 可选动态参数扩展：按模块 + 类型名探测，按发行包名读取版本。
    extension_module: str = "active_choices"
    extension_type: str = "ScriptableParameter"
    extension_distribution: str = "active-choices"

    provider_timeout_seconds: float = 10.0

    job_modules: str = "paramview.domain.jobs.samples"
    job_read_deny_patterns: str = ""

    max_parameter_name_length: int = 255
    max_parameter_value_length: int = 4000

    def cors_allowed_origins_list(self) -> list[str]:
        return _csv_to_list(self.cors_allowed_origins)

    def cors_allowed_methods_list(self) -> list[str]:
        return _csv_to_list(self.cors_allowed_methods)

    def cors_allowed_headers_list(self) -> list[str]:
        return _csv_to_list(self.cors_allowed_headers)

    def log_debug_modules_list(self) -> list[str]:
        return _csv_to_list(self.log_debug_modules)

    def log_debug_jobs_list(self) -> list[str]:
        return _csv_to_list(self.log_debug_jobs)

    def job_modules_list(self) -> list[str]:
        return _csv_to_list(self.job_modules)

    def job_read_deny_patterns_list(self) -> list[str]:
        return _csv_to_list(self.job_read_deny_patterns)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """构建并缓存 Settings，相对日志目录统一按当前工作目录解析。"""
    settings = Settings()
    if not settings.log_dir.is_absolute():
        settings.log_dir = (Path.cwd() / settings.log_dir).resolve()
    return settings
