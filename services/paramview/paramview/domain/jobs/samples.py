"""示例作业：演示内置参数、级联参数与动态引用参数的组合，默认随服务加载。"""

from __future__ import annotations

from collections.abc import Mapping
from html import escape

from paramview.domain.jobs.catalog import JobCatalog, JobDefinition
from paramview.domain.parameters.base import (
    BooleanParameter,
    CascadeChoiceParameter,
    ChoiceParameter,
    DynamicChoiceParameter,
    DynamicReferenceParameter,
    FunctionProvider,
    HiddenParameter,
    MultiSelectParameter,
    PasswordParameter,
    RadioParameter,
    StringParameter,
    TextParameter,
)

_REGIONS: dict[str, list[str]] = {
    "dev": ["local"],
    "staging": ["eu-west-1"],
    "prod": ["us-east-1", "us-west-1"],
}


class RegionProvider:
    """按 env 返回可选区域。"""

    def render(self, values: Mapping[str, str]) -> list[str]:
        return list(_REGIONS.get(values.get("env", ""), []))

    def get_choices_for_ui(self) -> list[str]:
        return [region for regions in _REGIONS.values() for region in regions]


class ReleaseChannelProvider:
    """旧版契约 provider：只实现 get_choices(values)，返回 label -> value 映射。"""

    def get_choices(self, values: Mapping[str, str]) -> dict[str, str]:
        if values.get("env") == "prod":
            return {"Stable": "stable"}
        return {"Stable": "stable", "Beta": "beta", "Nightly": "nightly"}


def _deployment_summary(values: Mapping[str, str]) -> str:
    env = escape(values.get("env", "") or "-")
    region = escape(values.get("region", "") or "-")
    return f"<p>Deploying to <b>{env}</b> / <b>{region}</b></p>"


def register_jobs(catalog: JobCatalog) -> None:
    catalog.register(
        JobDefinition(
            full_name="deploy",
            description="Deploy the service to a target environment.",
            parameters=[
                ChoiceParameter("env", description="Target environment", choices=["dev", "staging", "prod"]),
                CascadeChoiceParameter(
                    "region",
                    description="Region within the environment",
                    provider=RegionProvider(),
                    referenced_parameters="env",
                ),
                DynamicChoiceParameter(
                    "channel",
                    description="Release channel",
                    provider=ReleaseChannelProvider(),
                    referenced_parameters=["env"],
                ),
                DynamicReferenceParameter(
                    "summary",
                    description="Deployment summary",
                    provider=FunctionProvider(_deployment_summary),
                    referenced_parameters="env, region",
                ),
                BooleanParameter("dry_run", description="Only print the plan", default=True),
                PasswordParameter("deploy_token", description="Deployment token", default="change-me"),
            ],
        )
    )
    catalog.register(
        JobDefinition(
            full_name="platform/release-notes",
            description="Publish release notes.",
            parameters=[
                StringParameter("version", description="Release version", default="1.0.0", required=True),
                TextParameter("notes", description="Release notes body"),
                RadioParameter("audience", description="Who reads the notes", choices=["internal", "public"]),
                MultiSelectParameter(
                    "channels", description="Where to publish", choices=["email", "slack", "web"], default="email,slack"
                ),
                HiddenParameter("template_id", default="release-v2"),
            ],
        )
    )
