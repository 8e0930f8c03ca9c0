"""API 总路由配置，注册参数渲染与作业目录子路由。"""

from __future__ import annotations

from fastapi import APIRouter

from paramview.api.v1.jobs import router as jobs_router
from paramview.api.v1.parameters import router as parameters_router
from paramview.config import get_settings

settings = get_settings()

api_router = APIRouter(prefix=settings.api_prefix)
api_router.include_router(parameters_router, tags=["parameters"])
api_router.include_router(jobs_router, tags=["jobs"])
