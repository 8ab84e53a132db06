"""API v1 汇总路由：统一挂载所有版本化的子路由。"""

from fastapi import APIRouter

from respkit.api.v1.endpoints import messages, remote

api_router = APIRouter()
api_router.include_router(messages.router)
api_router.include_router(remote.router)
