from fastapi import APIRouter


def create_api_router(prefix: str = "") -> APIRouter:
    # routers depend on core.security, which depends on api.deps
    from rise_settlement.api.routers import admin, deposits, jobs, webhooks

    router = APIRouter(prefix=prefix)
    router.include_router(webhooks.router, prefix="/webhooks", tags=["webhooks"])
    router.include_router(deposits.router, tags=["deposits"])
    router.include_router(jobs.router, prefix="/jobs", tags=["jobs"])
    router.include_router(admin.router, prefix="/admin", tags=["admin"])
    return router


__all__ = [
    "create_api_router",
]
