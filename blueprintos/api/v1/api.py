from fastapi import APIRouter

from blueprintos.api.v1.endpoints import (
    auth, me, public, workspace, pricing_tiers, landing_page,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(me.router, prefix="/me", tags=["me"])
api_router.include_router(public.router, prefix="/public", tags=["public"])
api_router.include_router(workspace.router, prefix="/workspace", tags=["workspace"])
api_router.include_router(pricing_tiers.router, prefix="/pricing-tiers", tags=["pricing-tiers"])
api_router.include_router(landing_page.router, prefix="/landing-page", tags=["landing-page"])
