# routers/health.py
from fastapi import APIRouter, Depends

from core.routing import RoutingConfig, get_routing_config

router = APIRouter()


@router.get("/health", summary="Health check")
async def healthcheck(routing: RoutingConfig = Depends(get_routing_config)):
    return {"status": "ok", "portfolio_domain": routing.base_domain}
