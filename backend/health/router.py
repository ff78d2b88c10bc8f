from fastapi import APIRouter, Request
from backend.health.service import health_info
from backend.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/api/health", tags=["Health"])

@router.get("")
def health_root(request: Request):
    info = health_info()
    info["rate_limit"] = rate_limit_health_info(request)
    return info
