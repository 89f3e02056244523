from fastapi import APIRouter, Depends

from merchant_rules.api.deps import get_rules_service
from merchant_rules.services.rules import RulesService

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    """Basic health check."""
    return {"status": "ok"}


@router.get("/health/ready")
async def health_ready(service: RulesService = Depends(get_rules_service)):
    """Readiness check that reads the rule collection."""
    rules = await service.get_rules()
    return {"status": "ready", "rule_count": len(rules)}
