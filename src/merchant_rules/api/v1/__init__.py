"""API version 1 routes."""

from fastapi import APIRouter

from merchant_rules.api.v1 import rules

router = APIRouter(prefix="/api/v1")

router.include_router(rules.router)
