"""FastAPI dependency injection for the rules service."""

from fastapi import Request

from merchant_rules.services.rules import RulesService


async def get_rules_service(request: Request) -> RulesService:
    """
    Get the rules service built at application startup.

    Args:
        request: Incoming request (carries the application state)

    Returns:
        RulesService instance shared by all requests
    """
    return request.app.state.rules_service
