"""Merchant rule management endpoints."""

from fastapi import APIRouter, Depends, Response, status

from merchant_rules.api.deps import get_rules_service
from merchant_rules.core.exceptions import RuleNotFoundError
from merchant_rules.schemas.rule import (
    LearnRuleRequest,
    LearnRuleResponse,
    MatchRequest,
    MatchResponse,
    RuleListResult,
)
from merchant_rules.services.rules import RulesService

router = APIRouter(prefix="/rules", tags=["rules"])


@router.get("", response_model=RuleListResult, summary="List learned merchant rules")
async def list_rules(service: RulesService = Depends(get_rules_service)) -> RuleListResult:
    rules = await service.get_rules()
    return RuleListResult(rules=rules, count=len(rules))


@router.put(
    "",
    response_model=LearnRuleResponse,
    summary="Remember a category for a merchant or description",
    description="""
    Learn a rule from a user's categorization.

    - Text that is too generic (bank boilerplate, truncated SMS) is not learned;
      the response says why in `reason`
    - Learning the same text again replaces the category
    """,
    responses={
        200: {"description": "Rule learned, or skipped with a reason"},
        400: {"description": "Invalid request"},
        503: {"description": "Rule storage unavailable"},
    },
)
async def learn_rule(
    payload: LearnRuleRequest,
    service: RulesService = Depends(get_rules_service),
) -> LearnRuleResponse:
    outcome = await service.learn(
        payload.text, payload.category, source_length=payload.source_length
    )
    return LearnRuleResponse(
        learned=outcome.accepted,
        key=outcome.key,
        reason=outcome.reason,
        rule=outcome.rule,
    )


@router.post("/match", response_model=MatchResponse, summary="Find a learned category")
async def match_rule(
    payload: MatchRequest,
    service: RulesService = Depends(get_rules_service),
) -> MatchResponse:
    category = await service.find_category(merchant=payload.merchant, raw_text=payload.raw_text)
    return MatchResponse(category=category)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT, summary="Forget all rules")
async def clear_rules(service: RulesService = Depends(get_rules_service)) -> Response:
    await service.clear_rules()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Keys can contain slashes ("a/c"), hence the path converter.
@router.delete(
    "/{key:path}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Forget one rule",
    responses={404: {"description": "Rule not found"}},
)
async def delete_rule(
    key: str,
    service: RulesService = Depends(get_rules_service),
) -> Response:
    if not await service.delete_rule(key):
        raise RuleNotFoundError()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
