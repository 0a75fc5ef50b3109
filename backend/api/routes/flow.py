"""
Flow card REST endpoints.

POST /v1/teams/{team_id}/conditions/{card_id} - evaluate a condition card.
POST /v1/teams/{team_id}/actions/{card_id}    - run an action card, returns its tokens.
POST /v1/teams/{team_id}/triggers/{card_id}   - run-listener filter for a trigger card.
GET  /v1/teams/{team_id}/status               - cached capability status.
"""
from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel, Field

from shared.models.domain import ConditionRequest, ConditionResult, normalize_team_id

from api.dependencies import get_capabilities, get_dispatcher
from flow.dispatcher import FlowDispatcher
from ingest.capability_cache import CapabilityCache

router = APIRouter(prefix="/v1/teams", tags=["flow"])


class TriggerRequest(BaseModel):
    args: dict[str, Any] = Field(default_factory=dict)
    state: dict[str, Any] = Field(default_factory=dict)


@router.post("/{team_id}/conditions/{card_id}")
async def run_condition(
    team_id: str,
    card_id: str,
    body: Optional[ConditionRequest] = Body(default=None),
    dispatcher: FlowDispatcher = Depends(get_dispatcher),
) -> ConditionResult:
    args = body.args if body else {}
    return ConditionResult(result=await dispatcher.run_condition(card_id, team_id, args))


@router.post("/{team_id}/actions/{card_id}")
async def run_action(
    team_id: str,
    card_id: str,
    body: Optional[ConditionRequest] = Body(default=None),
    dispatcher: FlowDispatcher = Depends(get_dispatcher),
) -> dict[str, Any]:
    args = body.args if body else {}
    return await dispatcher.run_action(card_id, team_id, args)


@router.post("/{team_id}/triggers/{card_id}")
async def run_trigger(
    team_id: str,
    card_id: str,
    body: TriggerRequest,
    dispatcher: FlowDispatcher = Depends(get_dispatcher),
) -> ConditionResult:
    normalize_team_id(team_id)
    return ConditionResult(result=dispatcher.trigger_matches(card_id, body.args, body.state))


@router.get("/{team_id}/status")
async def get_status(
    team_id: str,
    capabilities: CapabilityCache = Depends(get_capabilities),
) -> dict[str, Any]:
    tid = normalize_team_id(team_id)
    return {"team_id": tid, "match_status": capabilities.get_cached_status(tid).value}
