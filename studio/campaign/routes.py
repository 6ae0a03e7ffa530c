"""
FastAPI routes for the campaign orchestrator.

Campaign Endpoints:
  GET  /campaign                          — Current status, error and shots
  PUT  /campaign/request                  — Update reference images / scene text
  POST /campaign/generate                 — Plan the ten-shot campaign
  POST /campaign/shots/{id}/preview       — Render (or retake) one preview
  GET  /campaign/notices                  — Drain preview failure notices

Credential Endpoints:
  GET  /campaign/credential               — Is a key available?
  POST /campaign/credential/connect       — Run the key selection flow
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..gemini import GeminiBackend
from .errors import InvalidCampaignRequest, ShotNotFound
from .models import (
    CampaignInputRequest,
    CampaignStateResponse,
    CredentialResponse,
    Notice,
    PreviewResponse,
)
from .orchestrator import CampaignOrchestrator

logger = logging.getLogger(__name__)


campaign_router = APIRouter(prefix="/campaign", tags=["campaign"])

# Singleton orchestrator — one session per process
_orchestrator = CampaignOrchestrator(GeminiBackend())


def get_orchestrator() -> CampaignOrchestrator:
    return _orchestrator


@campaign_router.get("", response_model=CampaignStateResponse)
async def get_campaign(orchestrator: CampaignOrchestrator = Depends(get_orchestrator)):
    return orchestrator.snapshot()


@campaign_router.put("/request", response_model=CampaignStateResponse)
async def update_request(
    request: CampaignInputRequest,
    orchestrator: CampaignOrchestrator = Depends(get_orchestrator),
):
    """Only the fields present in the body are changed; send null to clear an image."""
    orchestrator.update_request(**request.model_dump(exclude_unset=True))
    return orchestrator.snapshot()


@campaign_router.post("/generate", response_model=CampaignStateResponse)
async def generate_campaign(orchestrator: CampaignOrchestrator = Depends(get_orchestrator)):
    """
    Plan the campaign. Backend failures land in ``status``/``error``, not in
    the HTTP status code.

    Errors:
      - 400: Model or product image missing
    """
    try:
        await orchestrator.generate_plan()
    except InvalidCampaignRequest as e:
        raise HTTPException(status_code=400, detail=str(e))
    return orchestrator.snapshot()


@campaign_router.post("/shots/{shot_id}/preview", response_model=PreviewResponse)
async def render_preview(
    shot_id: str,
    orchestrator: CampaignOrchestrator = Depends(get_orchestrator),
):
    """
    Render one shot. A failed render returns its notice and leaves any
    earlier preview untouched.

    Errors:
      - 400: Model or product image missing
      - 404: Unknown shot id
    """
    try:
        shot, notice = await orchestrator.render_preview_outcome(shot_id, inline=True)
    except InvalidCampaignRequest as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ShotNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    if shot is not None:
        return PreviewResponse(shot=orchestrator.shot_view(shot))
    return PreviewResponse(notice=notice)


@campaign_router.get("/notices", response_model=list[Notice])
async def drain_notices(orchestrator: CampaignOrchestrator = Depends(get_orchestrator)):
    return orchestrator.drain_notices()


@campaign_router.get("/credential", response_model=CredentialResponse)
async def get_credential(orchestrator: CampaignOrchestrator = Depends(get_orchestrator)):
    return CredentialResponse(has_credential=orchestrator.has_credential())


@campaign_router.post("/credential/connect", response_model=CredentialResponse)
async def connect_credential(orchestrator: CampaignOrchestrator = Depends(get_orchestrator)):
    return CredentialResponse(has_credential=await orchestrator.connect())
