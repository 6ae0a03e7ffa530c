"""
Pydantic models and enums for the campaign orchestrator.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


# ── Campaign Status ──────────────────────────────────────────────────────────

class CampaignStatus(str, Enum):
    IDLE = "IDLE"
    LOADING = "LOADING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


# ── User Input ───────────────────────────────────────────────────────────────

class CampaignRequest(BaseModel):
    """The two reference images (base64 or data URI) plus optional scene text."""
    model_config = ConfigDict(protected_namespaces=())

    model_image: Optional[str] = None
    product_image: Optional[str] = None
    scene_context: str = ""

    def is_complete(self) -> bool:
        return bool(self.model_image) and bool(self.product_image)


# ── Shots ────────────────────────────────────────────────────────────────────

PROMPT_TEXT_SUFFIX = "--iw 2 --v 6.0 --style raw --ar 3:4"


class PlannedShot(BaseModel):
    """One entry of the backend's shot list, as received."""
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    title: str = Field(..., min_length=1)
    visual_description: str = Field(..., min_length=1, alias="visualDescription")


class Shot(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    title: str
    visual_description: str
    preview_image: Optional[str] = None

    @property
    def prompt_text(self) -> str:
        """Copy-ready prompt with placeholders for the hosted reference URLs."""
        return f"[MODEL_URL] [PRODUCT_URL] {self.visual_description} {PROMPT_TEXT_SUFFIX}"


# ── Notices ──────────────────────────────────────────────────────────────────

class NoticeKind(str, Enum):
    INVALID_CREDENTIAL = "INVALID_CREDENTIAL"
    TRANSIENT = "TRANSIENT"


class Notice(BaseModel):
    """Non-blocking notification for a failed preview render."""
    shot_id: str
    kind: NoticeKind
    message: str
    created_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


# ── API Models ───────────────────────────────────────────────────────────────

class CampaignInputRequest(BaseModel):
    """Partial update of the request; omitted fields are left alone."""
    model_config = ConfigDict(protected_namespaces=())

    model_image: Optional[str] = None
    product_image: Optional[str] = None
    scene_context: Optional[str] = None


class ShotResponse(BaseModel):
    id: str
    title: str
    visual_description: str
    preview_image: Optional[str] = None
    prompt_text: str
    rendering: bool = False


class CampaignStateResponse(BaseModel):
    status: CampaignStatus
    error: Optional[str] = None
    has_credential: bool = False
    has_model_image: bool = False
    has_product_image: bool = False
    scene_context: str = ""
    shots: list[ShotResponse] = Field(default_factory=list)


class PreviewResponse(BaseModel):
    shot: Optional[ShotResponse] = None
    notice: Optional[Notice] = None


class CredentialResponse(BaseModel):
    has_credential: bool
