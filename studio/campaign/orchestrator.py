"""
CampaignOrchestrator — the generation state machine.

Owns the campaign status, the shot list and per-shot render tracking, and
sequences the credential gate, plan generation and preview rendering:

  IDLE ──submit──▶ LOADING ──▶ SUCCESS | ERROR ──submit──▶ LOADING ...

Preview renders are orthogonal to the campaign status: each one patches a
single shot's preview by id when it completes, and the last render to finish
wins. Plan requests are neither queued nor cancelled; the caller disables
submit while LOADING.
"""

import time
import logging
from typing import Optional

from .. import metrics
from .credentials import CredentialGate
from .errors import (
    ErrorKind,
    InvalidCampaignRequest,
    PlanValidationError,
    ShotNotFound,
    classify,
    plan_error_message,
    preview_error_message,
)
from .models import (
    CampaignRequest,
    CampaignStateResponse,
    CampaignStatus,
    Notice,
    NoticeKind,
    Shot,
    ShotResponse,
)
from .plan_gen import PlanGenerator
from .preview import PreviewRenderer

logger = logging.getLogger(__name__)

_UNSET = object()

# Undrained preview notices kept per session
MAX_NOTICES = 50


class CampaignOrchestrator:
    """
    Usage:
        orchestrator = CampaignOrchestrator(GeminiBackend())
        await orchestrator.credentials.probe()

        orchestrator.update_request(model_image=..., product_image=...)
        await orchestrator.generate_plan()
        await orchestrator.render_preview(orchestrator.shots[0].id)
    """

    def __init__(self, backend, credentials: Optional[CredentialGate] = None):
        self.credentials = credentials or CredentialGate()
        self.planner = PlanGenerator(backend)
        self.renderer = PreviewRenderer(backend)

        self.request = CampaignRequest()
        self.status = CampaignStatus.IDLE
        self.error: Optional[str] = None
        self.shots: list[Shot] = []
        self.notices: list[Notice] = []
        self._rendering: dict[str, int] = {}

    # ── Input ────────────────────────────────────────────────────────────

    def update_request(self, model_image=_UNSET, product_image=_UNSET, scene_context=_UNSET):
        """Apply a partial update; pass None to clear an image."""
        changes = {}
        if model_image is not _UNSET:
            changes["model_image"] = model_image
        if product_image is not _UNSET:
            changes["product_image"] = product_image
        if scene_context is not _UNSET:
            changes["scene_context"] = scene_context or ""
        self.request = self.request.model_copy(update=changes)
        return self.request

    # ── Credential ───────────────────────────────────────────────────────

    def has_credential(self) -> bool:
        return self.credentials.has_credential()

    async def connect(self) -> bool:
        """Explicit connect action from the UI."""
        await self.credentials.ensure_credential()
        return self.credentials.has_credential()

    # ── Campaign-level transition ────────────────────────────────────────

    def _set_status(self, status: CampaignStatus, note: str = ""):
        self.status = status
        logger.info(f"[campaign] {status.value} {note}".rstrip())

    async def generate_plan(self) -> CampaignStatus:
        """
        Submit: LOADING, then SUCCESS with ten shots or ERROR with a message.

        Raises:
            InvalidCampaignRequest: either reference image is missing.
        """
        request = self.request
        if not request.is_complete():
            raise InvalidCampaignRequest("Both a model image and a product image are required.")

        self.error = None
        self.shots = []
        self._set_status(CampaignStatus.LOADING, "→ planning shots")

        await self.credentials.ensure_credential()

        metrics.inc_counter("requests.plan")
        started = time.time()
        try:
            shots = await self.planner.generate_plan(request.product_image, request.scene_context)
        except Exception as e:
            kind = classify(e)
            logger.error(f"Plan generation failed ({kind.value}): {e}", exc_info=True)
            self._record_failure("plan", kind, e)
            if kind is ErrorKind.INVALID_CREDENTIAL:
                self.credentials.invalidate()
            self.error = plan_error_message(kind)
            self._set_status(CampaignStatus.ERROR, f"→ {self.error}")
            return self.status
        finally:
            metrics.record_latency("plan", (time.time() - started) * 1000)

        self.shots = shots
        self._set_status(CampaignStatus.SUCCESS, f"→ {len(shots)} shots planned")
        return self.status

    # ── Per-shot previews ────────────────────────────────────────────────

    def get_shot(self, shot_id: str) -> Shot:
        for shot in self.shots:
            if shot.id == shot_id:
                return shot
        raise ShotNotFound(f"Shot {shot_id} not found")

    def is_rendering(self, shot_id: str) -> bool:
        return self._rendering.get(shot_id, 0) > 0

    async def render_preview(self, shot_id: str) -> Optional[Shot]:
        """
        Render (or retake) one shot's preview.

        Returns the updated shot, or None when the render failed or the plan
        was replaced while it was in flight. Failures leave any earlier
        preview in place and are reported through ``notices``.

        Raises:
            InvalidCampaignRequest: either reference image is missing.
            ShotNotFound: no shot with this id in the current plan.
        """
        shot, _ = await self.render_preview_outcome(shot_id)
        return shot

    async def render_preview_outcome(
        self, shot_id: str, inline: bool = False
    ) -> tuple[Optional[Shot], Optional[Notice]]:
        """
        Same as ``render_preview`` but also returns the failure notice.

        With ``inline=True`` the caller delivers the notice itself and it is
        not queued in ``notices``.
        """
        request = self.request
        if not request.is_complete():
            raise InvalidCampaignRequest("Both a model image and a product image are required.")
        shot = self.get_shot(shot_id)

        # In flight from here on, including an interactive key selection
        self._rendering[shot_id] = self._rendering.get(shot_id, 0) + 1
        try:
            await self.credentials.ensure_credential()

            metrics.inc_counter("requests.preview")
            started = time.time()
            try:
                image = await self.renderer.render(
                    request.model_image,
                    request.product_image,
                    shot.visual_description,
                )
            except Exception as e:
                return None, self._preview_failed(shot_id, e, inline)
            finally:
                metrics.record_latency("preview", (time.time() - started) * 1000)
        finally:
            self._finish_render(shot_id)

        return self._apply_preview(shot_id, image), None

    def _preview_failed(self, shot_id: str, error: Exception, inline: bool) -> Notice:
        kind = classify(error)
        logger.warning(f"Preview failed for shot {shot_id} ({kind.value}): {error}")
        self._record_failure("preview", kind, error, shot_id)
        if kind is ErrorKind.INVALID_CREDENTIAL:
            self.credentials.invalidate()
        notice = Notice(
            shot_id=shot_id,
            kind=NoticeKind(kind.value),
            message=preview_error_message(kind),
        )
        if not inline:
            self.notices.append(notice)
            if len(self.notices) > MAX_NOTICES:
                self.notices = self.notices[-MAX_NOTICES:]
        return notice

    def _apply_preview(self, shot_id: str, image: str) -> Optional[Shot]:
        for index, current in enumerate(self.shots):
            if current.id == shot_id:
                updated = current.model_copy(update={"preview_image": image})
                self.shots[index] = updated
                logger.info(f"Preview stored for shot {shot_id}")
                return updated
        logger.info(f"Shot {shot_id} no longer in plan, preview dropped")
        return None

    def _finish_render(self, shot_id: str):
        remaining = self._rendering.get(shot_id, 0) - 1
        if remaining > 0:
            self._rendering[shot_id] = remaining
        else:
            self._rendering.pop(shot_id, None)

    def _record_failure(self, operation: str, kind: ErrorKind, error: Exception, shot_id: str = ""):
        if isinstance(error, PlanValidationError):
            metrics.inc_counter("errors.validation")
        metrics.inc_counter(f"errors.{kind.value.lower()}")
        metrics.record_error(operation, kind.value, str(error), shot_id)

    # ── Views ────────────────────────────────────────────────────────────

    def drain_notices(self) -> list[Notice]:
        notices, self.notices = self.notices, []
        return notices

    def shot_view(self, shot: Shot) -> ShotResponse:
        return ShotResponse(
            id=shot.id,
            title=shot.title,
            visual_description=shot.visual_description,
            preview_image=shot.preview_image,
            prompt_text=shot.prompt_text,
            rendering=self.is_rendering(shot.id),
        )

    def snapshot(self) -> CampaignStateResponse:
        return CampaignStateResponse(
            status=self.status,
            error=self.error,
            has_credential=self.has_credential(),
            has_model_image=bool(self.request.model_image),
            has_product_image=bool(self.request.product_image),
            scene_context=self.request.scene_context,
            shots=[self.shot_view(shot) for shot in self.shots],
        )
