"""
Plan Generation — Gemini Flash (vision) shot list.

Analyzes the product photo and plans a ten-shot editorial campaign. The
backend's answer is untrusted: it must be exactly ten entries, each with a
non-empty title and visual description, or the whole plan is rejected.
"""

import logging

from pydantic import ValidationError

from .. import config
from .errors import PlanValidationError
from .models import PlannedShot, Shot

logger = logging.getLogger(__name__)

# ── Config ───────────────────────────────────────────────────────────────────

SHOT_COUNT = config.CAMPAIGN_SHOT_COUNT

SHOT_DISTRIBUTION = (
    ("Wide", 2, "Environmental Portrait - sharp details everywhere"),
    ("Medium", 4, "Fashion Editorial - focus on fabric/texture"),
    ("Close-up", 4, "Detail & Emotion - skin, hands, product texture"),
)

SYSTEM_INSTRUCTION = """You are a world-class commercial photographer and creative director.
Your goal is to create a 10-SHOT MASTERPIECE CAMPAIGN that is indistinguishable from reality.

CORE PHILOSOPHY - THE TRUTH OF BEAUTY:
1. HYPER-REALISM IS NON-NEGOTIABLE:
   - Skin: pores, texture, subtle imperfections, vellus hair. Never wax-like or airbrushed.
   - Eyes: catchlights from the light sources, real depth.
   - Physics: optical depth of field (bokeh), never digital blur.

2. THE MUSE:
   - The model is a high-fashion muse. Graceful, expensive look.
   - Hair: smooth, silky and luxurious, made of individual strands. No clumps, no frizz, no helmet hair.

3. STORYTELLING:
   - The 10 shots tell one story through light and emotion.
   - Light shapes the face (chiaroscuro). Avoid flat light.
"""

AUTO_SCENE_DIRECTION = (
    "THEME DIRECTION: Invent a location that allows for complex lighting interaction "
    '(e.g., "Glass House at Sunset", "Studio with Venetian Blinds", "Midnight City Rain").'
)

RESPONSE_SCHEMA = {
    "type": "ARRAY",
    "minItems": SHOT_COUNT,
    "maxItems": SHOT_COUNT,
    "items": {
        "type": "OBJECT",
        "properties": {
            "title": {"type": "STRING"},
            "visualDescription": {"type": "STRING"},
        },
        "required": ["title", "visualDescription"],
    },
}


def scene_direction(scene_context: str) -> str:
    scene_context = (scene_context or "").strip()
    if scene_context:
        return (
            f'THEME DIRECTION: Based on user input "{scene_context}", '
            "create a high-end, realistic editorial."
        )
    return AUTO_SCENE_DIRECTION


def build_plan_prompt(scene_context: str) -> str:
    variety = "\n".join(
        f"      - {count}x {name} ({note})" for name, count, note in SHOT_DISTRIBUTION
    )
    return f"""
      ROLE: Master Photographer using a Hasselblad H6D-100c.
      TASK: Plan a {SHOT_COUNT}-SHOT REALISTIC CAMPAIGN.

      PRODUCT ANALYSIS:
      Analyze the product texture. How does light hit it?

      CAMPAIGN NARRATIVE:
      {scene_direction(scene_context)}

      DIRECTIVE FOR THE {SHOT_COUNT} SHOTS:
      1. Quality: raw, unretouched feel. High micro-contrast.
      2. Lighting: name a specific setup (e.g., "Rembrandt", "Rim Light", "Softbox").
      3. Posing: natural weight distribution. Not stiff.
      4. Hair: silky, flowing, catching the light.

      REQUIRED SHOT VARIETY (exactly {SHOT_COUNT} shots, in this order):
{variety}

      OUTPUT:
      A JSON array of exactly {SHOT_COUNT} objects with "title" (short shot name) and
      "visualDescription" (one dense photographic-direction paragraph: framing, lens,
      lighting, pose, wardrobe and product placement, environment, mood).
    """


def parse_plan(raw) -> list[Shot]:
    """
    Validate the raw backend answer and assign fresh ids.

    Raises:
        PlanValidationError: wrong type, wrong count or an empty field.
    """
    if not isinstance(raw, list):
        raise PlanValidationError(f"Expected a list of shots, got {type(raw).__name__}")

    if len(raw) != SHOT_COUNT:
        raise PlanValidationError(f"Expected exactly {SHOT_COUNT} shots, got {len(raw)}")

    shots: list[Shot] = []
    for index, entry in enumerate(raw):
        try:
            planned = PlannedShot.model_validate(entry)
        except ValidationError as e:
            raise PlanValidationError(f"Shot {index + 1} is invalid: {e}") from e
        # Any backend-supplied id is ignored
        shots.append(Shot(title=planned.title, visual_description=planned.visual_description))

    return shots


class PlanGenerator:
    def __init__(self, backend):
        self.backend = backend

    async def generate_plan(self, product_image: str, scene_context: str = "") -> list[Shot]:
        """
        Plan the campaign for one product photo.

        Args:
            product_image: Base64 or data-URI product photo.
            scene_context: Free-text scene concept; empty lets Gemini invent one.

        Returns:
            Exactly ten shots with fresh ids and no previews.
        """
        prompt = build_plan_prompt(scene_context)
        raw = await self.backend.plan_shots(
            product_image,
            prompt,
            SYSTEM_INSTRUCTION,
            RESPONSE_SCHEMA,
        )
        shots = parse_plan(raw)
        logger.info(f"Shot plan ready: {len(shots)} shots")
        return shots
