"""
Preview Rendering — Gemini Pro Image, one shot at a time.

Passes the model photo and the product photo as subject references so the
rendered shot keeps the model's identity and the product's look.
"""

import logging

logger = logging.getLogger(__name__)


PREVIEW_DIRECTION = """Create a photorealistic editorial photograph of the person in the model
reference wearing or holding the product from the product reference.

Rules:
- The person MUST look exactly like the model reference: same face, body, hair and skin tone
- The product MUST match the product reference in shape, color, material and detail
- Raw, unretouched, high micro-contrast; real skin texture
- Follow the shot direction below for framing, lens, lighting and pose
"""


def build_preview_prompt(visual_description: str) -> str:
    return f"{PREVIEW_DIRECTION}\nShot Direction: {visual_description}"


class PreviewRenderer:
    """Stateless with respect to shots; the orchestrator writes results."""

    def __init__(self, backend):
        self.backend = backend

    async def render(self, model_image: str, product_image: str, visual_description: str) -> str:
        return await self.backend.synthesize_image(
            model_image,
            product_image,
            build_preview_prompt(visual_description),
        )
