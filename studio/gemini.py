"""
Gemini integration for campaign planning and preview rendering.

- Planning: Gemini Flash (vision) via REST with a JSON response schema
- Preview:  Gemini Pro Image via REST, model + product as subject references
"""

import json
import base64
import binascii
import logging
from typing import Optional

import httpx

from . import config
from .campaign.images import inline_part, to_data_uri

logger = logging.getLogger(__name__)


class GeminiAPIError(Exception):
    """Non-200 response from generateContent."""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Gemini API error {status_code}: {body[:500]}")


class GeminiResponseError(RuntimeError):
    """A 200 response that does not carry what was asked for."""


def _parse_json_response(text: str):
    """Parse JSON from Gemini response, handling markdown code blocks."""
    text = text.strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        if "```" in text:
            json_block = text.split("```")[1]
            if json_block.startswith("json"):
                json_block = json_block[4:]
            try:
                return json.loads(json_block.strip())
            except json.JSONDecodeError:
                pass
        raise GeminiResponseError(f"Gemini returned invalid JSON: {text[:200]}")


def _first_parts(result: dict) -> list:
    candidates = result.get("candidates", [])
    if not candidates:
        raise GeminiResponseError("Gemini returned no candidates.")
    return candidates[0].get("content", {}).get("parts", [])


class GeminiBackend:
    """
    Async REST client for the two generateContent capabilities the
    campaign needs.

    Usage:
        backend = GeminiBackend()
        raw_shots = await backend.plan_shots(product_b64, prompt, system, schema)
        preview = await backend.synthesize_image(model_b64, product_b64, description)
    """

    def __init__(
        self,
        api_base: str = config.GEMINI_API_BASE,
        plan_model: str = config.PLAN_MODEL,
        image_model: str = config.IMAGE_MODEL,
        timeout: float = config.REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_base = api_base.rstrip("/")
        self.plan_model = plan_model
        self.image_model = image_model
        self.timeout = timeout
        self._transport = transport

    def _api_url(self, model: str) -> str:
        return f"{self.api_base}/models/{model}:generateContent"

    async def _generate_content(self, model: str, body: dict) -> dict:
        """Call Gemini generateContent REST endpoint."""
        api_key = config.gemini_api_key()
        if not api_key:
            # Same shape as a real rejection so the classifier treats it alike
            raise GeminiAPIError(403, "GEMINI_API_KEY not set")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(
                self._api_url(model),
                params={"key": api_key},
                json=body,
            )

        if resp.status_code != 200:
            raise GeminiAPIError(resp.status_code, resp.text)

        return resp.json()

    # =====================================================================
    # 1. Structured shot plan
    # =====================================================================

    async def plan_shots(
        self,
        product_image: str,
        prompt: str,
        system_instruction: str,
        response_schema: dict,
    ):
        """
        Ask for a JSON shot list constrained by ``response_schema``.

        Returns the decoded JSON untouched; shape checks belong to the caller.
        """
        body = {
            "systemInstruction": {"parts": [{"text": system_instruction}]},
            "contents": [
                {
                    "parts": [
                        inline_part(product_image),
                        {"text": prompt},
                    ]
                }
            ],
            "generationConfig": {
                "temperature": config.PLAN_TEMPERATURE,
                "responseMimeType": "application/json",
                "responseSchema": response_schema,
            },
        }

        result = await self._generate_content(self.plan_model, body)

        for part in _first_parts(result):
            if "text" in part:
                return _parse_json_response(part["text"])

        raise GeminiResponseError("Gemini plan response contained no text.")

    # =====================================================================
    # 2. Preview synthesis
    # =====================================================================

    async def synthesize_image(
        self,
        model_image: str,
        product_image: str,
        prompt: str,
    ) -> str:
        """
        Render one image from the two references and a shot description.

        Returns a ``data:<mime>;base64,`` payload.
        """
        body = {
            "contents": [
                {
                    "parts": [
                        inline_part(model_image),
                        {"text": "This is the model reference. Keep this person's identity exactly."},
                        inline_part(product_image),
                        {"text": "This is the product reference. Reproduce it faithfully."},
                        {"text": prompt},
                    ]
                }
            ],
            "generationConfig": {
                "responseModalities": ["TEXT", "IMAGE"],
                "imageConfig": {"aspectRatio": config.PREVIEW_ASPECT_RATIO},
            },
        }

        result = await self._generate_content(self.image_model, body)

        for part in _first_parts(result):
            if "inlineData" in part:
                data = part["inlineData"]["data"]
                mime_type = part["inlineData"].get("mimeType", "image/png")
                try:
                    base64.b64decode(data, validate=True)
                except binascii.Error as e:
                    raise GeminiResponseError(f"Gemini returned undecodable image data: {e}") from e
                logger.info(f"Preview rendered ({mime_type}, {len(data)} b64 chars)")
                return to_data_uri(data, mime_type)

        raise GeminiResponseError("Gemini response contained no image data.")
