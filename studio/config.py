import os
from dotenv import load_dotenv

load_dotenv()

# ── Gemini ───────────────────────────────────────────────────────────────────

GEMINI_API_BASE = os.getenv("GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta")
PLAN_MODEL = os.getenv("STUDIO_PLAN_MODEL", "gemini-3-flash-preview")
IMAGE_MODEL = os.getenv("STUDIO_IMAGE_MODEL", "gemini-3-pro-image-preview")
PLAN_TEMPERATURE = float(os.getenv("STUDIO_PLAN_TEMPERATURE", "0.8"))
REQUEST_TIMEOUT = float(os.getenv("STUDIO_REQUEST_TIMEOUT", "120"))

# Matches the --ar flag in the copy-ready prompt text
PREVIEW_ASPECT_RATIO = os.getenv("STUDIO_PREVIEW_ASPECT_RATIO", "3:4")

# ── Campaign ─────────────────────────────────────────────────────────────────

CAMPAIGN_SHOT_COUNT = 10

# ── Logging ──────────────────────────────────────────────────────────────────

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def gemini_api_key() -> str:
    """Read the key at call time so a reloaded .env takes effect."""
    return os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY", "")
