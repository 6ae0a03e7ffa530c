import os
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from . import config
from . import metrics
from .campaign.routes import campaign_router, get_orchestrator

logger = logging.getLogger(__name__)


def setup_logging():
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging()
    logger.info("Studio starting up...")
    await get_orchestrator().credentials.probe()
    yield
    logger.info("Studio shutting down...")


app = FastAPI(title="Virtual Studio Lens", lifespan=lifespan)
app.include_router(campaign_router)


@app.get("/health")
def health_check():
    """Verify the service is running and a Gemini key is configured."""
    api_key = config.gemini_api_key()
    return {
        "status": "ok",
        "gemini_api_key_set": bool(api_key),
        "gemini_key_prefix": api_key[:8] + "..." if api_key else "MISSING",
        "plan_model": config.PLAN_MODEL,
        "image_model": config.IMAGE_MODEL,
    }


@app.get("/metrics")
def metrics_endpoint():
    return metrics.get_snapshot()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "8000")))
