"""HTTP entrypoint for the PriorAuth appeal copilot.

``uvicorn appeal_copilot.main:app`` serves the routes in
``appeal_copilot.api.routes``; ``appeal-copilot`` does the same using the
port from ``Settings``.
"""

import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from appeal_copilot.api.routes import router
from appeal_copilot.config import load_settings
from appeal_copilot.graph.nodes.llm_client import get_completion_client

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, stream=sys.stdout)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Fails startup when ANTHROPIC_API_KEY is missing.
    completion_client = get_completion_client()
    logger.info(
        "Completion service ready — url=%s model=%s timeout=%.0fs",
        completion_client.settings.api_url,
        completion_client.settings.model,
        completion_client.settings.timeout_seconds,
    )
    yield


def create_app() -> FastAPI:
    """Build the FastAPI application with the appeal routes mounted."""
    application = FastAPI(
        title="PriorAuth Appeal Copilot",
        description="Turns insurance denial letters into ready-to-send appeal packages.",
        version="0.1.0",
        lifespan=lifespan,
    )
    application.include_router(router)
    return application


app = create_app()


def main() -> None:
    """Serve the API on the port configured by ``PORT``."""
    settings = load_settings()
    logger.info("Starting appeal copilot on port %d", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level="info")


if __name__ == "__main__":
    main()
