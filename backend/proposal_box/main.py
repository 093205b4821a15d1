"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from proposal_box.config import get_settings
from proposal_box.routers import drafts, identity, proposals
from proposal_box.services.proposals import get_proposal_store

logger = logging.getLogger(__name__)


def _warm_backend_state() -> None:
    """Load the proposal collection at process start."""

    try:
        get_proposal_store()
    except Exception:
        logger.exception("Backend warm-up failed; proposals will load on first request.")


@asynccontextmanager
async def lifespan(_: FastAPI):
    _warm_backend_state()
    yield


settings = get_settings()
app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(identity.router, tags=["identity"])
app.include_router(drafts.router, tags=["drafts"])
app.include_router(proposals.router, tags=["proposals"])


@app.get("/health")
def health() -> dict[str, str]:
    """Simple health check endpoint."""

    return {"status": "ok"}
