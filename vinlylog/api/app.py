"""FastAPI app, CORS, and route registration."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(name)s: %(message)s",
)

from vinlylog.api.state import AppState, get_state
from vinlylog.config import VINLYLOG_WEB_ORIGIN, has_jsonbin_config

# Import routes after state to avoid circular imports
from vinlylog.api.routes import document, links, playlists, users

__all__ = ["app", "AppState", "get_state"]

_state = get_state()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not has_jsonbin_config():
        logger.warning("JSONBIN_BIN_ID / JSONBIN_MASTER_KEY not set; document calls will fail")
    yield
    await _state.close()


app = FastAPI(
    title="VinlyLog API",
    description="Shared, pin-protected music link lists stored in one JSONBin document",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[VINLYLOG_WEB_ORIGIN] if VINLYLOG_WEB_ORIGIN else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(document.router, prefix="/api/document", tags=["document"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(playlists.router, prefix="/api/playlists", tags=["playlists"])
app.include_router(links.router, prefix="/api/links", tags=["links"])
