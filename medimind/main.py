"""FastAPI application: static frontend, analyze/chat/health API, CORS."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse

from medimind.config import settings
from medimind.llm.client import ModelClient
from medimind.routes import router
from medimind.store.cases import CaseStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"
INDEX_FILE = STATIC_DIR / "medimind.html"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the model client and case store once per process."""
    app.state.settings = settings
    app.state.model_client = ModelClient(settings)
    app.state.case_store = CaseStore(settings)

    if not settings.supabase_url or not settings.supabase_service_role_key:
        logger.warning("Supabase credentials missing; cases will not be saved.")
    logger.info(
        "Model configured at: %s (model: %s)",
        settings.llm_base_url,
        settings.llm_model,
    )
    yield
    logger.info("Shutting down.")


app = FastAPI(
    title="MediMind",
    description="Six-agent symptom analysis backed by a local Ollama model and Supabase",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/", include_in_schema=False)
async def index():
    return FileResponse(INDEX_FILE)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "medimind.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )
