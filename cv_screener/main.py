import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from cv_screener.api.routes.analyze import router as analyze_router

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging() -> None:
    """
    Set the cv_screener log level from CV_SCREENER_LOG_LEVEL (default INFO).

    Handlers belong to the host process; a console handler is added only when
    nothing has configured the root logger yet.
    """
    level = os.getenv("CV_SCREENER_LOG_LEVEL", "INFO").upper()
    logging.getLogger("cv_screener").setLevel(level)
    if not logging.getLogger().handlers:
        logging.basicConfig(format=LOG_FORMAT)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    yield


app = FastAPI(
    title="CV Screener (Experience Extraction & Scoring)",
    description="Deterministic CV screening service that reconstructs a candidate's work timeline from plain-text CVs and scores it against job requirements",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.include_router(analyze_router)

@app.get("/", tags=["health"])
def root():
    return {"service": "cv-screener", "status": "running"}

@app.get("/health", tags=["health"])
def health():
    return {"status": "ok"}

def custom_openapi():
    """Generate OpenAPI schema with custom settings."""
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title="CV Screener API",
        version="0.1.0",
        description="CV scoring API with experience timeline, gap analysis and confidence",
        routes=app.routes,
    )
    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi
