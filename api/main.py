import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pymongo.errors import PyMongoError

from auth import dependencies as auth_dependencies
from core import db
from downloads import router as downloads_router
from models import router as models_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Auth must be configured before serving; a missing setting raises here.
    get_verifier = app.dependency_overrides.get(
        auth_dependencies.get_token_verifier,
        auth_dependencies.get_token_verifier,
    )
    get_verifier()

    # One store client per process, shared by every request.
    await db.init_store()
    try:
        yield
    finally:
        await db.close_store()


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "*")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


app = FastAPI(title="Model Hub API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(models_router.router, tags=["models"])
app.include_router(downloads_router.router, tags=["downloads"])


@app.exception_handler(PyMongoError)
async def store_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    logger.error("store_error path=%s", request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Database operation failed."})


@app.get("/", response_class=PlainTextResponse)
def root() -> str:
    return "Model Hub API is running"


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/health/db")
async def health_db() -> dict:
    await db.ping()
    return {"status": "ok", "database": "connected"}


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "3000")))
