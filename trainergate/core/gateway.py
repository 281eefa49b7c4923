"""FastAPI app entry."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from trainergate.adapters.trainer.router import router as trainer_router
from trainergate.adapters.trainer.upstream import close_upstream_async_client
from trainergate.config.settings import settings
from trainergate.util.logger import logger


@asynccontextmanager
async def lifespan(_app: FastAPI):
    logger.info("trainer gateway starting route=%s model=%s", settings.route_path, settings.upstream_model)
    yield
    await close_upstream_async_client()


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.include_router(trainer_router, prefix=settings.route_path.rstrip("/"))


@app.middleware("http")
async def error_boundary_middleware(request: Request, call_next):
    logger.debug("boundary enter method=%s path=%s", request.method, request.url.path)
    try:
        response = await call_next(request)
    except Exception as exc:
        logger.exception("trainer unhandled exception path=%s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "trainer_internal_error", "detail": f"internal error: {type(exc).__name__}"},
            headers={"Access-Control-Allow-Origin": settings.cors_allow_origin},
        )
    logger.debug("boundary pass method=%s path=%s status=%s", request.method, request.url.path, response.status_code)
    return response


@app.get("/health")
def health() -> dict:
    logger.info("health check")
    return {"status": "ok"}
