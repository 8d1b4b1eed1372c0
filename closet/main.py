import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from closet.core.config import settings
from closet.core.db import SessionFactory
from closet.core.state import AppState
from closet.routers import challenges, feedback, health, insights, items
from closet.routers import closet as closet_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    state = AppState.build(SessionFactory)
    app.state.closet = state
    try:
        yield
    finally:
        # flush analytics writes still in flight
        await state.close()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# CORS
origins = settings.cors_origin_list
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

prefix = settings.API_PREFIX
app.include_router(health.router, prefix=prefix)
app.include_router(items.router, prefix=prefix)
app.include_router(feedback.router, prefix=prefix)
app.include_router(closet_router.router, prefix=prefix)
app.include_router(challenges.router, prefix=prefix)
app.include_router(insights.router, prefix=prefix)

logger = logging.getLogger("closet.requests")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000
    logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, duration_ms)
    return response


@app.get("/")
async def root():
    return {"name": settings.APP_NAME, "env": settings.APP_ENV}
