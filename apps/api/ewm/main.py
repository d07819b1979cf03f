from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from ewm.api.errors import register_exception_handlers
from ewm.api.v1.router import router as api_router
from ewm.core.config import settings
from ewm.core.logging import configure_logging
from ewm.db import init_db
from ewm.middleware.request_id import RequestIdMiddleware
from ewm.stats.factory import close_stats_client

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.db_auto_create:
        init_db()
    yield
    close_stats_client()


app = FastAPI(title="Explore With Me API", lifespan=lifespan)

# Starlette runs the LAST added middleware FIRST (outermost), so the request id
# is bound before CORS answers a preflight.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIdMiddleware)

register_exception_handlers(app)

if settings.metrics_enabled:
    Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(api_router)
