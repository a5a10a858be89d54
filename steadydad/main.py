"""FastAPI app: lifespan, CORS, router registration."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
from .api.endpoints import router
from .api.events import router as events_router
from .api.glanceables import router as glanceables_router
from .services.caregiving_session import get_caregiving_session
from .services.scheduler import start_scheduler, stop_scheduler
from .core.database import get_database
from .core.settings import settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


# Used by: FastAPI lifespan, init DB + session + scheduler on startup, tear down on shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    db = get_database()
    await db.connect(settings.DATABASE_URL)
    await db.create_schema()

    session = get_caregiving_session()
    await session.load_initial_data()
    await start_scheduler()

    yield

    await stop_scheduler()
    await session.wait_for_glanceables()
    await db.disconnect()


app = FastAPI(
    title="SteadyDad API",
    version="1.0.0",
    description="SteadyDad - caregiving log, dashboard snapshot and iOS glanceables",
    lifespan=lifespan
)

cors_origins = settings.CORS_ORIGINS.copy()
if settings.CORS_EXTRA_ORIGINS:
    cors_origins.extend([o.strip() for o in settings.CORS_EXTRA_ORIGINS.split(",") if o.strip()])

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, tags=["dashboard"])
app.include_router(events_router)
app.include_router(glanceables_router)
