import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pymongo.errors import PyMongoError

from incident_hub.api.auth import router as auth_router
from incident_hub.api.contributions import router as contributions_router
from incident_hub.api.dashboard import router as dashboard_router
from incident_hub.api.locations import router as locations_router
from incident_hub.api.profiles import router as profiles_router
from incident_hub.api.reports import router as reports_router
from incident_hub.core.config import get_settings
from incident_hub.core.errors import register_error_handlers
from incident_hub.core.logging import init_logging
from incident_hub.db.mongo import close_client, ensure_indexes, get_database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        await ensure_indexes(get_database())
    except PyMongoError as exc:
        # the API still serves; store calls will surface FetchFailed
        logger.error("Could not ensure indexes: %s", exc)
    yield
    close_client()


def create_app() -> FastAPI:
    settings = get_settings()
    init_logging(settings)

    app = FastAPI(title=f"{settings.app_name} API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(auth_router)
    app.include_router(profiles_router)
    app.include_router(locations_router)
    app.include_router(reports_router)
    app.include_router(contributions_router)
    app.include_router(dashboard_router)

    # static uploads (report photos)
    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=upload_dir), name="uploads")

    @app.get("/")
    def root():
        return {"ok": True, "docs": "/docs"}

    return app


app = create_app()
