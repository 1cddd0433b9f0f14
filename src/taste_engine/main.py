import logging

from fastapi import FastAPI

from taste_engine.api.routes.compatibility import router as compatibility_router
from taste_engine.api.routes.moods import router as moods_router
from taste_engine.api.routes.profile import router as profile_router
from taste_engine.api.routes.rankings import router as rankings_router
from taste_engine.api.routes.recommendations import router as recommendations_router
from taste_engine.config import settings
from taste_engine.logging_config import configure_logging
from taste_engine.middleware import RequestContextMiddleware

configure_logging(
    level=settings.log_level,
    output_format=settings.log_format,
    service_name=settings.log_service_name,
)
logger = logging.getLogger(__name__)
logger.info("Application bootstrapped")

app = FastAPI(
    title=settings.app_name,
    description=settings.app_description,
    version=settings.app_version,
)
app.add_middleware(RequestContextMiddleware)
app.include_router(compatibility_router)
app.include_router(moods_router)
app.include_router(profile_router)
app.include_router(rankings_router)
app.include_router(recommendations_router)
