import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import make_asgi_app

from quiethours.config import settings
from quiethours.logging_config import configure_logging
from quiethours.routers import health, topics
from quiethours.services.loader import clear_cache

configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s (data_dir=%s)", settings.site_name, settings.data_dir)
    yield
    clear_cache()
    logger.info("Shutting down %s", settings.site_name)


app = FastAPI(title=settings.site_name, lifespan=lifespan)

app.mount("/metrics", make_asgi_app())

app.include_router(health.router)
app.include_router(topics.router)
