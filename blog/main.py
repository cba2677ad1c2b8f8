import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from blog.cache import cache
from blog.config import settings
from blog.errors import register_error_handlers
from blog.logging_config import setup_logging
from blog.middleware import RequestTimingMiddleware
from blog.routers import api, pages

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL)
    await cache.connect()
    logger.info("%s %s started (%s)", settings.PROJECT_NAME, settings.VERSION, settings.APP_ENV)
    yield
    await cache.disconnect()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Blog post management with server-rendered admin pages",
    version=settings.VERSION,
    lifespan=lifespan,
)

app.add_middleware(RequestTimingMiddleware)
register_error_handlers(app)

app.include_router(api.router)
app.include_router(pages.router)


@app.get("/", include_in_schema=False)
async def root():
    return RedirectResponse("/posts")


@app.get("/health")
async def health():
    return {"status": "healthy", "version": settings.VERSION, "cache": cache.stats}
