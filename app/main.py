import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.database import dispose_engine
from app.errors import register_exception_handlers
from app.middleware import REQUEST_ID_HEADER, RequestContextFilter, RequestContextMiddleware
from app.routers import posts, seo, versions

_log_handler = logging.StreamHandler()
_log_handler.addFilter(RequestContextFilter())
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] [%(request_id)s] %(message)s",
    handlers=[_log_handler],
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Blog Writer API starting (env=%s)", settings.APP_ENV)
    yield
    await dispose_engine()


app = FastAPI(
    title="Blog Writer API",
    description="Draft blog posts with multiple content versions and SEO metadata",
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware
app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[REQUEST_ID_HEADER],
)

register_exception_handlers(app)

# Routers
app.include_router(posts.router)
app.include_router(versions.router)
app.include_router(seo.router)


@app.get("/health")
async def health():
    return {"status": "healthy", "version": "1.0.0"}
