import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from news_api.config import settings
from news_api.database import engine
from news_api.errors import http_exception_handler, request_validation_handler
from news_api.middleware import ErrorMapperMiddleware, TimingMiddleware
from news_api.routers import articles, topics, users

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("News API starting (env=%s)", settings.APP_ENV)
    yield
    # Shutdown
    await engine.dispose()

app = FastAPI(
    title="News API",
    description="Topics, articles, users and comments over a relational store",
    version="1.0.0",
    lifespan=lifespan,
)

# Error mapping: parse and routing failures are caught by FastAPI's own
# exception middleware, everything else escapes to ErrorMapperMiddleware.
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)

# Middleware
app.add_middleware(ErrorMapperMiddleware)
app.add_middleware(TimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(topics.router)
app.include_router(articles.router)
app.include_router(users.router)

@app.get("/health")
async def health():
    return {"status": "healthy", "version": "1.0.0"}


if __name__ == "__main__":
    uvicorn.run("news_api.main:app", host=settings.HOST, port=settings.PORT)
