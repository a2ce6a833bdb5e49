# bucket_browser/main.py
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bucket_browser import config
from bucket_browser.deps import get_backend
from bucket_browser.routes.files import router as files_router

logger = logging.getLogger(__name__)

APP_START = datetime.now(timezone.utc)


def configure_logging(level: str = config.LOG_LEVEL):
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    backend = app.dependency_overrides.get(get_backend, get_backend)()
    try:
        backend.ensure_bucket()
    except Exception:
        # the bucket check endpoint retries on demand
        logger.exception("Bucket check failed at startup bucket=%s", backend.bucket)
    logger.info("Serving bucket=%s endpoint=%s", backend.bucket, config.MINIO_ENDPOINT)
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="bucket-browser", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        logger.info("Rejected request %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"error": "Invalid request"})

    @app.get("/health")
    def health_check():
        now = datetime.now(timezone.utc)
        return {
            "status": "ok",
            "timestamp": now.isoformat(),
            "uptime_seconds": int((now - APP_START).total_seconds()),
            "bucket": config.BUCKET_NAME,
        }

    app.include_router(files_router)
    return app


app = create_app()


def run():
    import uvicorn

    configure_logging()
    uvicorn.run("bucket_browser.main:app", host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()
