import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.adapter.services.job_queue import JobWorker
from src.log import configure_logging
from .error import ClientError, ServerError

logger = logging.getLogger(__name__)

SHUTDOWN_DRAIN_TIMEOUT = 30


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code} {exc.base_error.reason or ''}".rstrip())
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


@asynccontextmanager
async def lifespan(app: FastAPI):
    from config import ApplicationConfig
    from src import depends

    await depends.create_central_tables()
    logger.info("Central database ready")

    worker = None
    worker_task = None
    if ApplicationConfig.QUEUE_MODE == "async" and (
        ApplicationConfig.QUEUE_EMBEDDED_WORKER or ApplicationConfig.QUEUE_BACKEND == "memory"
    ):
        worker = JobWorker(depends.job_queue, poll_interval=ApplicationConfig.JOB_POLL_INTERVAL)
        worker_task = asyncio.create_task(worker.run())

    yield

    if worker is not None:
        worker.stop()
        try:
            await asyncio.wait_for(worker_task, timeout=SHUTDOWN_DRAIN_TIMEOUT)
        except asyncio.TimeoutError:
            logger.warning("Embedded worker did not stop in time; its job will be requeued")
    await depends.close_resources()


def create_app(ApplicationConfig) -> FastAPI:
    configure_logging(ApplicationConfig.LOG_LEVEL)

    app = FastAPI(
        title="Tenant Provisioning API",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import admin, health_check, tenant_panel

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(admin.router, tags=["Admin"])
    app.include_router(tenant_panel.router, tags=["Tenant Panel"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
