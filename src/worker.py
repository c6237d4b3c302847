"""
Standalone job worker.

Runs queued jobs (tenant permission seeding) outside the API process.
Start as many as needed; with QUEUE_BACKEND=redis they share one queue.
"""

import asyncio
import logging
import signal

from src.adapter.services.job_queue import JobWorker
from src.log import configure_logging

logger = logging.getLogger(__name__)


async def run_worker(ApplicationConfig) -> None:
    configure_logging(ApplicationConfig.LOG_LEVEL)
    if ApplicationConfig.QUEUE_BACKEND != "redis":
        logger.warning("QUEUE_BACKEND is not redis: this worker only sees its own process")

    from src import depends

    await depends.create_central_tables()
    worker = JobWorker(depends.job_queue, poll_interval=ApplicationConfig.JOB_POLL_INTERVAL)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, worker.stop)

    try:
        await worker.run()
    finally:
        await depends.close_resources()
