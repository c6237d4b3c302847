import asyncio

from config import ApplicationConfig
from src.worker import run_worker

if __name__ == "__main__":
    asyncio.run(run_worker(ApplicationConfig))
