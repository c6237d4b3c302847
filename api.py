import uvicorn

from config import ApplicationConfig
from src.api.app import create_app

app = create_app(ApplicationConfig)

if __name__ == "__main__":
    # the in-process job queue does not survive reloads
    uvicorn.run(
        "api:app",
        host=ApplicationConfig.API_HOST,
        port=ApplicationConfig.API_PORT,
        reload=ApplicationConfig.API_RELOAD and ApplicationConfig.QUEUE_MODE == "sync",
        log_level=ApplicationConfig.LOG_LEVEL.lower(),
    )
