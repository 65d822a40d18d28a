"""Entry point for running service2 under uvicorn."""

import uvicorn

from service2.src.settings import settings
from service2.utils.uvicorn_logging_config import get_uvicorn_log_config


def main() -> None:
    uvicorn.run(
        "service2.src.api:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        log_config=get_uvicorn_log_config(
            settings.PYTHON_LOG_LEVEL, settings.ENABLE_FILE_LOGGING
        ),
    )


if __name__ == "__main__":
    main()
