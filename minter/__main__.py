import uvicorn
from loguru import logger

from minter.config import settings


def run() -> None:
    port = settings.listen_port
    logger.info("starting server at http://localhost:{}", port)
    uvicorn.run("minter.main:app", host=settings.host, port=port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
