from __future__ import annotations
import logging
import uvicorn
from repo_introspector.infrastructure.config import get_settings

logger = logging.getLogger("repo_introspector")


def main() -> None:
    """Configure logging and serve the API with uvicorn."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )
    if settings.github_token is None:
        logger.warning("GITHUB_TOKEN is not set; GitHub allows 60 requests per hour")
    logger.info("Serving on %s:%d (cache: %s)", settings.host, settings.port, settings.database_url)
    uvicorn.run(
        "repo_introspector.interface.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
