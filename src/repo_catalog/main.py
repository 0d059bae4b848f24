from __future__ import annotations
import asyncio
import logging
import sys

from pydantic import ValidationError

from repo_catalog.domain.entities import RunReport
from repo_catalog.domain.exceptions import ConfigurationError
from repo_catalog.infrastructure.config import Settings, get_settings
from repo_catalog.interface.dependencies import build_use_case
from repo_catalog.interface.error_handlers import EXIT_OK, exit_code_for

logger = logging.getLogger(__name__)


def load_settings() -> Settings:
    """Read settings, turning validation problems into ConfigurationError."""
    try:
        return get_settings()
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ())) or 'settings'}: {err.get('msg')}"
            for err in exc.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {problems}") from exc


async def run(settings: Settings) -> RunReport:
    async with build_use_case(settings) as use_case:
        return await use_case.execute()


def main() -> int:
    """Catalogue every repository once, appending to the output CSV."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )
    try:
        settings = load_settings()
        logging.getLogger().setLevel(settings.log_level.upper())
        logger.info("Starting repository analysis...")
        asyncio.run(run(settings))
    except (Exception, KeyboardInterrupt) as exc:
        return exit_code_for(exc)
    logger.info("Data written to %s", settings.output_csv_file)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
