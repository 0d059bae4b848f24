"""Exit-code mapping — translate fatal domain errors to process exit codes.

Only errors that abort a run reach this table; per-repository failures are
absorbed by the use case and show up as placeholder rows instead.
"""

from __future__ import annotations

import logging

from repo_catalog.domain.exceptions import (
    CatalogFileError,
    ConfigurationError,
    RepoCatalogError,
    SourceListingError,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_FATAL_IO = 2
EXIT_INTERRUPTED = 130

_EXCEPTION_EXIT_CODES: list[tuple[type[RepoCatalogError], int]] = [
    (ConfigurationError, EXIT_FAILURE),
    (SourceListingError, EXIT_FATAL_IO),
    (CatalogFileError, EXIT_FATAL_IO),
]


def exit_code_for(exc: BaseException) -> int:
    """Report *exc* to the operator and return the matching exit code."""
    if isinstance(exc, KeyboardInterrupt):
        logger.warning("Interrupted; rows written so far are kept.")
        return EXIT_INTERRUPTED

    for exc_type, code in _EXCEPTION_EXIT_CODES:
        if isinstance(exc, exc_type):
            logger.error("%s: %s", type(exc).__name__, exc)
            return code

    logger.error("An unexpected error occurred during the process", exc_info=exc)
    return EXIT_FAILURE
