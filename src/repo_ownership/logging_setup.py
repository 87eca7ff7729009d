from __future__ import annotations

import logging

LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(format=LOG_FORMAT, level=level)
