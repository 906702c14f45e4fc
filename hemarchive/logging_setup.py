from __future__ import annotations

import logging
import os


def configure_logging(*, cli_level: str | None = None) -> None:
    """Configure root logging for the tool.

    Precedence:
    1) `cli_level` (e.g. from argparse)
    2) env var `HEM_LOG_LEVEL`
    3) default INFO

    Preset listings and monitor output are logged at INFO, raw MIDI traffic at
    DEBUG. Call this once, early in the entrypoint.
    """

    level_name = (cli_level or os.environ.get("HEM_LOG_LEVEL") or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        force=True,
    )
