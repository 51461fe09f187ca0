# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

#src/gantry/logging/log.py

from __future__ import annotations

import logging
import os
from pathlib import Path
from datetime import datetime, timezone
import uuid

def init_logging(
    *,
    base_dir: Path | None = None,
    name: str = "gantry",
    verbose: bool = False,
) -> tuple[logging.Logger, str, Path]:
    """
    Initializes:
      - run log file with the full trace (every terraform command, tracebacks)
      - console output on stderr so terraform's stdout stays clean
      - returns run_id so a run can be correlated with its log file
    """
    run_id = str(uuid.uuid4())

    if base_dir is None:
        env_dir = os.environ.get("GANTRY_LOG_DIR")
        base_dir = Path(env_dir) if env_dir else Path.home() / ".gantry" / "logs"
    base_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    log_path = base_dir / f"{name}-{ts}-{run_id}.log"

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()
    logger.propagate = False

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # File = FULL TRACE
    fh = logging.FileHandler(log_path)
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(formatter)

    # Console = INFO by default, DEBUG when --gantry-debug is passed
    ch = logging.StreamHandler()
    ch.setLevel(logging.DEBUG if verbose else logging.INFO)
    ch.setFormatter(logging.Formatter("[gantry] %(message)s"))

    logger.addHandler(fh)
    logger.addHandler(ch)

    logger.debug("run_id=%s", run_id)
    logger.debug("log_file=%s", log_path)

    return logger, run_id, log_path
