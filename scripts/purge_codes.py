#!/usr/bin/env python3
"""
Delete verification codes whose expiry has passed.

Expired codes are already rejected (and removed) when presented; this only
cleans up the ones nobody came back for. Safe to run from cron.
"""
from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import structlog

from memberhub.core.logging import configure_logging
from memberhub.core.utils import utcnow
from memberhub.repositories.sql_repository import SQLRepository

logger = structlog.get_logger("purge_codes")


def main() -> None:
    configure_logging()
    removed = SQLRepository().purge_expired_codes(utcnow())
    logger.info("codes.purged", removed=removed)


if __name__ == "__main__":
    main()
