#!/usr/bin/env python3
"""
Savings Ledger Entry Point

Starts the FastAPI server with an in-memory asset transfer simulator.
"""

import sys

from savings_ledger.api import run_server
from savings_ledger.api.deps import LedgerSystem
from savings_ledger.config import get_config
from savings_ledger.logging_config import setup_logging


if __name__ == "__main__":
    config = get_config()
    logger = setup_logging(config.log_level, log_format=config.log_format, log_file=config.log_file)
    logger.info(
        "Starting savings ledger",
        extra={"extra": {
            "annual_rate_bps": config.annual_rate_bps,
            "lock_period_seconds": config.lock_period_seconds,
            "storage_backend": config.storage_backend
        }}
    )

    try:
        run_server(host=config.api_host, port=config.api_port, system=LedgerSystem(config=config))
    except KeyboardInterrupt:
        logger.info("Shutting down savings ledger")
    except Exception as e:
        logger.exception(f"Error starting server: {e}")
        sys.exit(1)
