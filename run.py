#!/usr/bin/env python3
"""
Token Ledger Entry Point

Starts the FastAPI server with a ledger initialized from configuration.
"""

import sys

import uvicorn

from token_ledger.api import create_app
from token_ledger.config import get_config
from token_ledger.logging_config import setup_logging


def main() -> None:
    config = get_config()
    logger = setup_logging(config.log_level, config.log_format)
    logger.info(
        f"Starting {config.token_name} ({config.token_symbol}) ledger on "
        f"{config.api_host}:{config.api_port}"
    )

    try:
        uvicorn.run(create_app(), host=config.api_host, port=config.api_port,
                    log_level=config.log_level.lower())
    except KeyboardInterrupt:
        logger.info("Shutting down token ledger")
    except Exception as e:
        logger.error(f"Error starting server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
