"""
Production entrypoint for the Deal Audit Engine.

Binds to 0.0.0.0:$PORT.
"""

import logging

import uvicorn

from utils.config import Config
from utils.logging_setup import configure_logging

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    config = Config.load()
    configure_logging(config.log_level)
    logger.info("Starting Deal Audit Engine on port %d", config.port)

    # Import app here to ensure clean module loading
    from web.app import app

    uvicorn.run(app, host="0.0.0.0", port=config.port, log_config=None)
