#!/usr/bin/env python
"""Script to run the SmartTasker backend server."""
import uvicorn

from smart_tasker.config import HOST, LOG_LEVEL, PORT
from smart_tasker.logging_setup import setup_logging

if __name__ == "__main__":
    setup_logging(LOG_LEVEL)
    uvicorn.run(
        "smart_tasker.main:app",
        host=HOST,
        port=PORT,
        log_config=None,
    )
