#!/usr/bin/env python3
"""
Run script for the Arcana ritual engine
"""
import uvicorn

from arcana.config.settings import settings
from arcana.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
