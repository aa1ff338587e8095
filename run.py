import logging

import uvicorn
from cryptozoo.config import settings
from cryptozoo.db import init_db

if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    # Make sure the database and tables exist before serving
    init_db()

    # Start the API server
    print(f"Starting API server on {settings.API_HOST}:{settings.API_PORT}...")
    uvicorn.run(
        "cryptozoo.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.API_RELOAD
    )
