"""
Entry point for the User Catalog Backend
"""

import logging
from dotenv import load_dotenv

# Load environment variables from .env file before settings are imported
load_dotenv()

from user_catalog.app import app
from user_catalog.config.settings import PORT

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting User Catalog Backend on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
