"""
Start the crawler trigger API server.

Responsibility: Local API server launcher
"""

import sys
import os

# Add project root to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import uvicorn
from assembly_crawler.config import settings


if __name__ == "__main__":
    print("🚀 Starting Assembly Crawler API Server...")
    print(f"📍 API will be available at: http://localhost:{settings.app.api_port}")
    print(f"📚 Swagger docs at: http://localhost:{settings.app.api_port}/docs")
    print("\nPress CTRL+C to stop\n")

    uvicorn.run(
        "api.main:app",
        host=settings.app.api_host,
        port=settings.app.api_port,
        reload=settings.app.debug,
        log_level="info"
    )
