#!/usr/bin/env python
"""Start the storefront with the port configured by the hosting platform."""
import os
import uvicorn

from storefront.core.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    # Get port from environment, default to 8000
    port = int(os.environ.get("PORT", 8000))

    print(f"Starting {settings.SITE_NAME} ({settings.ENVIRONMENT}) on port {port}")

    uvicorn.run(
        "storefront.main:app",
        host="0.0.0.0",
        port=port,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.ENVIRONMENT == "development" and settings.DEBUG,
        proxy_headers=True,
    )
