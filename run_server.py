#!/usr/bin/env python3

import uvicorn

from gas_oracle.config import get_settings
from gas_oracle.main import app

if __name__ == "__main__":
    settings = get_settings()
    print("Starting Fuse gas price oracle...")
    print(f"Server will be available at: http://localhost:{settings.PORT}")
    print(f"Current gas price at: http://localhost:{settings.PORT}/api/gas-price")
    print("Press Ctrl+C to stop the server")

    try:
        uvicorn.run(
            app,
            host=settings.HOST,
            port=settings.PORT,
            reload=False,
            log_level=settings.LOG_LEVEL.lower(),
        )
    except KeyboardInterrupt:
        print("\nServer stopped by user")
