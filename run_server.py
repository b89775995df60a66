#!/usr/bin/env python3
"""Simple script to start the FastAPI server."""

import os
import sys

# Add the src directory to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

if __name__ == "__main__":
    import uvicorn

    from ticket_marketplace.utils.logging_config import setup_logging

    setup_logging()

    port = int(os.getenv("PORT", "3000"))
    print("Starting Ticket Marketplace API server...")
    print(f"Server will be available at: http://localhost:{port}")
    print(f"API documentation: http://localhost:{port}/docs")
    print("Press Ctrl+C to stop the server")

    # Use the factory string for reload to work properly
    uvicorn.run(
        "ticket_marketplace.api.server:create_app",
        factory=True,
        host="0.0.0.0",
        port=port,
        reload=True,
        reload_dirs=["src"]
    )
