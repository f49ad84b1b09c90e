#!/usr/bin/env python3
"""
SmartThings MCP Remote Server - exposes HTTP endpoint for remote MCP access
Designed for container platforms with SSL termination in front of the app
"""

import os
import logging

from fastapi import FastAPI
import uvicorn

from . import __version__
from .server import mcp, SERVER_NAME, initialize_services

logger = logging.getLogger(__name__)

# Get configuration
port = int(os.getenv("PORT", "8080"))
host = os.getenv("HOST", "0.0.0.0")

# MCP HTTP app, mounted at the application root so its /mcp route stays intact
mcp_app = mcp.http_app(stateless_http=True)


# Security middleware to add headers (pure ASGI for streaming compatibility)
class SecurityMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                headers = dict(message.get("headers", []))

                # Add security headers
                headers[b"x-content-type-options"] = b"nosniff"
                headers[b"x-frame-options"] = b"DENY"
                headers[b"referrer-policy"] = b"no-referrer"
                headers[b"cache-control"] = b"no-store, no-cache, must-revalidate, private"

                # Remove server identification headers if they exist
                headers.pop(b"server", None)
                headers.pop(b"x-powered-by", None)

                message["headers"] = list(headers.items())

            await send(message)

        await self.app(scope, receive, send_with_headers)


def create_app() -> FastAPI:
    """Build the FastAPI app serving the health check and the MCP endpoint"""
    app = FastAPI(
        title="SmartThings MCP Remote Server",
        docs_url=None,  # Disable Swagger UI
        redoc_url=None,  # Disable ReDoc
        openapi_url=None,  # Disable OpenAPI schema
        lifespan=mcp_app.lifespan  # REQUIRED: Connect MCP app's lifespan
    )

    app.add_middleware(SecurityMiddleware)

    # Fast health check endpoint (does not touch the registries)
    @app.get("/health")
    async def health_check():
        """Fast health check endpoint"""
        return {
            "status": "healthy",
            "version": __version__,
            "server": SERVER_NAME
        }

    app.mount("/", mcp_app)
    return app


app = create_app()


def main():
    """Run the HTTP server"""
    initialize_services()

    logger.info(f"Starting {SERVER_NAME} remote server")
    logger.info(f"MCP endpoint: http://{host}:{port}/mcp")
    logger.info(f"Health check: http://{host}:{port}/health")

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level="warning",  # Reduce log verbosity
        server_header=False,  # Don't send server header
    )


if __name__ == "__main__":
    main()
