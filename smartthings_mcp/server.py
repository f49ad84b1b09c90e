#!/usr/bin/env python3
"""
SmartThings MCP Server
An MCP server exposing the unified capability registry for SmartThings, Tuya and Lutron devices
"""

import os
import logging
from typing import Optional, Dict, Any
from dotenv import dotenv_values
from pathlib import Path

from fastmcp import FastMCP

from . import __version__
from .services.capability_service import CapabilityService
from .services.capability_registry import get_capability_registry, get_value_conversion_registry

# Load environment variables with correct precedence
config: Dict[str, str] = {}

# Load from project directory if available
for filename in ('.env', '.env.local'):
    path = Path(filename)
    if path.exists():
        config.update(dotenv_values(path))

# Also check the package directory (supports running from elsewhere)
script_dir = Path(__file__).parent
for filename in ('.env', '.env.local'):
    path = script_dir / filename
    if path.exists():
        config.update(dotenv_values(path))

# Apply loaded values without overriding existing environment vars
for key, value in config.items():
    if value is not None:
        os.environ.setdefault(key, value)

SERVER_NAME = os.getenv('MCP_SERVER_NAME', 'SmartThingsMCP')

# Configure logging (stderr, stdout carries the MCP stream)
logging.basicConfig(
    level=logging.DEBUG if os.getenv('DEBUG', 'false').lower() == 'true' else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize MCP server
mcp = FastMCP(name=SERVER_NAME)

# Service instance (will be initialized on first use)
_capability_service: Optional[CapabilityService] = None


def get_capability_service() -> CapabilityService:
    """Get or initialize the capability service"""
    global _capability_service

    if _capability_service is None:
        _capability_service = CapabilityService(
            capability_registry=get_capability_registry(),
            conversion_registry=get_value_conversion_registry(),
            mcp=mcp  # Pass MCP instance to service
        )
        status = _capability_service.get_status()
        logger.info(
            f"Initialized capability service ({status['mapping_count']} mappings, "
            f"{status['conversion_count']} conversions)"
        )

    return _capability_service


def get_server_status() -> Dict[str, Any]:
    """Get the status of the capability service"""
    return {
        "server": SERVER_NAME,
        "version": __version__,
        "services": {
            "capability_registry": {
                "status": "active",
                **get_capability_service().get_status()
            }
        }
    }


def get_server_config() -> Dict[str, Any]:
    """Get the current server configuration (non-sensitive)"""
    return {
        "server_name": SERVER_NAME,
        "debug_mode": os.getenv('DEBUG', 'false').lower() == 'true',
        "log_level": logging.getLevelName(logging.getLogger().level),
        "host": os.getenv('HOST', '0.0.0.0'),
        "port": int(os.getenv('PORT', '8080'))
    }


def toggle_debug(enabled: bool) -> Dict[str, Any]:
    """Switch the root log level between DEBUG and ERROR"""
    root = logging.getLogger()
    previous_level = logging.getLevelName(root.level)
    new_level = logging.DEBUG if enabled else logging.ERROR
    root.setLevel(new_level)

    logger.info(f"Logging level changed from {previous_level} to {logging.getLevelName(new_level)}")

    return {
        "message": ("Debug logging enabled. You'll now see detailed information about all operations."
                    if enabled else "Debug logging disabled. Only errors will be shown."),
        "previous_level": previous_level,
        "new_level": logging.getLevelName(new_level),
        "enabled": enabled
    }


def capability_matrix() -> Dict[str, Any]:
    """Coverage matrix resource"""
    return get_capability_service().categorizer.get_coverage_matrix()


# Register server-level tools
mcp.tool(
    name="get_server_status",
    description="""Get the current status of the capability registry service.

## Returns
• Server name and version
• Number of registered capability mappings and value conversions
• Supported platforms

## Use Cases
• Health check
• Verify the registry was populated

## Related Tools
• Use `get_server_config` for configuration details""",
    title="Server Status",
    annotations={"title": "Server Status"}
)(get_server_status)

mcp.tool(
    name="get_server_config",
    description="""Get the current server configuration (non-sensitive values only).

## Returns
• Debug mode status
• Current log level
• HTTP host and port used by the remote server

## Related Tools
• Use `toggle_debug` to change the log level""",
    title="Server Configuration",
    annotations={"title": "Server Configuration"}
)(get_server_config)

mcp.tool(
    name="toggle_debug",
    description="""Enable or disable debug logging.

## Parameters
• enabled: true to show detailed information about all operations, false to show errors only

## Returns
Previous and new log level""",
    title="Toggle Debug Logging",
    annotations={"title": "Toggle Debug Logging"}
)(toggle_debug)

mcp.resource(
    "capabilities://matrix",
    name="capability_matrix",
    description="Which platforms support each unified capability",
    mime_type="application/json"
)(capability_matrix)


# Initialize services on startup
def initialize_services():
    """Initialize all configured services"""
    logger.info("Initializing capability registry service...")

    if get_capability_service():
        logger.info("✓ Capability registry service initialized")


def main():
    """Run the MCP server over stdio"""
    logger.info(f"Starting {SERVER_NAME} server...")

    initialize_services()

    mcp.run()


if __name__ == "__main__":
    main()
