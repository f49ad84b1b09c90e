"""Shared fixtures and configuration for tests"""

import pytest
from unittest.mock import MagicMock
from datetime import datetime, timezone

from smartthings_mcp.services.unified_device import (
    Platform,
    DeviceCapability,
    CapabilityGroup,
    UnifiedDevice,
)
from smartthings_mcp.services.capability_registry import (
    CapabilityRegistry,
    ValueConversionRegistry,
    create_capability_registry,
    create_value_conversion_registry,
)


# ============================================================================
# Registry Fixtures
# ============================================================================

@pytest.fixture
def capability_registry():
    """Capability registry populated with the standard mappings"""
    return create_capability_registry()


@pytest.fixture
def empty_capability_registry():
    """Capability registry with no mappings"""
    return CapabilityRegistry()


@pytest.fixture
def conversion_registry():
    """Value conversion registry populated with the standard conversions"""
    return create_value_conversion_registry()


@pytest.fixture
def empty_conversion_registry():
    """Value conversion registry with no conversions"""
    return ValueConversionRegistry()


# ============================================================================
# Device Fixtures
# ============================================================================

@pytest.fixture
def sample_thermostat():
    """Multi-component SmartThings thermostat"""
    return UnifiedDevice.create(
        Platform.SMARTTHINGS,
        'abc-123-def',
        'Hallway Thermostat',
        capabilities=[
            DeviceCapability.THERMOSTAT,
            DeviceCapability.TEMPERATURE_SENSOR,
            DeviceCapability.HUMIDITY_SENSOR,
        ],
        capability_groups=[
            CapabilityGroup(
                id='main',
                name='Main Controls',
                capabilities=[DeviceCapability.THERMOSTAT, DeviceCapability.TEMPERATURE_SENSOR]
            ),
            CapabilityGroup(
                id='humidity',
                name='Humidity Sensor',
                capabilities=[DeviceCapability.HUMIDITY_SENSOR],
                component_id='humidity'
            ),
        ],
        room='Hallway',
        last_seen=datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    )


@pytest.fixture
def sample_dimmable_light():
    """Tuya dimmable color bulb"""
    return UnifiedDevice.create(
        Platform.TUYA,
        'bf1234567890abcdef',
        'Kitchen Bulb',
        capabilities=[DeviceCapability.SWITCH, DeviceCapability.DIMMER, DeviceCapability.COLOR]
    )


@pytest.fixture
def sample_button():
    """Lutron Pico remote: battery powered button, no measurements"""
    return UnifiedDevice.create(
        Platform.LUTRON,
        'pico-7',
        'Bedroom Pico',
        capabilities=[DeviceCapability.BUTTON, DeviceCapability.BATTERY]
    )


# ============================================================================
# Server/MCP Fixtures
# ============================================================================

@pytest.fixture
def mock_fastmcp():
    """Mock FastMCP server"""
    mock_mcp = MagicMock()
    mock_mcp.tool = MagicMock(return_value=lambda func: func)
    return mock_mcp
