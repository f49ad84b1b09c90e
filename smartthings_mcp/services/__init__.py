"""
Services package for SmartThings MCP Server
Contains the unified device model and the capability registries.
"""

from .unified_device import Platform, DeviceCapability
from .capability_registry import CapabilityRegistry, ValueConversionRegistry

__all__ = ['Platform', 'DeviceCapability', 'CapabilityRegistry', 'ValueConversionRegistry']
