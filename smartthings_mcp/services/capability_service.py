"""Capability registry service for MCP integration"""

import logging
from typing import Dict, List, Optional, Any, TYPE_CHECKING

from .unified_device import Platform, parse_platform, parse_capability
from .capability_registry import (
    CapabilityRegistry,
    ValueConversionRegistry,
    get_capability_registry,
    get_value_conversion_registry,
)
from ..helpers.capability_categorizer import CapabilityCategorizer

if TYPE_CHECKING:
    from fastmcp import FastMCP

logger = logging.getLogger(__name__)

CONVERSION_DIRECTIONS = ('to_platform', 'from_platform')


class CapabilityService:
    """Lookup, coverage and conversion tools over the capability registries"""

    def __init__(self,
                 capability_registry: Optional[CapabilityRegistry] = None,
                 conversion_registry: Optional[ValueConversionRegistry] = None,
                 mcp: Optional['FastMCP'] = None):
        """
        Initialize capability service

        Args:
            capability_registry: Capability registry (defaults to the shared registry)
            conversion_registry: Value conversion registry (defaults to the shared registry)
            mcp: FastMCP instance for tool registration
        """
        self.capability_registry = capability_registry or get_capability_registry()
        self.conversion_registry = conversion_registry or get_value_conversion_registry()
        self.categorizer = CapabilityCategorizer(self.capability_registry)
        self.mcp = mcp

        # Register MCP tools if MCP server is provided
        if self.mcp:
            self._register_mcp_tools()

    def get_status(self) -> Dict[str, Any]:
        """Registry sizes for health checks"""
        return {
            "mapping_count": self.capability_registry.get_mapping_count(),
            "conversion_count": self.conversion_registry.get_conversion_count(),
            "platforms": [p.value for p in Platform]
        }

    def _register_mcp_tools(self):
        """Register MCP tools for this service"""
        self.mcp.tool(
            name="get_unified_capability",
            description="""Translate a platform-specific capability name into the unified capability model.

## Parameters
• platform: smartthings, tuya or lutron (required)
• platform_capability: Native capability name, e.g. `switchLevel`, `bright_value`, `OUTPUT` (required)

## Returns
Unified capability and the full mapping record (notes, deprecation)

## Use Cases
• Understand what a SmartThings/Tuya/Lutron capability does
• Check whether a native capability is deprecated

## Related Tools
• Use `get_platform_capability` for the reverse direction
• Use `list_capability_mappings` to see every mapping of a platform""",
            title="Get Unified Capability",
            annotations={"title": "Get Unified Capability"}
        )(self.get_unified_capability_for_mcp)

        self.mcp.tool(
            name="get_platform_capability",
            description="""Find the platform-specific name for a unified capability.

## Parameters
• platform: smartthings, tuya or lutron (required)
• capability: Unified capability, e.g. `dimmer`, `color`, `doorControl` (required)

## Returns
• Preferred native name (most recently registered alias)
• All native aliases mapped to the capability

## Related Tools
• Use `check_platform_support` for a yes/no answer
• Use `get_unified_capability` for the reverse direction""",
            title="Get Platform Capability",
            annotations={"title": "Get Platform Capability"}
        )(self.get_platform_capability_for_mcp)

        self.mcp.tool(
            name="check_platform_support",
            description="""Check whether a platform supports a unified capability.

## Parameters
• platform: smartthings, tuya or lutron (required)
• capability: Unified capability (required)

## Returns
Support flag and the native capability name when supported

## Use Cases
• Capability-gap detection before sending a command
• Example: Lutron does not support `color`""",
            title="Check Platform Support",
            annotations={"title": "Check Platform Support"}
        )(self.check_platform_support_for_mcp)

        self.mcp.tool(
            name="get_platform_coverage",
            description="""Get unified capability coverage for one platform or all platforms.

## Parameters
• platform: smartthings, tuya or lutron (optional, all platforms if omitted)

## Returns
• Supported and total capability counts
• Coverage percentage
• Per-category counts (control, sensor, composite)
• Missing capabilities

## Related Tools
• Use `get_capability_gaps` for recommendations""",
            title="Platform Coverage",
            annotations={"title": "Platform Coverage"}
        )(self.get_platform_coverage_for_mcp)

        self.mcp.tool(
            name="get_capability_gaps",
            description="""List the unified capabilities a platform cannot handle, grouped by category.

## Parameters
• platform: smartthings, tuya or lutron (required)

## Returns
• Unsupported capabilities by category
• Recommendations, including deprecated mappings still registered""",
            title="Capability Gaps",
            annotations={"title": "Capability Gaps"}
        )(self.get_capability_gaps_for_mcp)

        self.mcp.tool(
            name="list_capability_mappings",
            description="""List the registered capability mappings of a platform.

## Parameters
• platform: smartthings, tuya or lutron (required)
• include_deprecated: Include deprecated mappings (default true)

## Returns
Mapping records with native name, unified capability, conversion flag and notes""",
            title="List Capability Mappings",
            annotations={"title": "List Capability Mappings"}
        )(self.list_capability_mappings_for_mcp)

        self.mcp.tool(
            name="list_value_conversions",
            description="""List the registered attribute value conversions.

## Parameters
• platform: smartthings, tuya or lutron (optional)

## Returns
Platform, capability, attribute and description of each conversion

⚠️ **Note**: Attributes without a registered conversion are passed through unchanged""",
            title="List Value Conversions",
            annotations={"title": "List Value Conversions"}
        )(self.list_value_conversions_for_mcp)

        self.mcp.tool(
            name="convert_value",
            description="""Convert an attribute value between the unified and the platform format.

## Parameters
• platform: smartthings, tuya or lutron (required)
• capability: Unified capability, e.g. `dimmer` (required)
• attribute: Attribute name, e.g. `level`, `hue`, `color` (required)
• value: Value to convert (number, string or object)
• direction: `to_platform` or `from_platform` (default `to_platform`)

## Examples
• tuya / dimmer / level / 75 / to_platform → 750
• smartthings / color / hue / 50 / from_platform → 180
• tuya / color / color / {"h":180,"s":100,"v":100} / to_platform → '{"h":180,"s":100,"v":255}'

## Related Tools
• Use `list_value_conversions` to see which attributes are converted""",
            title="Convert Value",
            annotations={"title": "Convert Value"}
        )(self.convert_value_for_mcp)

    def get_unified_capability_for_mcp(self, platform: str, platform_capability: str) -> Dict[str, Any]:
        """MCP wrapper for forward capability lookup"""
        try:
            platform_enum = parse_platform(platform)
        except ValueError as e:
            return {"error": str(e), "help": "Use one of: smartthings, tuya, lutron"}

        mapping = self.capability_registry.get_mapping(platform_enum, platform_capability)
        if mapping is None:
            return {
                "found": False,
                "platform": platform_enum.value,
                "platform_capability": platform_capability,
                "known_capabilities": sorted(self.capability_registry.get_platform_capabilities(platform_enum))
            }

        return {
            "found": True,
            "unified_capability": mapping.unified_capability.value,
            "mapping": mapping.to_dict()
        }

    def get_platform_capability_for_mcp(self, platform: str, capability: str) -> Dict[str, Any]:
        """MCP wrapper for reverse capability lookup"""
        try:
            platform_enum = parse_platform(platform)
            capability_enum = parse_capability(capability)
        except ValueError as e:
            return {"error": str(e), "help": "Check platform and capability names with get_platform_coverage"}

        platform_capability = self.capability_registry.get_platform_capability(platform_enum, capability_enum)
        return {
            "found": platform_capability is not None,
            "platform": platform_enum.value,
            "capability": capability_enum.value,
            "platform_capability": platform_capability,
            "aliases": self.capability_registry.get_platform_aliases(platform_enum, capability_enum)
        }

    def check_platform_support_for_mcp(self, platform: str, capability: str) -> Dict[str, Any]:
        """MCP wrapper for platform support check"""
        try:
            platform_enum = parse_platform(platform)
            capability_enum = parse_capability(capability)
        except ValueError as e:
            return {"error": str(e), "help": "Check platform and capability names with get_platform_coverage"}

        return {
            "platform": platform_enum.value,
            "capability": capability_enum.value,
            "supported": self.capability_registry.is_platform_supported(platform_enum, capability_enum),
            "platform_capability": self.capability_registry.get_platform_capability(platform_enum, capability_enum)
        }

    def get_platform_coverage_for_mcp(self, platform: Optional[str] = None) -> Dict[str, Any]:
        """MCP wrapper for coverage summary"""
        if platform:
            try:
                return self.categorizer.get_coverage_summary(parse_platform(platform))
            except ValueError as e:
                return {"error": str(e), "help": "Use one of: smartthings, tuya, lutron"}

        return {
            "platforms": {
                p.value: self.categorizer.get_coverage_summary(p) for p in Platform
            }
        }

    def get_capability_gaps_for_mcp(self, platform: str) -> Dict[str, Any]:
        """MCP wrapper for gap analysis"""
        try:
            platform_enum = parse_platform(platform)
        except ValueError as e:
            return {"error": str(e), "help": "Use one of: smartthings, tuya, lutron"}

        return {
            "platform": platform_enum.value,
            "gaps": self.categorizer.get_capability_gaps(platform_enum),
            "recommendations": self.categorizer.get_recommendations(platform_enum)
        }

    def list_capability_mappings_for_mcp(self, platform: str, include_deprecated: bool = True) -> Dict[str, Any]:
        """MCP wrapper for mapping listing"""
        try:
            platform_enum = parse_platform(platform)
        except ValueError as e:
            return {"error": str(e), "help": "Use one of: smartthings, tuya, lutron"}

        mappings = [
            mapping.to_dict()
            for mapping in self.capability_registry.get_mappings(platform_enum)
            if include_deprecated or not mapping.deprecated
        ]
        return {
            "platform": platform_enum.value,
            "count": len(mappings),
            "mappings": mappings
        }

    def list_value_conversions_for_mcp(self, platform: Optional[str] = None) -> Dict[str, Any]:
        """MCP wrapper for conversion listing"""
        platform_enum = None
        if platform:
            try:
                platform_enum = parse_platform(platform)
            except ValueError as e:
                return {"error": str(e), "help": "Use one of: smartthings, tuya, lutron"}

        conversions: List[Dict[str, Any]] = [
            conversion.to_dict() for conversion in self.conversion_registry.get_conversions(platform_enum)
        ]
        return {"count": len(conversions), "conversions": conversions}

    def convert_value_for_mcp(self, platform: str, capability: str, attribute: str, value: Any,
                              direction: str = "to_platform") -> Dict[str, Any]:
        """MCP wrapper for value conversion with converter error reporting"""
        if direction not in CONVERSION_DIRECTIONS:
            return {
                "error": f"Invalid direction: '{direction}'",
                "help": "Direction must be 'to_platform' or 'from_platform'"
            }

        try:
            platform_enum = parse_platform(platform)
            capability_enum = parse_capability(capability)
        except ValueError as e:
            return {"error": str(e), "help": "Check platform and capability names with get_platform_coverage"}

        convert = (self.conversion_registry.to_platform if direction == "to_platform"
                   else self.conversion_registry.from_platform)

        try:
            converted = convert(platform_enum, capability_enum, attribute, value)
        except (ValueError, KeyError, TypeError, OverflowError) as e:
            logger.debug(f"Conversion failed for {platform_enum.value}:{capability_enum.value}:{attribute}: {e}")
            return {
                "error": f"Could not convert value {value!r}: {e}",
                "help": "Check the value format with list_value_conversions",
                "examples": ['{"h": 180, "s": 100, "v": 100} for tuya color', "0-100 for levels"]
            }

        return {
            "platform": platform_enum.value,
            "capability": capability_enum.value,
            "attribute": attribute,
            "direction": direction,
            "input": value,
            "value": converted,
            "converted": self.conversion_registry.has_conversion(platform_enum, capability_enum, attribute)
        }
