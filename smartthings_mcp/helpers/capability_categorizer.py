"""
Capability Coverage Service
Groups unified capabilities into control, sensor and composite categories and
reports how much of the unified model each platform covers
"""

from typing import Dict, List, Any, Iterable, Optional
from enum import Enum

from ..services.unified_device import (
    Platform,
    DeviceCapability,
    CONTROL_CAPABILITIES,
    SENSOR_CAPABILITIES,
    COMPOSITE_CAPABILITIES,
)
from ..services.capability_registry import CapabilityRegistry, get_capability_registry


class CapabilityCategory(Enum):
    """Capability categories"""
    CONTROL = "control"
    SENSOR = "sensor"
    COMPOSITE = "composite"


class CapabilityCategorizer:
    """Categorize unified capabilities and measure per-platform coverage"""

    CATEGORY_MEMBERS = {
        CapabilityCategory.CONTROL: CONTROL_CAPABILITIES,
        CapabilityCategory.SENSOR: SENSOR_CAPABILITIES,
        CapabilityCategory.COMPOSITE: COMPOSITE_CAPABILITIES,
    }

    def __init__(self, registry: Optional[CapabilityRegistry] = None):
        """
        Initialize the capability categorizer

        Args:
            registry: Capability registry to analyse (defaults to the shared registry)
        """
        self.registry = registry or get_capability_registry()

    def categorize_capability(self, capability: DeviceCapability) -> CapabilityCategory:
        """
        Categorize a single unified capability

        Args:
            capability: Unified capability

        Returns:
            CapabilityCategory enum value
        """
        for category, members in self.CATEGORY_MEMBERS.items():
            if capability in members:
                return category
        # Unreachable while the three sets cover the whole enum
        raise ValueError(f"Capability '{capability.value}' has no category")

    def categorize_capabilities(self, capabilities: Iterable[DeviceCapability]) -> Dict[str, List[str]]:
        """
        Categorize a collection of capabilities

        Returns:
            Dictionary with categories as keys and sorted capability values as lists
        """
        categorized = {category.value: [] for category in CapabilityCategory}

        for capability in capabilities:
            categorized[self.categorize_capability(capability).value].append(capability.value)

        for values in categorized.values():
            values.sort()

        return categorized

    def get_coverage_summary(self, platform: Platform) -> Dict[str, Any]:
        """
        Get coverage statistics for a platform

        Coverage is the fraction of the unified capabilities reachable from at
        least one of the platform's registered mappings.
        """
        supported = self.registry.get_supported_capabilities(platform)
        total = len(DeviceCapability)
        missing = sorted(c.value for c in DeviceCapability if c not in supported)

        summary = {
            "platform": platform.value,
            "supported": len(supported),
            "total": total,
            "coverage_percent": round(len(supported) / total * 100, 1),
            "categories": {},
            "missing": missing
        }

        for category, members in self.CATEGORY_MEMBERS.items():
            summary["categories"][category.value] = {
                "supported": len(supported & members),
                "total": len(members)
            }

        return summary

    def get_capability_gaps(self, platform: Platform) -> Dict[str, List[str]]:
        """Unsupported capabilities of a platform, grouped by category"""
        supported = self.registry.get_supported_capabilities(platform)
        return self.categorize_capabilities(c for c in DeviceCapability if c not in supported)

    def get_coverage_matrix(self) -> Dict[str, List[str]]:
        """
        For every unified capability, the platforms that support it

        Returns:
            Dictionary keyed by capability value with lists of platform values
        """
        supported_by_platform = {
            platform: self.registry.get_supported_capabilities(platform)
            for platform in Platform
        }

        return {
            capability.value: [
                platform.value for platform in Platform
                if capability in supported_by_platform[platform]
            ]
            for capability in DeviceCapability
        }

    def get_recommendations(self, platform: Platform) -> List[str]:
        """
        Get notes about a platform's capability gaps

        Args:
            platform: Platform to analyse

        Returns:
            List of recommendations
        """
        recommendations = []
        gaps = self.get_capability_gaps(platform)

        if gaps[CapabilityCategory.CONTROL.value]:
            recommendations.append(
                f"{platform.value} cannot control: {', '.join(gaps[CapabilityCategory.CONTROL.value])}"
            )

        if gaps[CapabilityCategory.SENSOR.value]:
            recommendations.append(
                f"{platform.value} has no mapping for sensors: {', '.join(gaps[CapabilityCategory.SENSOR.value])}"
            )

        if len(gaps[CapabilityCategory.COMPOSITE.value]) == len(COMPOSITE_CAPABILITIES):
            recommendations.append(f"{platform.value} supports no composite capabilities")

        for mapping in self.registry.get_deprecated_mappings(platform):
            message = f"Mapping '{mapping.platform_capability}' is deprecated"
            if mapping.deprecation_message:
                message += f": {mapping.deprecation_message}"
            recommendations.append(message)

        return recommendations
