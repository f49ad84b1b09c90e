"""Capability registry and value conversion for platform integrations

Maps platform-specific capability names (SmartThings, Tuya, Lutron) to the
unified DeviceCapability model, and converts attribute values between the
platform-native and the unified representation.

Both registries are plain in-memory maps. They are populated once, before any
concurrent read access, and are read-only afterwards; `clear()` exists for
test isolation only.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from .unified_device import Platform, DeviceCapability

logger = logging.getLogger(__name__)

ValueConverter = Callable[[Any], Any]


@dataclass(frozen=True)
class PlatformCapabilityMapping:
    """Association between a platform-native capability name and a unified capability"""
    platform: Platform
    platform_capability: str
    unified_capability: DeviceCapability
    conversion_required: bool = False
    notes: Optional[str] = None
    deprecated: bool = False
    deprecation_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert mapping to dictionary"""
        return {
            'platform': self.platform.value,
            'platform_capability': self.platform_capability,
            'unified_capability': self.unified_capability.value,
            'conversion_required': self.conversion_required,
            'notes': self.notes,
            'deprecated': self.deprecated,
            'deprecation_message': self.deprecation_message
        }


@dataclass(frozen=True)
class ValueConversionMapping:
    """Pair of pure functions converting one attribute between unified and platform format"""
    platform: Platform
    capability: DeviceCapability
    attribute: str
    to_platform: ValueConverter
    from_platform: ValueConverter
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert mapping to dictionary (converter functions are omitted)"""
        return {
            'platform': self.platform.value,
            'capability': self.capability.value,
            'attribute': self.attribute,
            'description': self.description
        }


class CapabilityRegistry:
    """
    Bidirectional map between platform-native capability names and unified capabilities

    Forward entries are keyed by (platform, platform capability name), reverse
    entries by (platform, unified capability). Registration never validates:
    re-registering a forward key replaces the previous mapping, and when several
    platform names alias the same unified capability the reverse lookup keeps
    only the most recently registered one. Use `get_platform_aliases` to see
    all of them.

    Lookup misses return None (or False / an empty set); nothing here raises.
    """

    def __init__(self):
        self._mappings: Dict[Tuple[Platform, str], PlatformCapabilityMapping] = {}
        self._reverse_mappings: Dict[Tuple[Platform, DeviceCapability], str] = {}

    def register(self, mapping: PlatformCapabilityMapping) -> None:
        """
        Register a platform capability mapping

        Args:
            mapping: Mapping to register (last write wins on duplicate keys)
        """
        key = (mapping.platform, mapping.platform_capability)
        self._mappings[key] = mapping
        self._reverse_mappings[(mapping.platform, mapping.unified_capability)] = mapping.platform_capability

        if mapping.deprecated:
            logger.warning(
                f"Deprecated capability registered: {mapping.platform.value}:{mapping.platform_capability}"
                + (f" - {mapping.deprecation_message}" if mapping.deprecation_message else "")
            )

    def get_unified_capability(self, platform: Platform, platform_capability: str) -> Optional[DeviceCapability]:
        """Unified capability for a platform-native name, or None if unknown"""
        mapping = self._mappings.get((platform, platform_capability))
        return mapping.unified_capability if mapping else None

    def get_platform_capability(self, platform: Platform, capability: DeviceCapability) -> Optional[str]:
        """
        Platform-native name for a unified capability

        Returns:
            The most recently registered alias, or None if the platform has none
        """
        return self._reverse_mappings.get((platform, capability))

    def is_platform_supported(self, platform: Platform, capability: DeviceCapability) -> bool:
        return (platform, capability) in self._reverse_mappings

    def get_supported_capabilities(self, platform: Platform) -> Set[DeviceCapability]:
        """All unified capabilities reachable from the platform's forward entries"""
        return {
            mapping.unified_capability
            for (mapping_platform, _), mapping in self._mappings.items()
            if mapping_platform == platform
        }

    def get_platform_capabilities(self, platform: Platform) -> Set[str]:
        """All platform-native names registered for the platform"""
        return {name for (mapping_platform, name) in self._mappings if mapping_platform == platform}

    def get_platform_aliases(self, platform: Platform, capability: DeviceCapability) -> List[str]:
        """Every platform-native name currently mapped to the capability, in registration order"""
        return [
            mapping.platform_capability
            for (mapping_platform, _), mapping in self._mappings.items()
            if mapping_platform == platform and mapping.unified_capability == capability
        ]

    def get_mapping(self, platform: Platform, platform_capability: str) -> Optional[PlatformCapabilityMapping]:
        return self._mappings.get((platform, platform_capability))

    def get_mappings(self, platform: Optional[Platform] = None) -> List[PlatformCapabilityMapping]:
        """All mapping records, optionally restricted to one platform"""
        return [
            mapping for mapping in self._mappings.values()
            if platform is None or mapping.platform == platform
        ]

    def get_deprecated_mappings(self, platform: Optional[Platform] = None) -> List[PlatformCapabilityMapping]:
        return [mapping for mapping in self.get_mappings(platform) if mapping.deprecated]

    def clear(self) -> None:
        """Remove every mapping (test isolation only)"""
        self._mappings.clear()
        self._reverse_mappings.clear()

    def get_mapping_count(self) -> int:
        return len(self._mappings)


class ValueConversionRegistry:
    """
    Attribute value converters keyed by (platform, capability, attribute)

    Conversions fall back to identity when nothing is registered, so callers
    never need to check `has_conversion` first. Errors raised by a converter
    (for example a malformed encoded color) propagate unchanged.
    """

    def __init__(self):
        self._conversions: Dict[Tuple[Platform, DeviceCapability, str], ValueConversionMapping] = {}

    def register(self, conversion: ValueConversionMapping) -> None:
        key = (conversion.platform, conversion.capability, conversion.attribute)
        self._conversions[key] = conversion

    def to_platform(self, platform: Platform, capability: DeviceCapability, attribute: str, value: Any) -> Any:
        """
        Convert a unified value to the platform format

        Args:
            platform: Target platform
            capability: Capability the attribute belongs to
            attribute: Attribute name, e.g. "level" or "hue"
            value: Value in unified format

        Returns:
            Platform value, or the input unchanged if no conversion is registered
        """
        conversion = self._conversions.get((platform, capability, attribute))
        if conversion is None:
            return value
        return conversion.to_platform(value)

    def from_platform(self, platform: Platform, capability: DeviceCapability, attribute: str, value: Any) -> Any:
        """
        Convert a platform value to the unified format

        Args:
            platform: Source platform
            capability: Capability the attribute belongs to
            attribute: Attribute name, e.g. "level" or "hue"
            value: Value in platform format

        Returns:
            Unified value, or the input unchanged if no conversion is registered
        """
        conversion = self._conversions.get((platform, capability, attribute))
        if conversion is None:
            return value
        return conversion.from_platform(value)

    def has_conversion(self, platform: Platform, capability: DeviceCapability, attribute: str) -> bool:
        return (platform, capability, attribute) in self._conversions

    def get_conversion(self, platform: Platform, capability: DeviceCapability,
                       attribute: str) -> Optional[ValueConversionMapping]:
        return self._conversions.get((platform, capability, attribute))

    def get_conversions(self, platform: Optional[Platform] = None) -> List[ValueConversionMapping]:
        """All conversion records, optionally restricted to one platform"""
        return [
            conversion for conversion in self._conversions.values()
            if platform is None or conversion.platform == platform
        ]

    def clear(self) -> None:
        """Remove every conversion (test isolation only)"""
        self._conversions.clear()

    def get_conversion_count(self) -> int:
        return len(self._conversions)


# ==================== Value Converters ====================
#
# Rounding uses the built-in round(), i.e. round half to even:
# 125 -> 12.5 -> 12 and 135 -> 13.5 -> 14. None of these conversions is an
# exact round trip for every input.

TUYA_LEVEL_SCALE = 10       # unified 0-100 <-> Tuya 0-1000
HUE_PERCENT_FACTOR = 3.6    # unified 0-360 degrees <-> SmartThings 0-100 %
TUYA_VALUE_FACTOR = 2.55    # unified 0-100 <-> Tuya HSV value 0-255


def tuya_level_to_platform(value: float) -> int:
    return round(value * TUYA_LEVEL_SCALE)


def tuya_level_from_platform(value: float) -> int:
    return round(value / TUYA_LEVEL_SCALE)


def hue_degrees_to_percent(value: float) -> int:
    return round(value / HUE_PERCENT_FACTOR)


def hue_percent_to_degrees(value: float) -> int:
    return round(value * HUE_PERCENT_FACTOR)


def hsv_to_tuya_color(value: Dict[str, Any]) -> str:
    """
    Encode a unified HSV color as a Tuya colour_data string

    Args:
        value: {"h": 0-360, "s": 0-100, "v": 0-100}

    Returns:
        Compact JSON string {"h": 0-360, "s": 0-100, "v": 0-255}
    """
    return json.dumps(
        {
            'h': round(value['h']),
            's': round(value['s']),
            'v': round(value['v'] * TUYA_VALUE_FACTOR)
        },
        separators=(',', ':')
    )


def tuya_color_to_hsv(value: str) -> Dict[str, Any]:
    """
    Decode a Tuya colour_data string into a unified HSV color

    Raises:
        json.JSONDecodeError: If the string is not valid JSON
        KeyError: If a component is missing
    """
    parsed = json.loads(value)
    return {
        'h': parsed['h'],
        's': parsed['s'],
        'v': round(parsed['v'] / TUYA_VALUE_FACTOR)
    }


def lutron_level_to_platform(value: float) -> float:
    # Fixed two-decimal representation; no value change for integer input
    return round(float(value), 2)


def lutron_level_from_platform(value: float) -> int:
    return round(value)


# ==================== Standard Mapping Table ====================

def _smartthings_mappings() -> List[PlatformCapabilityMapping]:
    """SmartThings capabilities (all but occupancy)"""
    st = Platform.SMARTTHINGS
    cap = DeviceCapability
    return [
        # Control
        PlatformCapabilityMapping(st, 'switch', cap.SWITCH),
        PlatformCapabilityMapping(st, 'switchLevel', cap.DIMMER),
        PlatformCapabilityMapping(st, 'colorControl', cap.COLOR, True, 'Hue: 0-100 (%) → 0-360 (degrees)'),
        PlatformCapabilityMapping(st, 'colorTemperature', cap.COLOR_TEMPERATURE),
        PlatformCapabilityMapping(st, 'thermostat', cap.THERMOSTAT, notes='Composite of 8 SmartThings capabilities'),
        PlatformCapabilityMapping(st, 'lock', cap.LOCK),
        PlatformCapabilityMapping(st, 'windowShade', cap.SHADE),
        PlatformCapabilityMapping(st, 'fanSpeed', cap.FAN),
        PlatformCapabilityMapping(st, 'valve', cap.VALVE),
        PlatformCapabilityMapping(st, 'alarm', cap.ALARM),
        PlatformCapabilityMapping(st, 'doorControl', cap.DOOR_CONTROL),
        PlatformCapabilityMapping(st, 'garageDoorControl', cap.DOOR_CONTROL, notes='Alias for doorControl'),
        # Sensors
        PlatformCapabilityMapping(st, 'temperatureMeasurement', cap.TEMPERATURE_SENSOR),
        PlatformCapabilityMapping(st, 'relativeHumidityMeasurement', cap.HUMIDITY_SENSOR),
        PlatformCapabilityMapping(st, 'motionSensor', cap.MOTION_SENSOR),
        PlatformCapabilityMapping(st, 'contactSensor', cap.CONTACT_SENSOR),
        PlatformCapabilityMapping(st, 'illuminanceMeasurement', cap.ILLUMINANCE_SENSOR),
        PlatformCapabilityMapping(st, 'battery', cap.BATTERY),
        PlatformCapabilityMapping(st, 'airQualitySensor', cap.AIR_QUALITY_SENSOR),
        PlatformCapabilityMapping(st, 'waterSensor', cap.WATER_LEAK_SENSOR),
        PlatformCapabilityMapping(st, 'smokeDetector', cap.SMOKE_DETECTOR),
        PlatformCapabilityMapping(st, 'button', cap.BUTTON),
        PlatformCapabilityMapping(st, 'pressureMeasurement', cap.PRESSURE_SENSOR),
        PlatformCapabilityMapping(st, 'carbonMonoxideDetector', cap.CO_DETECTOR),
        PlatformCapabilityMapping(st, 'soundPressureLevel', cap.SOUND_SENSOR),
        # Composite
        PlatformCapabilityMapping(st, 'powerMeter', cap.ENERGY_METER, notes='Composite with energyMeter'),
        PlatformCapabilityMapping(st, 'audioVolume', cap.SPEAKER),
        PlatformCapabilityMapping(st, 'mediaPlayback', cap.MEDIA_PLAYER),
        PlatformCapabilityMapping(st, 'videoStream', cap.CAMERA),
        PlatformCapabilityMapping(st, 'robotCleanerMovement', cap.ROBOT_VACUUM),
        PlatformCapabilityMapping(st, 'infraredLevel', cap.IR_BLASTER),
        # Deprecated
        PlatformCapabilityMapping(
            st, 'momentary', cap.BUTTON,
            deprecated=True, deprecation_message='Use "button" capability instead'
        ),
    ]


def _tuya_mappings() -> List[PlatformCapabilityMapping]:
    """Tuya function codes"""
    tuya = Platform.TUYA
    cap = DeviceCapability
    return [
        # Control
        PlatformCapabilityMapping(tuya, 'switch_led', cap.SWITCH),
        PlatformCapabilityMapping(tuya, 'bright_value', cap.DIMMER, True, '0-1000 → 0-100'),
        PlatformCapabilityMapping(tuya, 'colour_data', cap.COLOR, True, 'HSV JSON string → HSV object'),
        PlatformCapabilityMapping(tuya, 'temp_value', cap.COLOR_TEMPERATURE, True, 'Device-specific range → Kelvin'),
        PlatformCapabilityMapping(tuya, 'temp_set', cap.THERMOSTAT),
        PlatformCapabilityMapping(tuya, 'lock_motor_state', cap.LOCK, True, 'Map Tuya lock states'),
        PlatformCapabilityMapping(tuya, 'position', cap.SHADE),
        PlatformCapabilityMapping(tuya, 'fan_speed', cap.FAN),
        PlatformCapabilityMapping(tuya, 'switch_1', cap.VALVE),
        PlatformCapabilityMapping(tuya, 'alarm_switch', cap.ALARM),
        # Sensors
        PlatformCapabilityMapping(tuya, 'temp_current', cap.TEMPERATURE_SENSOR, True, 'C/F conversion may be needed'),
        PlatformCapabilityMapping(tuya, 'humidity_value', cap.HUMIDITY_SENSOR),
        PlatformCapabilityMapping(tuya, 'pir', cap.MOTION_SENSOR, True, 'Map pir/none to active/inactive'),
        PlatformCapabilityMapping(tuya, 'doorcontact_state', cap.CONTACT_SENSOR, True, 'Map boolean to open/closed'),
        PlatformCapabilityMapping(tuya, 'battery_percentage', cap.BATTERY),
        PlatformCapabilityMapping(tuya, 'pm25_value', cap.AIR_QUALITY_SENSOR),
        PlatformCapabilityMapping(tuya, 'watersensor_state', cap.WATER_LEAK_SENSOR, True, 'Map Tuya states to dry/wet'),
        PlatformCapabilityMapping(tuya, 'smoke_sensor_status', cap.SMOKE_DETECTOR, True, 'Map Tuya states'),
        # Composite
        PlatformCapabilityMapping(tuya, 'cur_power', cap.ENERGY_METER),
        PlatformCapabilityMapping(tuya, 'volume', cap.SPEAKER),
        PlatformCapabilityMapping(tuya, 'work_state', cap.MEDIA_PLAYER, True, 'Map work_state enum'),
        PlatformCapabilityMapping(tuya, 'basic_device_status', cap.CAMERA, True, 'Complex mapping'),
    ]


def _lutron_mappings() -> List[PlatformCapabilityMapping]:
    """Lutron: lighting and shading only"""
    lutron = Platform.LUTRON
    cap = DeviceCapability
    return [
        # OUTPUT is registered twice; the forward entry ends up as DIMMER while
        # the reverse SWITCH entry stays in place.
        PlatformCapabilityMapping(lutron, 'OUTPUT', cap.SWITCH, True, 'Binary 0% or 100% only'),
        PlatformCapabilityMapping(lutron, 'OUTPUT', cap.DIMMER, True, 'Round 0.00-100.00 to 0-100'),
        PlatformCapabilityMapping(lutron, 'POSITION', cap.SHADE),
        PlatformCapabilityMapping(lutron, 'TILT', cap.SHADE, notes='Shade tilt control'),
        PlatformCapabilityMapping(lutron, 'OCCUPANCY', cap.OCCUPANCY_SENSOR, True, 'Map occupied/unoccupied'),
        PlatformCapabilityMapping(lutron, 'FAN_SPEED', cap.FAN, notes='RadioRA3 only'),
    ]


def _standard_conversions() -> List[ValueConversionMapping]:
    # Saturation shares 0-100 everywhere and is deliberately not registered
    return [
        ValueConversionMapping(
            Platform.TUYA, DeviceCapability.DIMMER, 'level',
            tuya_level_to_platform, tuya_level_from_platform,
            'Tuya brightness scale: 0-1000 ↔ 0-100'
        ),
        ValueConversionMapping(
            Platform.SMARTTHINGS, DeviceCapability.COLOR, 'hue',
            hue_degrees_to_percent, hue_percent_to_degrees,
            'SmartThings hue: 0-100% ↔ 0-360 degrees'
        ),
        ValueConversionMapping(
            Platform.TUYA, DeviceCapability.COLOR, 'color',
            hsv_to_tuya_color, tuya_color_to_hsv,
            'Tuya color: HSV JSON string ↔ HSV object'
        ),
        ValueConversionMapping(
            Platform.LUTRON, DeviceCapability.DIMMER, 'level',
            lutron_level_to_platform, lutron_level_from_platform,
            'Lutron output: Round 0.00-100.00 to 0-100'
        ),
    ]


def initialize_capability_mappings(registry: CapabilityRegistry) -> CapabilityRegistry:
    """
    Register the standard SmartThings, Tuya and Lutron capability mappings

    Registration order is fixed, so calling this again (with or without a
    prior `clear()`) yields the same registry contents.

    Args:
        registry: Registry to populate

    Returns:
        The same registry, for chaining
    """
    for mapping in _smartthings_mappings() + _tuya_mappings() + _lutron_mappings():
        registry.register(mapping)

    logger.debug(f"Registered {registry.get_mapping_count()} platform capability mappings")
    return registry


def initialize_value_conversions(registry: ValueConversionRegistry) -> ValueConversionRegistry:
    """Register the standard value conversions"""
    for conversion in _standard_conversions():
        registry.register(conversion)

    logger.debug(f"Registered {registry.get_conversion_count()} value conversions")
    return registry


def create_capability_registry() -> CapabilityRegistry:
    return initialize_capability_mappings(CapabilityRegistry())


def create_value_conversion_registry() -> ValueConversionRegistry:
    return initialize_value_conversions(ValueConversionRegistry())


# Process-wide instances (created on first use)
_capability_registry: Optional[CapabilityRegistry] = None
_conversion_registry: Optional[ValueConversionRegistry] = None


def get_capability_registry() -> CapabilityRegistry:
    """Get or initialize the shared capability registry"""
    global _capability_registry

    if _capability_registry is None:
        _capability_registry = create_capability_registry()
        logger.info(f"Capability registry initialized with {_capability_registry.get_mapping_count()} mappings")

    return _capability_registry


def get_value_conversion_registry() -> ValueConversionRegistry:
    """Get or initialize the shared value conversion registry"""
    global _conversion_registry

    if _conversion_registry is None:
        _conversion_registry = create_value_conversion_registry()
        logger.info(f"Value conversion registry initialized with {_conversion_registry.get_conversion_count()} conversions")

    return _conversion_registry
