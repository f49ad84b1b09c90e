"""Unified device model shared by every platform integration"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class Platform(Enum):
    """Supported device ecosystems"""
    SMARTTHINGS = "smartthings"
    TUYA = "tuya"
    LUTRON = "lutron"


class DeviceCapability(Enum):
    """Platform-agnostic device capabilities"""
    # Control capabilities
    SWITCH = "switch"
    DIMMER = "dimmer"
    COLOR = "color"
    COLOR_TEMPERATURE = "colorTemperature"
    THERMOSTAT = "thermostat"
    LOCK = "lock"
    SHADE = "shade"
    FAN = "fan"
    VALVE = "valve"
    ALARM = "alarm"
    DOOR_CONTROL = "doorControl"

    # Sensor capabilities
    TEMPERATURE_SENSOR = "temperatureSensor"
    HUMIDITY_SENSOR = "humiditySensor"
    MOTION_SENSOR = "motionSensor"
    CONTACT_SENSOR = "contactSensor"
    OCCUPANCY_SENSOR = "occupancySensor"
    ILLUMINANCE_SENSOR = "illuminanceSensor"
    BATTERY = "battery"
    AIR_QUALITY_SENSOR = "airQualitySensor"
    WATER_LEAK_SENSOR = "waterLeakSensor"
    SMOKE_DETECTOR = "smokeDetector"
    BUTTON = "button"
    PRESSURE_SENSOR = "pressureSensor"
    CO_DETECTOR = "coDetector"
    SOUND_SENSOR = "soundSensor"

    # Composite capabilities
    ENERGY_METER = "energyMeter"
    SPEAKER = "speaker"
    MEDIA_PLAYER = "mediaPlayer"
    CAMERA = "camera"
    ROBOT_VACUUM = "robotVacuum"
    IR_BLASTER = "irBlaster"


CONTROL_CAPABILITIES = frozenset([
    DeviceCapability.SWITCH,
    DeviceCapability.DIMMER,
    DeviceCapability.COLOR,
    DeviceCapability.COLOR_TEMPERATURE,
    DeviceCapability.THERMOSTAT,
    DeviceCapability.LOCK,
    DeviceCapability.SHADE,
    DeviceCapability.FAN,
    DeviceCapability.VALVE,
    DeviceCapability.ALARM,
    DeviceCapability.DOOR_CONTROL,
])

SENSOR_CAPABILITIES = frozenset([
    DeviceCapability.TEMPERATURE_SENSOR,
    DeviceCapability.HUMIDITY_SENSOR,
    DeviceCapability.MOTION_SENSOR,
    DeviceCapability.CONTACT_SENSOR,
    DeviceCapability.OCCUPANCY_SENSOR,
    DeviceCapability.ILLUMINANCE_SENSOR,
    DeviceCapability.BATTERY,
    DeviceCapability.AIR_QUALITY_SENSOR,
    DeviceCapability.WATER_LEAK_SENSOR,
    DeviceCapability.SMOKE_DETECTOR,
    DeviceCapability.BUTTON,
    DeviceCapability.PRESSURE_SENSOR,
    DeviceCapability.CO_DETECTOR,
    DeviceCapability.SOUND_SENSOR,
])

COMPOSITE_CAPABILITIES = frozenset([
    DeviceCapability.ENERGY_METER,
    DeviceCapability.SPEAKER,
    DeviceCapability.MEDIA_PLAYER,
    DeviceCapability.CAMERA,
    DeviceCapability.ROBOT_VACUUM,
    DeviceCapability.IR_BLASTER,
])

# Battery level and button presses do not make a device a sensor
MEASUREMENT_CAPABILITIES = SENSOR_CAPABILITIES - {DeviceCapability.BATTERY, DeviceCapability.BUTTON}


def is_platform(value: Any) -> bool:
    """Check whether value is a Platform or a Platform value string"""
    if isinstance(value, Platform):
        return True
    return isinstance(value, str) and value in [p.value for p in Platform]


def is_device_capability(value: Any) -> bool:
    """Check whether value is a DeviceCapability or a DeviceCapability value string"""
    if isinstance(value, DeviceCapability):
        return True
    return isinstance(value, str) and value in [c.value for c in DeviceCapability]


def parse_platform(value: Union[str, Platform]) -> Platform:
    """
    Convert a platform name to a Platform

    Args:
        value: Platform member, value ("smartthings") or member name ("SMARTTHINGS")

    Returns:
        Platform enum value

    Raises:
        ValueError: If the name does not match any platform
    """
    if isinstance(value, Platform):
        return value

    text = str(value).strip()
    for platform in Platform:
        if text == platform.value or text.upper() == platform.name:
            return platform

    raise ValueError(
        f"Invalid platform: '{value}'.\n"
        f"Valid platforms: {', '.join(p.value for p in Platform)}"
    )


def parse_capability(value: Union[str, DeviceCapability]) -> DeviceCapability:
    """
    Convert a capability name to a DeviceCapability

    Args:
        value: DeviceCapability member, value ("colorTemperature") or member name ("COLOR_TEMPERATURE")

    Returns:
        DeviceCapability enum value

    Raises:
        ValueError: If the name does not match any capability
    """
    if isinstance(value, DeviceCapability):
        return value

    text = str(value).strip()
    for capability in DeviceCapability:
        if text == capability.value or text.upper() == capability.name:
            return capability

    raise ValueError(
        f"Invalid capability: '{value}'.\n"
        f"Valid capabilities: {', '.join(c.value for c in DeviceCapability)}"
    )


# ========== UNIVERSAL DEVICE IDS ==========

def create_universal_device_id(platform: Platform, platform_device_id: str) -> str:
    """Build a universal device id of the form "platform:platformDeviceId" """
    return f"{platform.value}:{platform_device_id}"


def is_universal_device_id(value: str) -> bool:
    """Check that value carries a known platform prefix"""
    if not isinstance(value, str) or ':' not in value:
        return False

    prefix = value.split(':', 1)[0]
    return is_platform(prefix)


def parse_universal_device_id(universal_id: str) -> Tuple[Platform, str]:
    """
    Split a universal device id into its platform and platform device id

    Colons inside the platform device id are preserved.

    Args:
        universal_id: Universal device id, e.g. "smartthings:abc-123"

    Returns:
        Tuple of (Platform, platform device id)

    Raises:
        ValueError: If the format is invalid or the platform is unknown
    """
    if not isinstance(universal_id, str) or ':' not in universal_id:
        raise ValueError(
            f"Invalid universal device ID format: '{universal_id}'.\n"
            "Universal device IDs must be in format 'platform:deviceId'.\n"
            "Examples:\n"
            "  • 'smartthings:abc-123-def'\n"
            "  • 'tuya:bf1234567890abcdef'\n"
            "  • 'lutron:zone-1'"
        )

    prefix, platform_device_id = universal_id.split(':', 1)
    if not is_platform(prefix):
        raise ValueError(f"Unknown platform in device ID: '{prefix}'")

    return Platform(prefix), platform_device_id


# ========== DEVICE MODEL ==========

@dataclass
class CapabilityGroup:
    """Logical group of capabilities on a multi-component device"""
    id: str
    name: str
    capabilities: List[DeviceCapability] = field(default_factory=list)
    component_id: Optional[str] = None
    description: Optional[str] = None


@dataclass
class UnifiedDevice:
    """A device from any platform, described by what it can do"""
    id: str
    platform: Platform
    platform_device_id: str
    name: str
    capabilities: List[DeviceCapability] = field(default_factory=list)
    label: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    firmware_version: Optional[str] = None
    room: Optional[str] = None
    location: Optional[str] = None
    capability_groups: List[CapabilityGroup] = field(default_factory=list)
    online: bool = True
    last_seen: Optional[datetime] = None
    platform_specific: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(cls, platform: Platform, platform_device_id: str, name: str, **kwargs) -> 'UnifiedDevice':
        """Create a device, deriving its universal id from the platform"""
        return cls(
            id=create_universal_device_id(platform, platform_device_id),
            platform=platform,
            platform_device_id=platform_device_id,
            name=name,
            **kwargs
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert device to a JSON-friendly dictionary"""
        return {
            'id': self.id,
            'platform': self.platform.value,
            'platform_device_id': self.platform_device_id,
            'name': self.name,
            'label': self.label,
            'manufacturer': self.manufacturer,
            'model': self.model,
            'firmware_version': self.firmware_version,
            'room': self.room,
            'location': self.location,
            'capabilities': [c.value for c in self.capabilities],
            'capability_groups': [
                {
                    'id': group.id,
                    'name': group.name,
                    'capabilities': [c.value for c in group.capabilities],
                    'component_id': group.component_id,
                    'description': group.description
                }
                for group in self.capability_groups
            ],
            'online': self.online,
            'last_seen': self.last_seen.isoformat() if self.last_seen else None,
            'platform_specific': self.platform_specific
        }


def has_capability(device: UnifiedDevice, capability: DeviceCapability) -> bool:
    return capability in device.capabilities


def has_all_capabilities(device: UnifiedDevice, capabilities: List[DeviceCapability]) -> bool:
    return all(cap in device.capabilities for cap in capabilities)


def has_any_capability(device: UnifiedDevice, capabilities: List[DeviceCapability]) -> bool:
    return any(cap in device.capabilities for cap in capabilities)


def get_capability_groups(device: UnifiedDevice) -> List[CapabilityGroup]:
    return list(device.capability_groups)


def find_capability_group(device: UnifiedDevice, group_id: str) -> Optional[CapabilityGroup]:
    """Find a capability group by id"""
    for group in device.capability_groups:
        if group.id == group_id:
            return group
    return None


def get_group_capabilities(device: UnifiedDevice, group_id: str) -> List[DeviceCapability]:
    """Capabilities of a group, or an empty list when the group does not exist"""
    group = find_capability_group(device, group_id)
    return list(group.capabilities) if group else []


def is_sensor_device(device: UnifiedDevice) -> bool:
    """True if the device measures anything (battery and button alone do not count)"""
    return has_any_capability(device, list(MEASUREMENT_CAPABILITIES))


def is_controller_device(device: UnifiedDevice) -> bool:
    """True if the device has any control capability"""
    return has_any_capability(device, list(CONTROL_CAPABILITIES))
