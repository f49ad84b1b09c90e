"""Unit tests for the capability categorizer"""

import pytest

from smartthings_mcp.services.unified_device import Platform, DeviceCapability
from smartthings_mcp.services.capability_registry import PlatformCapabilityMapping
from smartthings_mcp.helpers.capability_categorizer import CapabilityCategorizer, CapabilityCategory


@pytest.fixture
def categorizer(capability_registry):
    """Categorizer over the standard mapping table"""
    return CapabilityCategorizer(capability_registry)


class TestCapabilityCategorizer:
    """Test suite for CapabilityCategorizer"""

    # ========== CATEGORIZATION TESTS ==========

    @pytest.mark.parametrize("capability,expected", [
        (DeviceCapability.SWITCH, CapabilityCategory.CONTROL),
        (DeviceCapability.DOOR_CONTROL, CapabilityCategory.CONTROL),
        (DeviceCapability.BATTERY, CapabilityCategory.SENSOR),
        (DeviceCapability.SOUND_SENSOR, CapabilityCategory.SENSOR),
        (DeviceCapability.CAMERA, CapabilityCategory.COMPOSITE),
    ])
    def test_categorize_capability(self, categorizer, capability, expected):
        """Test single capability categorization"""
        assert categorizer.categorize_capability(capability) == expected

    def test_every_capability_has_category(self, categorizer):
        """Test the categorization covers the whole model"""
        for capability in DeviceCapability:
            assert isinstance(categorizer.categorize_capability(capability), CapabilityCategory)

    def test_categorize_capabilities(self, categorizer):
        """Test grouping returns sorted values and every category key"""
        result = categorizer.categorize_capabilities([
            DeviceCapability.LOCK, DeviceCapability.DIMMER, DeviceCapability.BATTERY
        ])

        assert result == {
            'control': ['dimmer', 'lock'],
            'sensor': ['battery'],
            'composite': []
        }

    # ========== COVERAGE TESTS ==========

    def test_smartthings_coverage(self, categorizer):
        """Test SmartThings covers all but occupancy"""
        summary = categorizer.get_coverage_summary(Platform.SMARTTHINGS)

        assert summary['platform'] == 'smartthings'
        assert summary['supported'] == 30
        assert summary['total'] == 31
        assert summary['coverage_percent'] == 96.8
        assert summary['missing'] == ['occupancySensor']
        assert summary['categories']['sensor'] == {'supported': 13, 'total': 14}

    def test_tuya_coverage(self, categorizer):
        """Test Tuya coverage counts"""
        summary = categorizer.get_coverage_summary(Platform.TUYA)

        assert summary['supported'] == 22
        assert summary['categories'] == {
            'control': {'supported': 10, 'total': 11},
            'sensor': {'supported': 8, 'total': 14},
            'composite': {'supported': 4, 'total': 6}
        }
        assert 'doorControl' in summary['missing']

    def test_lutron_coverage(self, categorizer):
        """Test Lutron coverage is limited"""
        summary = categorizer.get_coverage_summary(Platform.LUTRON)

        assert summary['supported'] == 4
        assert summary['coverage_percent'] == 12.9
        assert summary['categories']['composite'] == {'supported': 0, 'total': 6}
        assert 'color' in summary['missing']

    def test_coverage_of_empty_registry(self, empty_capability_registry):
        """Test an empty registry reports zero coverage"""
        summary = CapabilityCategorizer(empty_capability_registry).get_coverage_summary(Platform.TUYA)

        assert summary['supported'] == 0
        assert summary['coverage_percent'] == 0.0
        assert len(summary['missing']) == 31

    # ========== GAP TESTS ==========

    def test_lutron_gaps(self, categorizer):
        """Test Lutron gaps grouped by category"""
        gaps = categorizer.get_capability_gaps(Platform.LUTRON)

        assert gaps['control'] == [
            'alarm', 'color', 'colorTemperature', 'doorControl', 'lock', 'switch', 'thermostat', 'valve'
        ]
        assert 'occupancySensor' not in gaps['sensor']
        assert len(gaps['composite']) == 6

    def test_smartthings_gaps(self, categorizer):
        """Test SmartThings only misses occupancy"""
        assert categorizer.get_capability_gaps(Platform.SMARTTHINGS) == {
            'control': [],
            'sensor': ['occupancySensor'],
            'composite': []
        }

    # ========== MATRIX TESTS ==========

    def test_coverage_matrix(self, categorizer):
        """Test matrix lists supporting platforms per capability"""
        matrix = categorizer.get_coverage_matrix()

        assert len(matrix) == 31
        assert matrix['dimmer'] == ['smartthings', 'tuya', 'lutron']
        assert matrix['color'] == ['smartthings', 'tuya']
        assert matrix['occupancySensor'] == ['lutron']
        assert matrix['irBlaster'] == ['smartthings']

    def test_matrix_agrees_with_summary(self, categorizer):
        """Test matrix and per-platform summary count the same support"""
        matrix = categorizer.get_coverage_matrix()

        for platform in Platform:
            count = sum(1 for platforms in matrix.values() if platform.value in platforms)
            assert count == categorizer.get_coverage_summary(platform)['supported']

    # ========== RECOMMENDATION TESTS ==========

    def test_smartthings_recommendations(self, categorizer):
        """Test SmartThings recommendations mention occupancy and the deprecated mapping"""
        recommendations = categorizer.get_recommendations(Platform.SMARTTHINGS)

        assert recommendations == [
            'smartthings has no mapping for sensors: occupancySensor',
            'Mapping \'momentary\' is deprecated: Use "button" capability instead',
        ]

    def test_lutron_recommendations(self, categorizer):
        """Test Lutron recommendations include the missing composite category"""
        recommendations = categorizer.get_recommendations(Platform.LUTRON)

        assert recommendations[0].startswith('lutron cannot control: alarm, color')
        assert 'lutron supports no composite capabilities' in recommendations

    def test_no_recommendations_for_full_coverage(self, empty_capability_registry):
        """Test full coverage without deprecated mappings yields nothing"""
        for capability in DeviceCapability:
            empty_capability_registry.register(
                PlatformCapabilityMapping(Platform.TUYA, f"dp_{capability.value}", capability)
            )

        assert CapabilityCategorizer(empty_capability_registry).get_recommendations(Platform.TUYA) == []
