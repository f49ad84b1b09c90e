"""Helper modules for capability coverage analysis"""

from .capability_categorizer import CapabilityCategorizer, CapabilityCategory

__all__ = ['CapabilityCategorizer', 'CapabilityCategory']
