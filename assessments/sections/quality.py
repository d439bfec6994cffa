"""
Quality category sub-sections. All of them are single value/certificate pairs.
"""

from .base import simple_section

SECTIONS = (
    simple_section("deliveryPerformance", "Delivery Performance"),
    simple_section("qualityManagement", "Quality Management"),
    simple_section("processControl", "Process Control"),
    simple_section("materialManagement", "Material Management"),
    simple_section("maintenanceCalibration", "Maintenance & Calibration"),
    simple_section("technologyUpgradation", "Technology Upgradation"),
)
