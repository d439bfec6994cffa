"""
Environment category sub-sections.
"""

from .base import SectionSchema, array, nested, scalar, simple_section

RENEWABLE_ENERGY = simple_section("renewableEnergy", "Renewable Energy")

WATER_CONSUMPTION = SectionSchema("waterConsumption", "Water Consumption", [
    scalar("baseline"),
    scalar("targets"),
    scalar("progress"),
    scalar("certificate"),
    scalar("value", required=False),
])

RAINWATER_HARVESTING = SectionSchema("rainwaterHarvesting", "Rainwater Harvesting", [
    scalar("volume"),
    scalar("infrastructure"),
    scalar("rechargeCapacity"),
    scalar("certificate"),
    scalar("value", required=False),
])

EMISSION_CONTROL = SectionSchema("emissionControl", "Emission Control", [
    scalar("chemicalManagement"),
    array("chemicalList"),
    array("disposalMethods"),
    nested(
        "scopeEmissions",
        scalar("scope1"),
        scalar("scope2"),
        scalar("scope3"),
    ),
    scalar("certificate"),
    scalar("value", required=False),
])

RESOURCE_CONSERVATION = SectionSchema("resourceConservation", "Resource Conservation", [
    scalar("wasteDiversion"),
    scalar("wasteManagement"),
    scalar("recyclingRate"),
    array("certifications"),
    scalar("certificate"),
    scalar("value", required=False),
])

SECTIONS = (
    RENEWABLE_ENERGY,
    WATER_CONSUMPTION,
    RAINWATER_HARVESTING,
    EMISSION_CONTROL,
    RESOURCE_CONSERVATION,
)
