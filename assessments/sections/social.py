"""
Social category sub-sections.
"""

from .base import SectionSchema, array, nested, scalar, simple_section

SWACHH_WORKPLACE = simple_section("swachhWorkplace", "Swachh Workplace")

OCCUPATIONAL_SAFETY = SectionSchema("occupationalSafety", "Occupational Health & Safety", [
    scalar("ltifr"),
    scalar("safetyPolicy"),
    nested(
        "safetyTraining",
        array("programs"),
        scalar("coverage"),
    ),
    nested(
        "healthServices",
        scalar("medicalCheckups"),
        scalar("facilities"),
    ),
    nested(
        "emergencyResponse",
        scalar("plan"),
        scalar("drillFrequency"),
    ),
    scalar("certificate"),
    scalar("value", required=False),
])

HR_MANAGEMENT = SectionSchema("hrManagement", "HR Management", [
    scalar("humanRightsPolicy"),
    nested(
        "wagesBenefits",
        scalar("minimumWage"),
        scalar("benefits"),
    ),
    nested(
        "diversity",
        scalar("womenPercentage"),
        scalar("leadershipPercentage"),
    ),
    nested(
        "grievanceMechanism",
        scalar("available"),
        scalar("resolutionRate"),
    ),
    nested(
        "trainingDevelopment",
        scalar("hoursPerEmployee"),
        array("programs"),
    ),
    scalar("certificate"),
    scalar("value", required=False),
])

CSR_SOCIAL_RESPONSIBILITIES = SectionSchema("csrSocialResponsibilities", "CSR & Social Responsibilities", [
    scalar("csrPolicy"),
    array("csrProjects"),
    nested(
        "communityInvestment",
        scalar("amount"),
        array("initiatives"),
    ),
    nested(
        "employeeOutreach",
        scalar("volunteerHours"),
        scalar("programs"),
    ),
    nested(
        "socialOutcomes",
        scalar("beneficiaries"),
        scalar("impactReport"),
    ),
    scalar("certificate"),
    scalar("value", required=False),
])

SECTIONS = (
    SWACHH_WORKPLACE,
    OCCUPATIONAL_SAFETY,
    HR_MANAGEMENT,
    CSR_SOCIAL_RESPONSIBILITIES,
)
