"""
Company information. Stored flat on the record rather than as sub-sections,
so it is modelled as a single pseudo-section.
"""

from .base import SectionSchema, array, scalar

GENERAL_SECTION = "general"

COMPANY_INFO = SectionSchema(GENERAL_SECTION, "Company Information", [
    scalar("companyName"),
    scalar("registrationNumber"),
    scalar("establishmentYear"),
    scalar("companyAddress"),
    scalar("businessType"),
    scalar("registrationCertificate"),
    scalar("rolesDefinedClearly", required=False),
    scalar("value", required=False),
    array("organizationRoles", required=False),
    array("certificates", required=False),
], certificate_field="registrationCertificate")

SECTIONS = (COMPANY_INFO,)
