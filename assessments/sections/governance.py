"""
Governance category sub-sections.
"""

from .base import simple_section

SECTIONS = (
    simple_section("boardOversight", "Board Oversight"),
    simple_section("ethicsCompliance", "Ethics & Compliance"),
    simple_section("riskManagement", "Risk Management"),
    simple_section("dataPrivacy", "Data Privacy & Security"),
    simple_section("policyFramework", "Policy Framework"),
)
