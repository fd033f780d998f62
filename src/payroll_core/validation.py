"""Identifier validation for employee and employer records."""

from __future__ import annotations

import re

from payroll_core.errors import InvalidInput

_SSN = re.compile(r"^(\d{3})-(\d{2})-(\d{4})$")
_EIN = re.compile(r"^\d{2}-\d{7}$")


def validate_ssn(ssn: str) -> str:
    """Validate an SSN in XXX-XX-XXXX form and return it.

    No group may be all zeros, and the area number cannot be 666 or 900-999.
    """
    match = _SSN.match(ssn or "")
    if match is None:
        raise InvalidInput("Invalid SSN format", field="ssn")

    area, group, serial = match.groups()
    if area == "000" or group == "00" or serial == "0000":
        raise InvalidInput("Invalid SSN: zero group", field="ssn")
    if area == "666" or int(area) >= 900:
        raise InvalidInput("Invalid SSN: reserved area number", field="ssn")
    return ssn


def validate_ein(ein: str) -> str:
    """Validate an EIN in XX-XXXXXXX form and return it."""
    if not _EIN.match(ein or ""):
        raise InvalidInput("Invalid EIN format", field="ein")
    return ein
