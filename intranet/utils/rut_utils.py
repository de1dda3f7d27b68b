"""
RUT (Rol Único Tributario) normalization utilities.

Two RUTs are the same identity iff their normalized forms are equal:
"12.345.678-9", "12345678-9" and "123456789" all normalize to "123456789".
"""

import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

_RUT_NOISE = re.compile(r"[.\-\s]")


def normalize_rut(rut: Optional[str]) -> str:
    """
    Strip periods, hyphens and whitespace, then uppercase.

    Args:
        rut: RUT in any common format (e.g., "12.345.678-k")

    Returns:
        Normalized RUT (e.g., "12345678K"), or "" when empty
    """
    if rut is None:
        return ""
    return _RUT_NOISE.sub("", str(rut)).upper()


def format_rut(rut: Optional[str]) -> str:
    """
    Format a RUT as "body-dv" for storage in the CMS.

    Args:
        rut: RUT in any common format

    Returns:
        Formatted RUT (e.g., "12345678-9"), or "" when empty
    """
    clean = normalize_rut(rut)
    if len(clean) < 2:
        return clean
    return f"{clean[:-1]}-{clean[-1]}"


def ruts_match(left: Optional[str], right: Optional[str]) -> bool:
    """Compare two RUTs by their normalized forms. Empty values never match."""
    normalized_left = normalize_rut(left)
    return bool(normalized_left) and normalized_left == normalize_rut(right)


def rut_variants(rut: Optional[str]) -> list[str]:
    """
    Stored spellings a RUT may have in the CMS.

    Legacy records keep dots ("12.345.678-9"), newer ones use "body-dv".
    A "K" check digit may be stored lowercase, so both cases are listed.
    Returns the unique non-empty spellings, as given first.
    """
    clean = normalize_rut(rut)
    if not clean:
        return []

    variants = [str(rut).strip(), format_rut(clean), clean]
    body, dv = clean[:-1], clean[-1]
    if body.isdigit():
        variants.append(f"{int(body):,}".replace(",", ".") + f"-{dv}")
    if dv == "K":
        variants.extend([variant[:-1] + "k" for variant in variants[1:]])

    unique = []
    for variant in variants:
        if variant and variant not in unique:
            unique.append(variant)
    return unique
