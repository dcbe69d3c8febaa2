from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Tuple


# Offense category -> remediation categories that address it
OFFENSE_TO_REMEDIATION_CATEGORY: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "fighting": ("behavioral", "social_emotional", "restorative"),
        "drugs_alcohol": ("behavioral", "social_emotional", "mentoring"),
        "weapons": ("behavioral", "social_emotional"),
        "harassment_bullying": ("social_emotional", "restorative", "mentoring"),
        "truancy": ("academic", "mentoring"),
        "defiance": ("behavioral", "restorative", "mentoring"),
        "theft": ("restorative", "behavioral"),
        "vandalism": ("restorative", "behavioral"),
        "sexual_offense": ("behavioral", "social_emotional"),
        "gang_related": ("mentoring", "social_emotional", "behavioral"),
        "other": ("behavioral", "mentoring"),
    }
)

# Used for offense categories missing from the table
FALLBACK_REMEDIATION_CATEGORIES: Tuple[str, ...] = ("behavioral",)


def remediation_categories_for(
    offense_category: str,
    mapping: Mapping[str, Tuple[str, ...]] = OFFENSE_TO_REMEDIATION_CATEGORY,
) -> Tuple[str, ...]:
    return mapping.get(offense_category, FALLBACK_REMEDIATION_CATEGORIES)
