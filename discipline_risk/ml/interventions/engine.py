from __future__ import annotations

from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence, Set, Tuple

from discipline_risk.ml.interventions.catalog import (
    OFFENSE_TO_REMEDIATION_CATEGORY,
    remediation_categories_for,
)
from discipline_risk.ml.interventions.schemas import Recommendation
from discipline_risk.schemas.discipline import (
    BehaviorHistory,
    IncidentRecord,
    RemediationDefinition,
    SubjectFlags,
)


ACTIVE_STATUSES = frozenset({"assigned", "active"})

TIER_MATCH_POINTS = 10
ADJACENT_TIER_POINTS = 5
CATEGORY_MATCH_POINTS = 8
EVIDENCE_POINTS = MappingProxyType({"evidence_based": 4, "promising": 2})
SPED_POINTS = 3


def preferred_tier(risk_level: str) -> int:
    return {"High": 3, "Medium": 2}.get(risk_level, 1)


def offense_categories(incidents: Sequence[IncidentRecord]) -> List[str]:
    """Distinct offense categories in first-seen order."""
    seen: List[str] = []
    for i in incidents:
        cat = i.offense.category if i.offense else None
        if cat and cat not in seen:
            seen.append(cat)
    return seen


def relevant_remediation_categories(
    categories: Sequence[str],
    mapping: Mapping[str, Tuple[str, ...]] = OFFENSE_TO_REMEDIATION_CATEGORY,
) -> Set[str]:
    out: Set[str] = set()
    for oc in categories:
        out.update(remediation_categories_for(oc, mapping))
    return out


def _score_candidate(
    item: RemediationDefinition,
    risk_level: str,
    tier: int,
    categories: Sequence[str],
    relevant: Set[str],
    subject: Optional[SubjectFlags],
    mapping: Mapping[str, Tuple[str, ...]],
) -> Tuple[int, List[str]]:
    priority = 0
    reasons: List[str] = []

    if item.tier == tier:
        priority += TIER_MATCH_POINTS
        reasons.append(f"Tier {item.tier} matches {risk_level.lower()} risk level")
    elif abs(item.tier - tier) == 1:
        priority += ADJACENT_TIER_POINTS

    if item.category in relevant:
        priority += CATEGORY_MATCH_POINTS
        # only offenses listed in the table are named, even when the fallback matched
        matching = [oc for oc in categories if item.category in mapping.get(oc, ())]
        if matching:
            reasons.append(f"Addresses {', '.join(matching).replace('_', ' ')} offenses")

    priority += EVIDENCE_POINTS.get(item.evidence_level or "", 0)
    if item.evidence_level == "evidence_based":
        reasons.append("Evidence-based intervention")

    if subject is not None and subject.is_sped and "sped" in item.target_population:
        priority += SPED_POINTS
        reasons.append("Designed for SPED students")

    return priority, reasons


def recommend_interventions(
    risk_level: str,
    history: Optional[BehaviorHistory] = None,
    catalog: Optional[Sequence[RemediationDefinition]] = None,
    subject: Optional[SubjectFlags] = None,
    max_items: int = 5,
    category_map: Mapping[str, Tuple[str, ...]] = OFFENSE_TO_REMEDIATION_CATEGORY,
) -> List[Recommendation]:
    """Rank catalog remediations for a student's risk level and offense history.

    Remediations already rated ineffective for the student, or currently
    assigned/active, are never suggested. Equal priorities keep catalog order.
    """
    if not catalog:
        return []
    history = history or BehaviorHistory()

    ineffective_ids = {a.remediation_id for a in history.assignments if a.effectiveness == "ineffective"}
    active_ids = {a.remediation_id for a in history.assignments if a.status in ACTIVE_STATUSES}

    tier = preferred_tier(risk_level)
    categories = offense_categories(history.incidents)
    relevant = relevant_remediation_categories(categories, category_map)

    scored: List[Tuple[int, RemediationDefinition, List[str]]] = []
    for item in catalog:
        if item.id in ineffective_ids or item.id in active_ids:
            continue
        priority, reasons = _score_candidate(item, risk_level, tier, categories, relevant, subject, category_map)
        scored.append((priority, item, reasons))

    # list.sort is stable, so catalog order breaks ties
    scored.sort(key=lambda s: s[0], reverse=True)

    out: List[Recommendation] = []
    for _, item, reasons in scored[:max_items]:
        out.append(
            Recommendation(
                id=item.id,
                name=item.name,
                tier=item.tier,
                category=item.category,
                reason=". ".join(reasons) if reasons else f"Tier {item.tier} intervention",
                description=item.description,
            )
        )
    return out
