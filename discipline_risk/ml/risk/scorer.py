from __future__ import annotations

import math
from datetime import date, datetime
from typing import List, Optional, Sequence, Tuple

import numpy as np

from discipline_risk.ml.risk.config import (
    COVERAGE_GAP_POINTS,
    DAY,
    EXTENDED_PLACEMENT,
    FACTOR_COVERAGE,
    FACTOR_EFFECTIVENESS,
    FACTOR_FREQUENCY,
    FACTOR_PLACEMENTS,
    FACTOR_SCHOOL_YEAR,
    FACTOR_TREND,
    FREQUENCY_RULES,
    HIGH_SEVERITY,
    INEFFECTIVE,
    INEFFECTIVE_RULES,
    MOSTLY_EFFECTIVE_POINTS,
    NOT_RATED,
    NOTHING_TRIED_POINTS,
    PLACEMENT_POINTS,
    RISK_LEVELS,
    SCHOOL_YEAR_RULES,
    SCHOOL_YEAR_START,
    SEVERITY_WEIGHT,
    TREND_POINTS,
    TREND_TOLERANCE,
    UNRATED_POINTS,
)
from discipline_risk.schemas.discipline import (
    BehaviorHistory,
    IncidentRecord,
    RemediationAssignment,
    RiskAssessment,
    RiskFactor,
)
from discipline_risk.services.time_utils import parse_to_utc_aware, resolve_reference_time


def _plural(word: str, n: int) -> str:
    return word if n == 1 else f"{word}s"


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _factor(kind: Tuple[str, int], points: int, description: str) -> RiskFactor:
    label, max_points = kind
    return RiskFactor(label=label, points=points, max_points=max_points, description=description)


def default_school_year_start(reference_time: datetime) -> date:
    """August 1 of the academic year containing reference_time."""
    month, day = SCHOOL_YEAR_START
    year = reference_time.year if reference_time.month >= month else reference_time.year - 1
    return date(year, month, day)


def risk_level_from_score(score: int) -> str:
    for upper, name in RISK_LEVELS:
        if score <= upper:
            return name
    return RISK_LEVELS[-1][1]


def _placement_factor(incidents: Sequence[IncidentRecord]) -> RiskFactor:
    n = sum(1 for i in incidents if i.consequence_type == EXTENDED_PLACEMENT)
    points = next((pts for minimum, pts in PLACEMENT_POINTS if n >= minimum), 0)
    if n == 0:
        desc = "No prior DAEP placements"
    else:
        desc = f"{n} DAEP {_plural('placement', n)} on record"
    return _factor(FACTOR_PLACEMENTS, points, desc)


def _trend_factor(incidents: Sequence[IncidentRecord]) -> RiskFactor:
    dated = sorted(
        (i for i in incidents if i.incident_date and i.offense and i.offense.severity),
        key=lambda i: i.incident_date,
    )
    if len(dated) < 2:
        return _factor(FACTOR_TREND, 0, "Not enough incidents to assess trend")

    weights = [SEVERITY_WEIGHT[i.offense.severity] for i in dated]
    mid = len(weights) // 2
    older_avg = float(np.mean(weights[:mid]))
    recent_avg = float(np.mean(weights[mid:]))

    if recent_avg > older_avg + TREND_TOLERANCE:
        return _factor(FACTOR_TREND, TREND_POINTS["escalating"], "Offense severity is escalating over time")
    if recent_avg >= older_avg - TREND_TOLERANCE:
        return _factor(FACTOR_TREND, TREND_POINTS["stable"], "Offense severity is stable")
    return _factor(FACTOR_TREND, TREND_POINTS["de-escalating"], "Offense severity is de-escalating")


def _frequency_factor(incidents: Sequence[IncidentRecord], reference_time: datetime) -> RiskFactor:
    elapsed = [
        (reference_time - parse_to_utc_aware(i.incident_date)) / DAY
        for i in incidents
        if i.incident_date
    ]
    for window, minimum, points in FREQUENCY_RULES:
        n = sum(1 for days in elapsed if days <= window)
        if n >= minimum:
            return _factor(FACTOR_FREQUENCY, points, f"{n} {_plural('incident', n)} in the last {window} days")
    return _factor(FACTOR_FREQUENCY, 0, "No recent incidents")


def _school_year_factor(incidents: Sequence[IncidentRecord], school_year_start: date) -> RiskFactor:
    n = sum(1 for i in incidents if i.incident_date and i.incident_date >= school_year_start)
    points = next((pts for minimum, pts in SCHOOL_YEAR_RULES if n >= minimum), 0)
    return _factor(FACTOR_SCHOOL_YEAR, points, f"{n} {_plural('incident', n)} this school year")


def _effectiveness_factor(assignments: Sequence[RemediationAssignment]) -> RiskFactor:
    rated = [a for a in assignments if a.effectiveness and a.effectiveness != NOT_RATED]
    if not rated:
        if not assignments:
            return _factor(FACTOR_EFFECTIVENESS, NOTHING_TRIED_POINTS, "No interventions have been tried")
        return _factor(FACTOR_EFFECTIVENESS, UNRATED_POINTS, "Interventions assigned but not yet rated")

    ineffective = sum(1 for a in rated if a.effectiveness == INEFFECTIVE)
    pct = ineffective / len(rated)
    for minimum, points in INEFFECTIVE_RULES:
        if pct >= minimum:
            return _factor(
                FACTOR_EFFECTIVENESS,
                points,
                f"{_round_half_up(pct * 100)}% of rated interventions were ineffective",
            )
    return _factor(FACTOR_EFFECTIVENESS, MOSTLY_EFFECTIVE_POINTS, "Most interventions have been effective")


def _coverage_factor(
    incidents: Sequence[IncidentRecord], assignments: Sequence[RemediationAssignment]
) -> RiskFactor:
    covered = {a.incident_id for a in assignments if a.incident_id}
    uncovered = [
        i
        for i in incidents
        if i.offense and i.offense.severity in HIGH_SEVERITY and i.id not in covered
    ]
    n = len(uncovered)
    if n == 0:
        return _factor(FACTOR_COVERAGE, 0, "All high-severity offenses have intervention coverage")
    return _factor(
        FACTOR_COVERAGE,
        COVERAGE_GAP_POINTS,
        f"{n} high-severity {_plural('offense', n)} with no intervention assigned",
    )


def score_risk(
    history: BehaviorHistory,
    reference_time: Optional[datetime] = None,
    school_year_start: Optional[date] = None,
) -> RiskAssessment:
    """Score a student's behavioral history into a 0-100 risk assessment.

    Six capped factors are always reported, in a fixed order, and the score is
    their exact sum. reference_time defaults to now (UTC); school_year_start
    defaults to August 1 of the academic year containing reference_time.
    """
    now = resolve_reference_time(reference_time)
    if school_year_start is None:
        school_year_start = default_school_year_start(now)
    elif isinstance(school_year_start, datetime):
        school_year_start = school_year_start.date()

    incidents = history.incidents
    assignments = history.assignments

    factors: List[RiskFactor] = [
        _placement_factor(incidents),
        _trend_factor(incidents),
        _frequency_factor(incidents, now),
        _school_year_factor(incidents, school_year_start),
        _effectiveness_factor(assignments),
        _coverage_factor(incidents, assignments),
    ]
    score = sum(f.points for f in factors)
    return RiskAssessment(score=score, risk_level=risk_level_from_score(score), factors=factors)
