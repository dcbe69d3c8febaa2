"""Shared fixtures and record builders for the risk engine tests."""

from datetime import date, datetime, timedelta, timezone
from itertools import count

import pytest

from discipline_risk.schemas.discipline import (
    IncidentRecord,
    OffenseInfo,
    RemediationAssignment,
    RemediationDefinition,
)

# Mid-day so that "n days ago" dates sit at n + 0.5 elapsed days
REFERENCE_TIME = datetime(2025, 3, 15, 12, 0, tzinfo=timezone.utc)
REFERENCE_DATE = REFERENCE_TIME.date()

_ids = count(1)


def days_ago(n: int) -> date:
    return REFERENCE_DATE - timedelta(days=n)


def make_incident(
    on=None,
    severity=None,
    category=None,
    consequence_type=None,
    incident_id=None,
    student_id=None,
):
    offense = None
    if severity is not None or category is not None:
        offense = OffenseInfo(severity=severity, category=category)
    return IncidentRecord(
        id=incident_id or f"inc-{next(_ids)}",
        student_id=student_id,
        incident_date=on,
        offense=offense,
        consequence_type=consequence_type,
        status="completed",
    )


def make_assignment(
    remediation_id="rem-1",
    status="completed",
    effectiveness=None,
    incident_id=None,
    student_id=None,
):
    return RemediationAssignment(
        id=f"asg-{next(_ids)}",
        student_id=student_id,
        remediation_id=remediation_id,
        incident_id=incident_id,
        status=status,
        effectiveness=effectiveness,
    )


def make_remedy(
    remedy_id,
    tier=1,
    category="academic",
    evidence_level="other",
    target_population=(),
    name=None,
):
    return RemediationDefinition(
        id=remedy_id,
        name=name or remedy_id.replace("-", " ").title(),
        category=category,
        tier=tier,
        target_population=list(target_population),
        evidence_level=evidence_level,
        description=f"{remedy_id} description",
    )


@pytest.fixture
def ref_time():
    return REFERENCE_TIME


@pytest.fixture
def catalog():
    return [
        make_remedy("check-in-check-out", tier=1, category="behavioral", evidence_level="evidence_based"),
        make_remedy("peer-mediation", tier=1, category="restorative", evidence_level="promising"),
        make_remedy("homework-club", tier=1, category="academic"),
        make_remedy("small-group-sel", tier=2, category="social_emotional", evidence_level="evidence_based",
                    target_population=["general", "sped"]),
        make_remedy("mentor-match", tier=2, category="mentoring", evidence_level="promising"),
        make_remedy("fba-bip", tier=3, category="behavioral", evidence_level="evidence_based",
                    target_population=["sped"]),
        make_remedy("wraparound", tier=3, category="social_emotional", evidence_level="promising"),
    ]
