from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd

from discipline_risk.ml.interventions.engine import recommend_interventions
from discipline_risk.ml.interventions.schemas import SubjectAssessment
from discipline_risk.ml.risk.scorer import score_risk
from discipline_risk.schemas.discipline import (
    BehaviorHistory,
    IncidentRecord,
    RemediationAssignment,
    RemediationDefinition,
    RiskAssessment,
    SubjectFlags,
)
from discipline_risk.services.time_utils import resolve_reference_time


logger = logging.getLogger(__name__)


def assess_subject(
    history: BehaviorHistory,
    catalog: Sequence[RemediationDefinition],
    subject: Optional[SubjectFlags] = None,
    reference_time: Optional[datetime] = None,
    school_year_start: Optional[date] = None,
    max_items: int = 5,
) -> SubjectAssessment:
    """Score a single student and suggest remediations for the resulting risk level."""
    assessment = score_risk(history, reference_time=reference_time, school_year_start=school_year_start)
    recs = recommend_interventions(
        assessment.risk_level,
        history=history,
        catalog=catalog,
        subject=subject,
        max_items=max_items,
    )
    logger.debug(
        "assessed: score=%s level=%s incidents=%d recommendations=%d",
        assessment.score,
        assessment.risk_level,
        len(history.incidents),
        len(recs),
    )
    return SubjectAssessment(assessment=assessment, recommendations=recs)


def group_by_student(
    student_ids: Iterable[str],
    incidents: Iterable[IncidentRecord],
    assignments: Iterable[RemediationAssignment],
) -> Dict[str, BehaviorHistory]:
    """
    Returns: { student_id: BehaviorHistory } for every requested student.
    Records belonging to students outside student_ids are dropped.
    """
    ids = list(dict.fromkeys(student_ids))
    wanted = set(ids)

    inc_by: Dict[str, List[IncidentRecord]] = defaultdict(list)
    for inc in incidents:
        if inc.student_id in wanted:
            inc_by[inc.student_id].append(inc)

    asg_by: Dict[str, List[RemediationAssignment]] = defaultdict(list)
    for a in assignments:
        if a.student_id in wanted:
            asg_by[a.student_id].append(a)

    return {
        sid: BehaviorHistory(incidents=inc_by.get(sid, []), assignments=asg_by.get(sid, []))
        for sid in ids
    }


def score_batch(
    student_ids: Iterable[str],
    incidents: Iterable[IncidentRecord],
    assignments: Iterable[RemediationAssignment],
    reference_time: Optional[datetime] = None,
    school_year_start: Optional[date] = None,
) -> Dict[str, RiskAssessment]:
    """Score many students against one shared reference instant."""
    now = resolve_reference_time(reference_time)
    histories = group_by_student(student_ids, incidents, assignments)
    results = {
        sid: score_risk(h, reference_time=now, school_year_start=school_year_start)
        for sid, h in histories.items()
    }
    logger.info("batch scored %d students at %s", len(results), now.isoformat())
    return results


def rank_batch(results: Dict[str, RiskAssessment], limit: Optional[int] = None) -> pd.DataFrame:
    """Tabulate batch results, highest score first, one column per factor."""
    rows = []
    for sid, a in results.items():
        row = {"student_id": sid, "score": a.score, "risk_level": a.risk_level}
        for f in a.factors:
            row[f.label] = f.points
        rows.append(row)

    if not rows:
        return pd.DataFrame(columns=["student_id", "score", "risk_level"])

    df = pd.DataFrame(rows)
    df = df.sort_values("score", ascending=False, kind="stable").reset_index(drop=True)
    if limit is not None:
        df = df.head(limit)
    return df
