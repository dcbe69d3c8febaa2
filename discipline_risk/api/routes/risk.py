from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, HTTPException

from discipline_risk.config import max_recommendations
from discipline_risk.ml.interventions.engine import recommend_interventions
from discipline_risk.ml.interventions.schemas import (
    AssessRequest,
    BatchRequest,
    BatchResponse,
    BatchRow,
    Recommendation,
    RecommendRequest,
    ScoreRequest,
    SubjectAssessment,
)
from discipline_risk.ml.risk.scorer import score_risk
from discipline_risk.schemas.discipline import RiskAssessment
from discipline_risk.services.assessment_service import assess_subject, rank_batch, score_batch


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/risk", tags=["risk"])


@router.post("/score", response_model=RiskAssessment)
def score(req: ScoreRequest) -> RiskAssessment:
    try:
        return score_risk(req.history, reference_time=req.reference_time, school_year_start=req.school_year_start)
    except Exception as ex:
        logger.exception("risk scoring failed")
        raise HTTPException(status_code=500, detail=f"Risk scoring failed: {ex}")


@router.post("/recommendations", response_model=List[Recommendation])
def recommendations(req: RecommendRequest) -> List[Recommendation]:
    try:
        return recommend_interventions(
            req.risk_level,
            history=req.history,
            catalog=req.catalog,
            subject=req.subject,
            max_items=min(req.max_items, max_recommendations()),
        )
    except Exception as ex:
        logger.exception("recommendation failed")
        raise HTTPException(status_code=500, detail=f"Recommendation failed: {ex}")


@router.post("/assess", response_model=SubjectAssessment)
def assess(req: AssessRequest) -> SubjectAssessment:
    try:
        return assess_subject(
            req.history,
            req.catalog,
            subject=req.subject,
            reference_time=req.reference_time,
            school_year_start=req.school_year_start,
            max_items=min(req.max_items, max_recommendations()),
        )
    except Exception as ex:
        logger.exception("assessment failed")
        raise HTTPException(status_code=500, detail=f"Assessment failed: {ex}")


@router.post("/batch", response_model=BatchResponse)
def batch(req: BatchRequest) -> BatchResponse:
    """Score every requested student and return them ranked by risk score."""
    try:
        results = score_batch(
            req.student_ids,
            req.incidents,
            req.assignments,
            reference_time=req.reference_time,
            school_year_start=req.school_year_start,
        )
        df = rank_batch(results, limit=req.limit)
        rows = [
            BatchRow(student_id=r.student_id, score=int(r.score), risk_level=r.risk_level)
            for r in df.itertuples(index=False)
        ]
        return BatchResponse(rows=rows, count=len(results))
    except Exception as ex:
        logger.exception("batch scoring failed")
        raise HTTPException(status_code=500, detail=f"Batch scoring failed: {ex}")
