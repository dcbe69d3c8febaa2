from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from discipline_risk.schemas.discipline import (
    BehaviorHistory,
    IncidentRecord,
    RemediationAssignment,
    RemediationDefinition,
    RiskAssessment,
    RiskLevel,
    SubjectFlags,
)


class Recommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    tier: int
    category: Optional[str] = None
    reason: str
    description: Optional[str] = None


class SubjectAssessment(BaseModel):
    model_config = ConfigDict(frozen=True)

    assessment: RiskAssessment
    recommendations: List[Recommendation]


class ScoreRequest(BaseModel):
    history: BehaviorHistory = Field(default_factory=BehaviorHistory)
    reference_time: Optional[datetime] = None
    school_year_start: Optional[date] = None


class RecommendRequest(BaseModel):
    risk_level: RiskLevel
    history: BehaviorHistory = Field(default_factory=BehaviorHistory)
    catalog: List[RemediationDefinition] = Field(default_factory=list)
    subject: Optional[SubjectFlags] = None
    max_items: int = Field(5, ge=0)


class AssessRequest(ScoreRequest):
    catalog: List[RemediationDefinition] = Field(default_factory=list)
    subject: Optional[SubjectFlags] = None
    max_items: int = Field(5, ge=0)


class BatchRequest(BaseModel):
    student_ids: List[str]
    incidents: List[IncidentRecord] = Field(default_factory=list)
    assignments: List[RemediationAssignment] = Field(default_factory=list)
    reference_time: Optional[datetime] = None
    school_year_start: Optional[date] = None
    limit: Optional[int] = Field(None, ge=1)


class BatchRow(BaseModel):
    student_id: str
    score: int
    risk_level: RiskLevel


class BatchResponse(BaseModel):
    rows: List[BatchRow]
    count: int
