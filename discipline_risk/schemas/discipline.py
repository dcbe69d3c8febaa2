from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


Severity = Literal["minor", "moderate", "serious", "severe"]
RiskLevel = Literal["Low", "Medium", "High"]


class _Record(BaseModel):
    # records arrive pre-fetched from the data-access layer; extra columns are ignored
    model_config = ConfigDict(frozen=True, extra="ignore")


class OffenseInfo(_Record):
    severity: Optional[Severity] = None
    category: Optional[str] = None


class IncidentRecord(_Record):
    id: str
    student_id: Optional[str] = None
    incident_date: Optional[date] = None
    offense: Optional[OffenseInfo] = None
    consequence_type: Optional[str] = None
    status: Optional[str] = None


class RemediationAssignment(_Record):
    id: str
    student_id: Optional[str] = None
    remediation_id: str
    incident_id: Optional[str] = None
    status: Optional[str] = None
    effectiveness: Optional[str] = None


class RemediationDefinition(_Record):
    id: str
    name: str
    category: Optional[str] = None
    tier: int = Field(..., ge=1, le=3)
    target_population: List[str] = Field(default_factory=list)
    evidence_level: Optional[str] = None
    description: Optional[str] = None

    @field_validator("target_population", mode="before")
    @classmethod
    def _null_population(cls, v):
        return [] if v is None else v


class SubjectFlags(_Record):
    is_sped: bool = False


class BehaviorHistory(_Record):
    incidents: List[IncidentRecord] = Field(default_factory=list)
    assignments: List[RemediationAssignment] = Field(default_factory=list)


class RiskFactor(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    points: int
    max_points: int
    description: str


class RiskAssessment(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=0, le=100)
    risk_level: RiskLevel
    factors: List[RiskFactor]
