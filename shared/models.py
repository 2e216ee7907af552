from __future__ import annotations
from enum import Enum
from typing import Tuple
from pydantic import BaseModel, ConfigDict, Field


class BurnoutRisk(str, Enum):
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    SEVERE = "Severe"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, use_enum_values=True)


class SymbolAnalysis(_Frozen):
    name: str
    meaning: str
    archetype: str


class PsychologicalState(_Frozen):
    stressLevel: int = Field(strict=True, ge=0, le=100)
    burnoutRisk: BurnoutRisk
    emotions: Tuple[str, ...]


class HealthReport(_Frozen):
    sleepQualityLikelihood: str
    suggestedBedtimeRoutine: str
    wakingLifeCorrelation: str


class DreamAnalysisResult(_Frozen):
    """Structured interpretation of one dream, as returned by the analyzer."""

    title: str
    dreamLevel: int = Field(strict=True, ge=1, le=5)
    dreamLevelLabel: str
    summary: str
    interpretation: str
    symbols: Tuple[SymbolAnalysis, ...]
    psychologicalState: PsychologicalState
    healthReport: HealthReport


class JournalEntry(DreamAnalysisResult):
    """A saved analysis. ``id`` and ``timestamp`` (epoch ms) only exist locally."""

    id: str
    timestamp: int
