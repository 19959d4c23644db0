"""
Health Data Models - device snapshots, metrics, and AI-produced risk data.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, Field


class VitalsHistoryPoint(BaseModel):
    """One day of the short chart history a device reports."""
    name: str  # weekday label, e.g. "Mon"
    bp: Optional[float] = None  # systolic
    heart_rate: Optional[float] = None


class HealthStats(BaseModel):
    """Wearable-device snapshot pushed by a connected client."""
    heart_rate: float  # bpm
    steps: int
    sleep_hours: float
    blood_pressure: Optional[str] = None  # "120/80"
    spo2: float  # %
    temperature: float  # Fahrenheit
    source: str  # e.g. "Apple Health", "Google Fit"
    last_synced: Optional[datetime] = None
    history: List[VitalsHistoryPoint] = Field(default_factory=list)


class HealthMetric(BaseModel):
    """A dated lab or vital value, e.g. Total Cholesterol 180 mg/dL."""
    date: str  # YYYY-MM-DD
    value: float
    unit: str
    type: str


class HealthRiskProfile(BaseModel):
    """Per-category risk scores (0-100) inferred from conversation text."""
    overall_score: int
    cardiovascular: int
    metabolic: int
    respiratory: int
    lifestyle: int
    summary: str = ""
    last_updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class VitalStatus(str, Enum):
    NORMAL = "Normal"
    WARNING = "Warning"
    CRITICAL = "Critical"


class VitalSign(BaseModel):
    name: str
    value: str
    status: VitalStatus = VitalStatus.NORMAL


class HealthRiskAnalysis(BaseModel):
    """Structured analysis of an uploaded medical report."""
    risk_score: int
    summary: str = ""
    key_findings: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    vital_signs: List[VitalSign] = Field(default_factory=list)


class RadarPoint(BaseModel):
    subject: str
    value: float
    full_mark: int = 100


class ReportAnalysisResult(BaseModel):
    """Report analysis plus the values a client derives for display."""
    analysis: HealthRiskAnalysis
    risk_level: str
    radar: List[RadarPoint]


class Dashboard(BaseModel):
    risk_profile: HealthRiskProfile
    risk_level: str
    high_risk_alert: bool
    radar: List[RadarPoint]
    metrics_by_type: dict
    latest_metric_date: Optional[str] = None
    has_metrics: bool = False
    health_stats: Optional[HealthStats] = None
