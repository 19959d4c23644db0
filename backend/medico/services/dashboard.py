"""Derived view models for the dashboard and report screens."""

from datetime import date
from typing import Dict, List, Optional

from ..models import (
    HealthMetric, HealthRiskProfile, HealthRiskAnalysis, HealthStats,
    RadarPoint, ReportAnalysisResult, Dashboard,
)

HIGH_RISK_THRESHOLD = 50


def risk_level(score: float) -> str:
    if score < 40:
        return "Low Risk"
    if score < 70:
        return "Moderate Risk - Monitor Closely"
    return "High Risk - Consult Doctor Immediately"


def profile_radar(profile: HealthRiskProfile) -> List[RadarPoint]:
    return [
        RadarPoint(subject="Cardio", value=profile.cardiovascular),
        RadarPoint(subject="Metabolic", value=profile.metabolic),
        RadarPoint(subject="Respiratory", value=profile.respiratory),
        RadarPoint(subject="Lifestyle", value=profile.lifestyle),
        # Shown inverted so a healthy profile still has area on the chart
        RadarPoint(subject="Immunity", value=100 - profile.overall_score),
    ]


def report_radar(score: int) -> List[RadarPoint]:
    return [
        RadarPoint(subject="Overall Risk", value=score),
        RadarPoint(subject="Vitals", value=score - 10 if score > 50 else score + 10),
        RadarPoint(subject="Urgency", value=score),
        RadarPoint(subject="Complexity", value=min(score + 20, 100)),
        RadarPoint(subject="Health Impact", value=score),
    ]


def summarize_report(analysis: HealthRiskAnalysis) -> ReportAnalysisResult:
    return ReportAnalysisResult(
        analysis=analysis,
        risk_level=risk_level(analysis.risk_score),
        radar=report_radar(analysis.risk_score),
    )


def _date_key(metric: HealthMetric) -> tuple:
    # Unparseable dates sort last, in their original order
    try:
        return (0, date.fromisoformat(metric.date[:10]))
    except ValueError:
        return (1, date.max)


def group_metrics(metrics: List[HealthMetric]) -> Dict[str, List[HealthMetric]]:
    """Group metrics by type, each group sorted by date."""
    grouped: Dict[str, List[HealthMetric]] = {}
    for metric in metrics:
        grouped.setdefault(metric.type, []).append(metric)
    for values in grouped.values():
        values.sort(key=_date_key)
    return grouped


def latest_metric_date(metrics: List[HealthMetric]) -> Optional[str]:
    """Date of the most recent dated metric; falls back to the last one added."""
    dated = [m for m in metrics if _date_key(m)[0] == 0]
    if dated:
        return max(dated, key=_date_key).date
    return metrics[-1].date if metrics else None


def build_dashboard(
    profile: HealthRiskProfile,
    metrics: List[HealthMetric],
    stats: Optional[HealthStats] = None,
) -> Dashboard:
    return Dashboard(
        risk_profile=profile,
        risk_level=risk_level(profile.overall_score),
        high_risk_alert=profile.overall_score > HIGH_RISK_THRESHOLD,
        radar=profile_radar(profile),
        metrics_by_type={k: [m.model_dump() for m in v] for k, v in group_metrics(metrics).items()},
        latest_metric_date=latest_metric_date(metrics),
        has_metrics=bool(metrics),
        health_stats=stats,
    )
