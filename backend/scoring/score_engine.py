"""Security score engine for Aegis.

Aggregates a user's monitored assets, breach alerts and checklist progress
into a weighted 0-100 score. Each of the four components starts at 100 and
loses points for every issue found; the overall score is the weighted sum
of the clamped components.

The engine only reads through a ``SecurityDataSource``. It never writes,
never touches the network and never raises for well-formed input.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Protocol, Sequence

from ..database.enums import (
    ActionType,
    AlertSeverity,
    AssetStatus,
    ChecklistCategory,
    DataClass,
    Importance,
    Trend,
)

logger = logging.getLogger(__name__)

# Component weights, as percentages of the overall score
PASSWORDS_WEIGHT: int = 35
MFA_WEIGHT: int = 30
EXPOSURE_WEIGHT: int = 25
HYGIENE_WEIGHT: int = 10

# Per-issue deductions
EXPOSED_PASSWORD_PENALTY: int = 20
PENDING_PASSWORD_CHANGE_PENALTY: int = 10
PENDING_MFA_ACTION_PENALTY: int = 15
BREACHED_ASSET_PENALTY: int = 15
AT_RISK_ASSET_PENALTY: int = 5
SEVERE_ALERT_PENALTY: int = 10
NO_ASSETS_PENALTY: int = 20
INCOMPLETE_ESSENTIAL_PENALTY: int = 10

SCORE_LABELS: list[tuple[int, str]] = [
    (90, "Excellent"),
    (80, "Very Good"),
    (70, "Good"),
    (60, "Fair"),
    (40, "Poor"),
]


class SecurityDataSource(Protocol):
    """The reads the score engine needs from storage."""

    def get_assets_by_user(self, user_id: str) -> Sequence[Any]: ...

    def get_alerts_by_user(self, user_id: str) -> Sequence[Any]: ...

    def get_security_checklist(self, user_id: str) -> Any: ...


@dataclass
class ScoreComponent:
    """One weighted sub-score with the reasons behind it.

    Attributes:
        score: The clamped sub-score from 0 to 100.
        weight: The component's percentage contribution to the overall score.
        issues: Reasons for deductions, in the order they were detected.
        recommendations: Remediation guidance, or a single affirmative
            message when nothing was found.
    """
    score: int
    weight: int
    issues: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)


@dataclass
class ScoreBreakdown:
    passwords: ScoreComponent
    mfa: ScoreComponent
    exposure: ScoreComponent
    hygiene: ScoreComponent


@dataclass
class SecurityScore:
    """The composite score returned to callers.

    ``trend`` is derived from the current overall score only, and
    ``trend_percentage`` stays 0 until historical snapshots exist.
    """
    overall: int
    label: str
    breakdown: ScoreBreakdown
    last_updated: datetime
    trend: Trend
    trend_percentage: int = 0


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always rounding up."""
    return int(math.floor(value + 0.5))


def clamp_score(score: float) -> int:
    return max(0, min(100, int(score)))


def _build_component(score: int, weight: int, issues: list[str], recommendations: list[str], fallback: str) -> ScoreComponent:
    return ScoreComponent(
        score=clamp_score(score),
        weight=weight,
        issues=issues,
        recommendations=recommendations if recommendations else [fallback],
    )


def _pending_actions(alerts: Sequence[Any], action_type: ActionType) -> list[Any]:
    return [
        action
        for alert in alerts
        for action in alert.recommended_actions
        if action.type == action_type and not action.is_completed
    ]


def calculate_password_score(alerts: Sequence[Any]) -> ScoreComponent:
    """Score password safety from unresolved password breaches and pending changes."""
    issues: list[str] = []
    recommendations: list[str] = []
    score: int = 100

    password_breaches = [
        alert for alert in alerts
        if DataClass.PASSWORDS in alert.breach.data_classes and not alert.is_resolved
    ]
    if password_breaches:
        score -= len(password_breaches) * EXPOSED_PASSWORD_PENALTY
        issues.append(f"{len(password_breaches)} account(s) with exposed passwords")
        recommendations.append("Change passwords for breached accounts immediately")

    # Pending actions count across every alert, resolved or not
    pending_changes = _pending_actions(alerts, ActionType.CHANGE_PASSWORD)
    if pending_changes:
        score -= len(pending_changes) * PENDING_PASSWORD_CHANGE_PENALTY
        issues.append(f"{len(pending_changes)} pending password changes")
        recommendations.append("Complete pending password changes")

    return _build_component(
        score, PASSWORDS_WEIGHT, issues, recommendations,
        "Great job keeping your passwords secure!",
    )


def calculate_mfa_score(alerts: Sequence[Any], checklist: Any) -> ScoreComponent:
    """Score authentication strength from checklist progress and pending 2FA actions."""
    issues: list[str] = []
    recommendations: list[str] = []
    score: int = 100

    auth_items = [item for item in checklist.items if item.category == ChecklistCategory.AUTHENTICATION]
    total: int = len(auth_items)
    completed: int = sum(1 for item in auth_items if item.is_completed)

    if total > 0:
        completion: float = completed / total * 100
        if completion < 100:
            score -= round_half_up((100 - completion) * 0.5)
            issues.append(f"{total - completed} authentication improvements pending")
            recommendations.append("Enable 2FA on all important accounts")

    pending_mfa = _pending_actions(alerts, ActionType.ENABLE_MFA)
    if pending_mfa:
        score -= len(pending_mfa) * PENDING_MFA_ACTION_PENALTY
        issues.append(f"{len(pending_mfa)} accounts need 2FA enabled")
        recommendations.append("Enable two-factor authentication where available")

    return _build_component(
        score, MFA_WEIGHT, issues, recommendations,
        "Your authentication security is strong!",
    )


def calculate_exposure_score(assets: Sequence[Any], alerts: Sequence[Any]) -> ScoreComponent:
    """Score digital exposure from breached assets and unresolved severe alerts."""
    issues: list[str] = []
    recommendations: list[str] = []
    score: int = 100

    breached = [asset for asset in assets if asset.status == AssetStatus.BREACHED]
    at_risk = [asset for asset in assets if asset.status == AssetStatus.AT_RISK]

    if breached:
        score -= len(breached) * BREACHED_ASSET_PENALTY
        issues.append(f"{len(breached)} monitored asset(s) found in data breaches")
        recommendations.append("Review and secure accounts linked to breached emails")

    if at_risk:
        score -= len(at_risk) * AT_RISK_ASSET_PENALTY
        issues.append(f"{len(at_risk)} asset(s) at elevated risk")

    severe_alerts = [
        alert for alert in alerts
        if alert.severity in (AlertSeverity.CRITICAL, AlertSeverity.HIGH) and not alert.is_resolved
    ]
    if severe_alerts:
        score -= len(severe_alerts) * SEVERE_ALERT_PENALTY
        issues.append(f"{len(severe_alerts)} high-priority alert(s) need attention")
        recommendations.append("Address critical security alerts as soon as possible")

    if not assets:
        score -= NO_ASSETS_PENALTY
        issues.append("No assets being monitored")
        recommendations.append("Add your email addresses to monitor for breaches")

    return _build_component(
        score, EXPOSURE_WEIGHT, issues, recommendations,
        "Your digital exposure is well managed!",
    )


def calculate_hygiene_score(checklist: Any) -> ScoreComponent:
    """Score overall checklist completion, penalizing unfinished essential items.

    Known quirk: a checklist under half complete gets the general-progress
    issue on top of the essential-item deduction, so the same unfinished
    items can count twice. Existing scores depend on this.
    """
    issues: list[str] = []
    recommendations: list[str] = []

    items = list(checklist.items)
    total: int = len(items)
    completed: int = sum(1 for item in items if item.is_completed)
    essential = [item for item in items if item.importance == Importance.ESSENTIAL]
    incomplete_essential: int = sum(1 for item in essential if not item.is_completed)

    # An empty checklist scores 0 rather than dividing by zero
    score: int = round_half_up(completed / total * 100) if total else 0

    if incomplete_essential > 0:
        score -= incomplete_essential * INCOMPLETE_ESSENTIAL_PENALTY
        issues.append(f"{incomplete_essential} essential security task(s) incomplete")
        recommendations.append("Complete essential security checklist items")

    if completed < total * 0.5:
        issues.append("Security checklist less than 50% complete")
        recommendations.append("Work through your security checklist regularly")

    return _build_component(
        score, HYGIENE_WEIGHT, issues, recommendations,
        "You maintain excellent security hygiene!",
    )


def calculate_overall_score(breakdown: ScoreBreakdown) -> int:
    """Combine the four components with fixed weights 0.35/0.30/0.25/0.10."""
    return round_half_up(
        breakdown.passwords.score * 0.35
        + breakdown.mfa.score * 0.30
        + breakdown.exposure.score * 0.25
        + breakdown.hygiene.score * 0.10
    )


def determine_trend(overall: int) -> Trend:
    """Placeholder trend policy: computed from the current score, not history."""
    if overall >= 70:
        return Trend.UP
    if overall >= 50:
        return Trend.STABLE
    return Trend.DOWN


def get_score_label(score: int) -> str:
    """Return a human-readable label for a 0-100 score."""
    for threshold, label in SCORE_LABELS:
        if score >= threshold:
            return label
    return "Critical"


def build_security_score(
    assets: Sequence[Any],
    alerts: Sequence[Any],
    checklist: Any,
    now: Optional[datetime] = None,
) -> SecurityScore:
    """Compute a SecurityScore from an already-fetched snapshot of user state."""
    breakdown = ScoreBreakdown(
        passwords=calculate_password_score(alerts),
        mfa=calculate_mfa_score(alerts, checklist),
        exposure=calculate_exposure_score(assets, alerts),
        hygiene=calculate_hygiene_score(checklist),
    )
    overall: int = calculate_overall_score(breakdown)

    return SecurityScore(
        overall=overall,
        label=get_score_label(overall),
        breakdown=breakdown,
        last_updated=now or datetime.now(timezone.utc),
        trend=determine_trend(overall),
        trend_percentage=0,
    )


def calculate_security_score(source: SecurityDataSource, user_id: str) -> SecurityScore:
    """Read the user's current state once and compute their security score.

    Args:
        source: Storage exposing the asset, alert and checklist reads.
        user_id: The user to score.

    Returns:
        A freshly computed SecurityScore. Nothing is persisted.
    """
    assets = source.get_assets_by_user(user_id)
    alerts = source.get_alerts_by_user(user_id)
    checklist = source.get_security_checklist(user_id)

    result = build_security_score(assets, alerts, checklist)
    logger.info(f"Computed security score {result.overall} for user {user_id}")
    return result
