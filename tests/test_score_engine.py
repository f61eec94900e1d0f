"""Unit tests for the security score engine.

The engine only reads attributes, so plain namespaces stand in for the ORM
rows here.
"""

from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Iterable

from backend.checklist.catalog import DEFAULT_CHECKLIST_ITEMS
from backend.database.enums import Trend
from backend.scoring.score_engine import (
    ScoreBreakdown,
    ScoreComponent,
    build_security_score,
    calculate_exposure_score,
    calculate_hygiene_score,
    calculate_mfa_score,
    calculate_overall_score,
    calculate_password_score,
    calculate_security_score,
    determine_trend,
    get_score_label,
    round_half_up,
)


def make_checklist(completed: Iterable[str] = ()) -> SimpleNamespace:
    done = set(completed)
    return SimpleNamespace(items=[
        SimpleNamespace(
            category=entry["category"].value,
            importance=entry["importance"].value,
            title=entry["title"],
            is_completed=entry["title"] in done,
        )
        for entry in DEFAULT_CHECKLIST_ITEMS
    ])


def titles(**filters: str) -> list[str]:
    return [
        entry["title"]
        for entry in DEFAULT_CHECKLIST_ITEMS
        if all(entry[key].value == value for key, value in filters.items())
    ]


def make_action(action_type: str, is_completed: bool = False) -> SimpleNamespace:
    return SimpleNamespace(type=action_type, is_completed=is_completed)


def make_alert(
    data_classes: list[str],
    severity: str = "critical",
    is_resolved: bool = False,
    actions: list[Any] = None,
) -> SimpleNamespace:
    return SimpleNamespace(
        breach=SimpleNamespace(data_classes=data_classes),
        severity=severity,
        is_resolved=is_resolved,
        is_read=False,
        recommended_actions=actions or [],
    )


def test_fresh_user_scores_70() -> None:
    """No assets, no alerts and an untouched checklist."""
    score = build_security_score([], [], make_checklist())

    assert score.breakdown.passwords.score == 100
    assert score.breakdown.mfa.score == 50
    assert score.breakdown.exposure.score == 80
    assert "No assets being monitored" in score.breakdown.exposure.issues
    assert score.breakdown.hygiene.score == 0
    assert score.overall == 70
    assert score.label == "Good"
    assert score.trend == Trend.UP
    assert score.trend_percentage == 0


def test_component_weights() -> None:
    score = build_security_score([], [], make_checklist())
    breakdown = score.breakdown
    assert (breakdown.passwords.weight, breakdown.mfa.weight, breakdown.exposure.weight, breakdown.hygiene.weight) == (
        35, 30, 25, 10,
    )


def test_password_score_without_breaches() -> None:
    component = calculate_password_score([])
    assert component.score == 100
    assert component.issues == []
    assert component.recommendations == ["Great job keeping your passwords secure!"]


def test_password_score_deducts_for_exposure_and_pending_changes() -> None:
    alert = make_alert(["email_addresses", "passwords"], actions=[make_action("change_password")])
    component = calculate_password_score([alert])

    assert component.score == 70
    assert component.issues == [
        "1 account(s) with exposed passwords",
        "1 pending password changes",
    ]
    assert component.recommendations == [
        "Change passwords for breached accounts immediately",
        "Complete pending password changes",
    ]


def test_resolved_alert_still_counts_pending_password_change() -> None:
    alert = make_alert(["passwords"], is_resolved=True, actions=[make_action("change_password")])
    component = calculate_password_score([alert])
    assert component.score == 90
    assert component.issues == ["1 pending password changes"]


def test_completed_password_change_is_not_pending() -> None:
    alert = make_alert(["passwords"], actions=[make_action("change_password", is_completed=True)])
    assert calculate_password_score([alert]).score == 80


def test_password_score_is_clamped_at_zero() -> None:
    alerts = [make_alert(["passwords"], actions=[make_action("change_password")]) for _ in range(6)]
    assert calculate_password_score(alerts).score == 0


def test_mfa_score_with_all_authentication_items_done() -> None:
    component = calculate_mfa_score([], make_checklist(titles(category="authentication")))
    assert component.score == 100
    assert component.recommendations == ["Your authentication security is strong!"]


def test_mfa_score_partial_authentication_progress() -> None:
    """Two of five items done leaves 60% incomplete, costing round(30)."""
    done = titles(category="authentication")[:2]
    component = calculate_mfa_score([], make_checklist(done))
    assert component.score == 70
    assert component.issues == ["3 authentication improvements pending"]


def test_mfa_score_deducts_for_pending_mfa_actions() -> None:
    alerts = [make_alert(["email_addresses"], actions=[make_action("enable_mfa")]) for _ in range(2)]
    component = calculate_mfa_score(alerts, make_checklist(titles(category="authentication")))
    assert component.score == 70
    assert component.issues == ["2 accounts need 2FA enabled"]
    assert component.recommendations == ["Enable two-factor authentication where available"]


def test_mfa_score_without_authentication_items() -> None:
    checklist = SimpleNamespace(items=[])
    assert calculate_mfa_score([], checklist).score == 100


def test_exposure_score_counts_each_deduction_category_once() -> None:
    assets = [
        SimpleNamespace(status="breached"),
        SimpleNamespace(status="breached"),
        SimpleNamespace(status="at_risk"),
        SimpleNamespace(status="safe"),
    ]
    alerts = [
        make_alert(["passwords"], severity="critical"),
        make_alert(["auth_tokens"], severity="high"),
        make_alert(["passwords"], severity="critical", is_resolved=True),
        make_alert(["phone_numbers"], severity="medium"),
    ]
    component = calculate_exposure_score(assets, alerts)

    assert component.score == 100 - 30 - 5 - 20
    assert component.issues == [
        "2 monitored asset(s) found in data breaches",
        "1 asset(s) at elevated risk",
        "2 high-priority alert(s) need attention",
    ]
    assert component.recommendations == [
        "Review and secure accounts linked to breached emails",
        "Address critical security alerts as soon as possible",
    ]


def test_exposure_score_with_only_safe_assets() -> None:
    component = calculate_exposure_score([SimpleNamespace(status="safe")], [])
    assert component.score == 100
    assert component.recommendations == ["Your digital exposure is well managed!"]


def test_hygiene_score_all_complete() -> None:
    component = calculate_hygiene_score(make_checklist(titles()))
    assert component.score == 100
    assert component.issues == []
    assert component.recommendations == ["You maintain excellent security hygiene!"]


def test_hygiene_score_double_counts_unfinished_checklist() -> None:
    """An untouched checklist gets both the essential and the general-progress issue."""
    component = calculate_hygiene_score(make_checklist())
    assert component.score == 0
    assert component.issues == [
        "10 essential security task(s) incomplete",
        "Security checklist less than 50% complete",
    ]


def test_hygiene_score_essentials_only() -> None:
    component = calculate_hygiene_score(make_checklist(titles(importance="essential")))
    assert component.score == 45
    assert component.issues == ["Security checklist less than 50% complete"]


def test_hygiene_score_empty_checklist_is_zero() -> None:
    component = calculate_hygiene_score(SimpleNamespace(items=[]))
    assert component.score == 0


def test_every_component_stays_in_bounds() -> None:
    checklists = [make_checklist(), make_checklist(titles()), SimpleNamespace(items=[])]
    alert_sets = [
        [],
        [make_alert(["passwords"], actions=[make_action("change_password"), make_action("enable_mfa")])] * 10,
    ]
    asset_sets = [[], [SimpleNamespace(status="breached")] * 10]

    for checklist in checklists:
        for alerts in alert_sets:
            for assets in asset_sets:
                breakdown = build_security_score(assets, alerts, checklist).breakdown
                for component in (breakdown.passwords, breakdown.mfa, breakdown.exposure, breakdown.hygiene):
                    assert 0 <= component.score <= 100
                    assert component.recommendations


def test_overall_score_formula() -> None:
    breakdown = ScoreBreakdown(
        passwords=ScoreComponent(score=50, weight=35),
        mfa=ScoreComponent(score=50, weight=30),
        exposure=ScoreComponent(score=50, weight=25),
        hygiene=ScoreComponent(score=55, weight=10),
    )
    # 17.5 + 15 + 12.5 + 5.5 = 50.5 rounds up
    assert calculate_overall_score(breakdown) == 51


def test_round_half_up() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.49) == 2


def test_trend_policy() -> None:
    assert determine_trend(70) == Trend.UP
    assert determine_trend(69) == Trend.STABLE
    assert determine_trend(50) == Trend.STABLE
    assert determine_trend(49) == Trend.DOWN


def test_score_labels() -> None:
    assert get_score_label(95) == "Excellent"
    assert get_score_label(80) == "Very Good"
    assert get_score_label(70) == "Good"
    assert get_score_label(60) == "Fair"
    assert get_score_label(40) == "Poor"
    assert get_score_label(39) == "Critical"


class FakeSource:
    def __init__(self, assets: list[Any], alerts: list[Any], checklist: Any) -> None:
        self.assets = assets
        self.alerts = alerts
        self.checklist = checklist
        self.calls: list[str] = []

    def get_assets_by_user(self, user_id: str) -> list[Any]:
        self.calls.append("assets")
        return self.assets

    def get_alerts_by_user(self, user_id: str) -> list[Any]:
        self.calls.append("alerts")
        return self.alerts

    def get_security_checklist(self, user_id: str) -> Any:
        self.calls.append("checklist")
        return self.checklist


def test_calculate_security_score_reads_each_source_once() -> None:
    source = FakeSource([], [], make_checklist())
    score = calculate_security_score(source, "user-1")

    assert sorted(source.calls) == ["alerts", "assets", "checklist"]
    assert score.overall == 70
    assert score.last_updated.tzinfo is not None


def test_repeated_scores_have_identical_breakdowns() -> None:
    alerts = [make_alert(["passwords"], actions=[make_action("change_password")])]
    source = FakeSource([SimpleNamespace(status="breached")], alerts, make_checklist(titles(category="passwords")))

    first = calculate_security_score(source, "user-1")
    second = calculate_security_score(source, "user-1")
    assert first.breakdown == second.breakdown
    assert first.overall == second.overall


def test_build_security_score_uses_given_timestamp() -> None:
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert build_security_score([], [], make_checklist(), now=now).last_updated == now
