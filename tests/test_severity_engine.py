"""Unit tests for the breach severity classifier.

Validates the data-class weight table, the tier boundaries, and that the
riskiest exposed class decides the tier on its own.
"""

from backend.database.enums import AlertSeverity, DataClass
from backend.scoring.severity_engine import (
    DEFAULT_WEIGHT,
    calculate_breach_severity,
    get_data_class_weight,
)


def test_critical_when_passwords_exposed() -> None:
    """Exposing passwords (weight 10) pushes the breach to CRITICAL."""
    assert calculate_breach_severity(["usernames", "passwords"]) == AlertSeverity.CRITICAL


def test_critical_when_government_ids_exposed() -> None:
    """Weight 9 is the lower edge of the CRITICAL tier."""
    assert calculate_breach_severity([DataClass.GOVERNMENT_IDS]) == AlertSeverity.CRITICAL


def test_high_for_auth_tokens_and_security_questions() -> None:
    assert calculate_breach_severity(["auth_tokens"]) == AlertSeverity.HIGH
    assert calculate_breach_severity(["security_questions", "email_addresses"]) == AlertSeverity.HIGH


def test_medium_for_contact_details() -> None:
    assert calculate_breach_severity(["phone_numbers"]) == AlertSeverity.MEDIUM
    assert calculate_breach_severity(["physical_addresses", "usernames"]) == AlertSeverity.MEDIUM


def test_low_when_only_weak_fields() -> None:
    """Weak fields stay LOW even when many of them are exposed; weights are not summed."""
    data_classes: list[str] = ["usernames", "email_addresses", "ip_addresses", "employment", "dates_of_birth"]
    assert calculate_breach_severity(data_classes) == AlertSeverity.LOW


def test_empty_data_classes_returns_low() -> None:
    assert calculate_breach_severity([]) == AlertSeverity.LOW


def test_unknown_data_class_uses_default_weight() -> None:
    assert get_data_class_weight("avatars") == DEFAULT_WEIGHT
    assert calculate_breach_severity(["avatars", "browser_user_agents"]) == AlertSeverity.LOW


def test_enum_and_string_keys_agree() -> None:
    for data_class in DataClass:
        assert get_data_class_weight(data_class) == get_data_class_weight(data_class.value)


def test_adding_a_riskier_class_never_lowers_severity() -> None:
    """Severity is monotonic as higher-weighted classes are added."""
    order = [AlertSeverity.LOW, AlertSeverity.MEDIUM, AlertSeverity.HIGH, AlertSeverity.CRITICAL]
    data_classes: list[str] = []
    previous = calculate_breach_severity(data_classes)

    for data_class in ["usernames", "dates_of_birth", "phone_numbers", "auth_tokens", "biometric_data", "passwords"]:
        data_classes.append(data_class)
        current = calculate_breach_severity(data_classes)
        assert order.index(current) >= order.index(previous)
        previous = current

    assert previous == AlertSeverity.CRITICAL
