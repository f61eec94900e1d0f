"""Severity scoring engine for Aegis.

Converts the set of data classes exposed by a breach into an alert severity.
The single riskiest exposed class decides the tier; weights are not summed.
This module contains pure business logic with no external API or database
dependencies.
"""

import logging
from typing import Iterable, Union

from ..database.enums import AlertSeverity, DataClass

logger = logging.getLogger(__name__)

DATA_CLASS_WEIGHTS: dict[str, int] = {
    DataClass.EMAIL_ADDRESSES.value: 2,
    DataClass.PASSWORDS.value: 10,
    DataClass.USERNAMES.value: 1,
    DataClass.PHONE_NUMBERS.value: 4,
    DataClass.PHYSICAL_ADDRESSES.value: 5,
    DataClass.IP_ADDRESSES.value: 2,
    DataClass.DATES_OF_BIRTH.value: 3,
    DataClass.CREDIT_CARDS.value: 10,
    DataClass.SOCIAL_SECURITY_NUMBERS.value: 10,
    DataClass.BANK_ACCOUNTS.value: 10,
    DataClass.SECURITY_QUESTIONS.value: 7,
    DataClass.AUTH_TOKENS.value: 8,
    DataClass.BIOMETRIC_DATA.value: 9,
    DataClass.BROWSING_HISTORY.value: 3,
    DataClass.EMPLOYMENT.value: 2,
    DataClass.GOVERNMENT_IDS.value: 9,
}

# Weight assigned to any data class missing from the table above
DEFAULT_WEIGHT: int = 1

# Minimum max-weight for each tier, checked from the top down
SEVERITY_THRESHOLDS: list[tuple[AlertSeverity, int]] = [
    (AlertSeverity.CRITICAL, 9),
    (AlertSeverity.HIGH, 7),
    (AlertSeverity.MEDIUM, 4),
]


def get_data_class_weight(data_class: Union[str, DataClass]) -> int:
    """Return the risk weight of one data class, defaulting unknown ones to 1."""
    key: str = data_class.value if isinstance(data_class, DataClass) else str(data_class)
    return DATA_CLASS_WEIGHTS.get(key, DEFAULT_WEIGHT)


def calculate_breach_severity(data_classes: Iterable[Union[str, DataClass]]) -> AlertSeverity:
    """Classify a breach by the riskiest data class it exposed.

    Args:
        data_classes: The data classes exposed by the breach.

    Returns:
        CRITICAL for a maximum weight of 9 or more, HIGH for 7 or more,
        MEDIUM for 4 or more, LOW otherwise (including an empty input).
    """
    max_weight: int = 0
    for data_class in data_classes:
        max_weight = max(max_weight, get_data_class_weight(data_class))

    for severity, threshold in SEVERITY_THRESHOLDS:
        if max_weight >= threshold:
            return severity

    return AlertSeverity.LOW
