"""Reference breach catalog and deterministic breach lookup.

Aegis ships a small catalog of well-known historical breaches. Lookups do
not call a live breach database: a SHA-256 digest of the normalized asset
value decides whether it matches and how many of the leading catalog
entries it matches, so repeated checks of the same value always agree.
"""

import hashlib
import logging
from datetime import date
from typing import Any

from ..database.enums import DataClass
from ..utils.crypto import normalize_value

logger = logging.getLogger(__name__)

SAMPLE_BREACHES: list[dict[str, Any]] = [
    {
        "id": "breach-1",
        "name": "Adobe",
        "domain": "adobe.com",
        "breach_date": date(2013, 10, 4),
        "added_date": date(2013, 12, 4),
        "modified_date": date(2022, 5, 15),
        "pwn_count": 152445165,
        "description": (
            "In October 2013, 153 million Adobe accounts were breached with each containing an internal ID, "
            "username, email, encrypted password and a password hint in plain text."
        ),
        "data_classes": [DataClass.EMAIL_ADDRESSES.value, DataClass.PASSWORDS.value, DataClass.USERNAMES.value],
    },
    {
        "id": "breach-2",
        "name": "LinkedIn",
        "domain": "linkedin.com",
        "breach_date": date(2012, 5, 5),
        "added_date": date(2016, 5, 21),
        "modified_date": date(2021, 6, 29),
        "pwn_count": 164611595,
        "description": (
            "In May 2016, LinkedIn had 164 million email addresses and passwords exposed. Originally hacked in "
            "2012, the data remained out of sight until being offered for sale on a dark market site 4 years later."
        ),
        "data_classes": [DataClass.EMAIL_ADDRESSES.value, DataClass.PASSWORDS.value],
    },
    {
        "id": "breach-3",
        "name": "Dropbox",
        "domain": "dropbox.com",
        "breach_date": date(2012, 7, 1),
        "added_date": date(2016, 8, 31),
        "modified_date": date(2016, 8, 31),
        "pwn_count": 68648009,
        "description": (
            "In mid-2012, Dropbox suffered a data breach which exposed the stored credentials of tens of "
            "millions of their customers."
        ),
        "data_classes": [DataClass.EMAIL_ADDRESSES.value, DataClass.PASSWORDS.value],
    },
    {
        "id": "breach-4",
        "name": "Twitter",
        "domain": "twitter.com",
        "breach_date": date(2022, 1, 1),
        "added_date": date(2023, 1, 5),
        "modified_date": date(2023, 1, 5),
        "pwn_count": 211524284,
        "description": (
            "In early 2023, over 200 million records scraped from Twitter appeared on a popular hacking forum. "
            "The data was obtained sometime in 2021 by abusing an API."
        ),
        "data_classes": [DataClass.EMAIL_ADDRESSES.value, DataClass.USERNAMES.value, DataClass.PHONE_NUMBERS.value],
    },
    {
        "id": "breach-5",
        "name": "Canva",
        "domain": "canva.com",
        "breach_date": date(2019, 5, 24),
        "added_date": date(2019, 5, 31),
        "modified_date": date(2019, 5, 31),
        "pwn_count": 137272116,
        "description": (
            "In May 2019, the graphic design tool website Canva suffered a data breach that impacted "
            "137 million subscribers."
        ),
        "data_classes": [DataClass.EMAIL_ADDRESSES.value, DataClass.USERNAMES.value, DataClass.PASSWORDS.value],
    },
]

# Share of the digest space (out of 10) that matches at least one breach
MATCH_BUCKETS: int = 7
MAX_MATCHES: int = 3


def find_breaches_for_value(value: str) -> list[dict[str, Any]]:
    """Return the catalog breaches a monitored value appears in.

    Args:
        value: The plaintext asset value.

    Returns:
        A prefix of SAMPLE_BREACHES between 0 and 3 entries long, always
        the same for the same normalized value.
    """
    digest: bytes = hashlib.sha256(normalize_value(value).encode("utf-8")).digest()

    if digest[0] % 10 >= MATCH_BUCKETS:
        return []

    match_count: int = digest[1] % MAX_MATCHES + 1
    return SAMPLE_BREACHES[:match_count]
