"""Breach scanning for monitored assets.

A scan looks the asset's value up in the breach catalog, records one alert
per newly matched breach (with its recommended actions) and settles the
asset's status. Only email assets are looked up; every other type is
marked safe.
"""

import logging
from typing import Any, Callable, Optional

from .breach_catalog import find_breaches_for_value
from ..database.enums import AssetStatus, AssetType
from ..database.models import MonitoredAsset
from ..database.repository import SecurityRepository
from ..remediation.action_planner import plan_recommended_actions
from ..scoring.severity_engine import calculate_breach_severity

logger = logging.getLogger(__name__)

BreachLookup = Callable[[str], list[dict[str, Any]]]


def scan_asset(
    repo: SecurityRepository,
    asset: MonitoredAsset,
    lookup: Optional[BreachLookup] = None,
) -> int:
    """Check one asset for breaches and persist the outcome.

    Re-scanning is idempotent: an alert already recorded for the same
    asset and breach is left untouched.

    Args:
        repo: Repository bound to the caller's session.
        asset: The asset to check.
        lookup: Maps a plaintext value to the catalog breaches it appears in.
            Defaults to the deterministic catalog lookup.

    Returns:
        The number of new alerts created.
    """
    repo.update_asset_status(asset, AssetStatus.CHECKING)

    if asset.type != AssetType.EMAIL:
        repo.update_asset_status(asset, AssetStatus.SAFE, breach_count=0)
        logger.info(f"Asset {asset.id} ({asset.type}) marked safe without lookup")
        return 0

    matches = (lookup or find_breaches_for_value)(asset.value)
    new_alerts: int = 0

    for record in matches:
        breach = repo.upsert_breach(record)
        if repo.get_alert_for(asset.id, breach.id):
            continue

        repo.create_alert(
            user_id=asset.user_id,
            asset_id=asset.id,
            breach=breach,
            severity=calculate_breach_severity(breach.data_classes),
            actions=plan_recommended_actions(breach, asset_id=asset.id),
        )
        new_alerts += 1

    if matches:
        repo.update_asset_status(asset, AssetStatus.BREACHED, breach_count=len(matches))
    else:
        repo.update_asset_status(asset, AssetStatus.SAFE, breach_count=0)

    logger.info(f"Scanned asset {asset.id}: {len(matches)} breach(es), {new_alerts} new alert(s)")
    return new_alerts
