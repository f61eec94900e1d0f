"""Celery tasks for periodic breach rescans.

``rescan_all_assets`` runs on the beat schedule and fans out one
``check_asset`` task per monitored asset. Each task owns its session and
commits its own unit of work.
"""

import logging
from typing import Any

from .celery_app import celery_app
from ..database.connection import get_db
from ..database.repository import SecurityRepository
from ..ingestion.scanner import scan_asset

logger = logging.getLogger(__name__)


@celery_app.task(name="backend.workers.scan_tasks.rescan_all_assets", bind=True, max_retries=3)
def rescan_all_assets(self: Any) -> dict[str, Any]:
    """Dispatch a check for every monitored asset.

    Returns:
        Dispatch status and the number of assets queued.
    """
    with get_db() as db_session:
        try:
            asset_ids: list[str] = SecurityRepository(db_session).get_all_asset_ids()

            for asset_id in asset_ids:
                check_asset.delay(asset_id)

            logger.info(f"Dispatched rescans for {len(asset_ids)} monitored assets")
            return {"status": "dispatched", "asset_count": len(asset_ids)}

        except Exception as e:
            logger.error(f"Failed to dispatch asset rescans: {e}")
            try:
                self.retry(exc=e)
            except self.MaxRetriesExceededError:
                return {"status": "failed", "error": str(e)}
            return {"status": "retrying"}


@celery_app.task(name="backend.workers.scan_tasks.check_asset", bind=True, max_retries=3, default_retry_delay=120)
def check_asset(self: Any, asset_id: str) -> dict[str, Any]:
    """Re-check one asset against the breach catalog.

    Args:
        asset_id: ID of the MonitoredAsset row.

    Returns:
        The asset ID and the number of new alerts recorded.
    """
    with get_db() as db_session:
        try:
            repo = SecurityRepository(db_session)
            asset = repo.get_asset(asset_id)
            if not asset:
                logger.info(f"Asset '{asset_id}' no longer exists. Skipping rescan.")
                return {"asset_id": asset_id, "new_alerts": 0}

            new_alerts: int = scan_asset(repo, asset)
            db_session.commit()
            return {"asset_id": asset_id, "new_alerts": new_alerts}

        except Exception as e:
            logger.error(f"Failed to rescan asset {asset_id}: {e}", exc_info=True)
            db_session.rollback()
            try:
                self.retry(exc=e)
            except self.MaxRetriesExceededError:
                return {"asset_id": asset_id, "new_alerts": 0, "error": str(e)}
            return {"asset_id": asset_id, "new_alerts": 0, "status": "retrying"}
