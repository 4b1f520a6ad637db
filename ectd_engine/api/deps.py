from __future__ import annotations

from ..config import get_settings
from ..core.staging import StagingArea


def get_staging_area() -> StagingArea:
    """Staging pool for one request; stale entries from crashed runs are purged first."""
    settings = get_settings()
    staging = StagingArea(settings.staging_path())
    staging.cleanup_older_than(settings.ECTD_STAGING_MAX_AGE_HOURS)
    return staging
