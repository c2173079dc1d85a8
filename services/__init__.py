"""
Business logic services for the Light The Lamp draft bot

Service layer providing clean interfaces to data operations.
"""
import logging
from typing import Optional

from config import get_config, STORE_BACKENDS
from exceptions import ConfigurationException
from .draft_tracker_service import DraftTrackerService
from .membership_service import MembershipService
from .pick_service import PickService
from .roster_service import RosterService
from .memory_store import InMemoryMembershipSource, InMemoryPickStore, InMemoryRosterSource

logger = logging.getLogger(__name__)

# Global tracker instance - built on first use from configuration
_draft_tracker: Optional[DraftTrackerService] = None


def build_draft_tracker(store_backend: Optional[str] = None) -> DraftTrackerService:
    """
    Wire a tracker to the collaborators for the configured environment.

    The backend is fixed here, up front. A failing store surfaces as
    StoreUnavailableError; it never flips the tracker to another backend.

    Raises:
        ConfigurationException: For an unknown backend name
    """
    config = get_config()
    backend = (store_backend or config.store_backend).lower()

    if backend not in STORE_BACKENDS:
        raise ConfigurationException(
            f"Unknown STORE_BACKEND '{backend}' (expected one of {sorted(STORE_BACKENDS)})"
        )

    roster_source = RosterService()
    if backend == "memory":
        logger.info("Using in-memory membership and pick stores")
        return DraftTrackerService(InMemoryMembershipSource(), roster_source, InMemoryPickStore())

    logger.info(f"Using REST membership and pick stores at {config.rest_base_url}")
    return DraftTrackerService(MembershipService(), roster_source, PickService())


def get_draft_tracker() -> DraftTrackerService:
    """Get the global draft tracker instance."""
    global _draft_tracker
    if _draft_tracker is None:
        _draft_tracker = build_draft_tracker()
    return _draft_tracker


__all__ = [
    'DraftTrackerService', 'build_draft_tracker', 'get_draft_tracker',
    'MembershipService', 'PickService', 'RosterService',
    'InMemoryMembershipSource', 'InMemoryPickStore', 'InMemoryRosterSource',
]
