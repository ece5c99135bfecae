"""
Link Service Manager

This module wires the link service for the running application.
The store, service and reaper are built once on startup and shared across
requests; endpoints receive the service through get_link_service().

Design:
- Initialized on application startup, torn down on shutdown
- Backend chosen from settings (in-memory by default)
- The reaper task lives and dies with the application
"""

import logging
from typing import Optional

from linktracker.core.exceptions import BackendUnavailableError
from linktracker.core.setting import settings
from linktracker.services.expiry_reaper import ExpiryReaper
from linktracker.services.identifier import IdentifierGenerator
from linktracker.services.link_service import LinkService
from linktracker.store import LinkStore, build_link_store

logger = logging.getLogger(__name__)

# Application-wide instances (initialized on startup)
_store: Optional[LinkStore] = None
_service: Optional[LinkService] = None
_reaper: Optional[ExpiryReaper] = None


async def get_link_service() -> LinkService:
    """
    FastAPI dependency returning the application's link service.
    
    Raises:
        BackendUnavailableError: If called before startup completed
    """
    if _service is None:
        raise BackendUnavailableError("Link service is not initialized")
    return _service


async def initialize_services() -> None:
    """Build the link store, the link service and start the expiry reaper."""
    global _store, _service, _reaper
    
    if _service is not None:
        logger.warning("Link service already initialized")
        return
    
    _store = await build_link_store(settings)
    _service = LinkService(
        _store,
        generator=IdentifierGenerator(settings.LINK_ID_LENGTH),
        max_id_attempts=settings.LINK_ID_MAX_ATTEMPTS,
        default_campaign=settings.DEFAULT_CAMPAIGN,
    )
    _reaper = ExpiryReaper(_store, interval_seconds=settings.REAPER_INTERVAL_SECONDS)
    _reaper.start()
    
    logger.info(f"Link service initialized: backend={settings.STORAGE_BACKEND.value}")


async def shutdown_services() -> None:
    """Stop the reaper and release the store."""
    global _store, _service, _reaper
    
    if _reaper is not None:
        await _reaper.stop()
    
    if _store is not None:
        logger.info("Closing link store")
        await _store.close()
    
    _store = None
    _service = None
    _reaper = None
