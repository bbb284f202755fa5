from __future__ import annotations
import logging
from uuid import UUID
from ..session import Session
from ..targets import TufUpdates
from ..utils.output import CommandResult, RawResult

logger = logging.getLogger(__name__)


def create_mtu(s: Session, updates: TufUpdates) -> CommandResult:
    """Create a multi-target update from per-hardware target requests."""
    logger.debug("creating multi-target update for %s", ", ".join(updates.targets))
    r = s.send("POST", f"{s.config.director}api/v1/admin/multi_target_updates", json=updates.to_payload())
    return RawResult(r)


def launch_mtu(s: Session, update: UUID, device: UUID) -> CommandResult:
    logger.debug("launching multi-target update %s on device %s", update, device)
    r = s.send("PUT", f"{s.config.director}api/v1/admin/devices/{device}/multi_target_update/{update}")
    return RawResult(r)
