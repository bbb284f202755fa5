"""
Campaigner: grouped, scheduled rollouts of an update.
"""
from __future__ import annotations
import logging
from typing import List
from uuid import UUID
from ..session import Session
from ..utils.output import CommandResult, RawResult, json_table

logger = logging.getLogger(__name__)

CAMPAIGN_COLUMNS = ["id", "name", "update", "status", "created at"]
UPDATE_COLUMNS = ["uuid", "name", "description", "source", "created at"]


def _campaign_row(it: dict) -> list:
    return [it.get("id"), it.get("name"), it.get("update"), it.get("status") or "", it.get("createdAt") or ""]


def _update_row(it: dict) -> list:
    source = it.get("updateSource") or {}
    return [it.get("uuid"), it.get("name"), it.get("description"), source.get("id"), it.get("createdAt") or ""]


def list_campaigns(s: Session) -> CommandResult:
    logger.debug("listing all campaigns")
    return json_table(s.send("GET", f"{s.config.campaigner}api/v2/campaigns"), CAMPAIGN_COLUMNS, _campaign_row)


def get_campaign(s: Session, campaign: UUID, stats: bool = False) -> CommandResult:
    logger.debug("fetching campaign %s%s", campaign, " stats" if stats else "")
    suffix = "/stats" if stats else ""
    return RawResult(s.send("GET", f"{s.config.campaigner}api/v2/campaigns/{campaign}{suffix}"))


def create_campaign(s: Session, name: str, update: UUID, groups: List[UUID]) -> CommandResult:
    logger.debug("creating campaign %s for update %s", name, update)
    body = {"name": name, "update": str(update), "groups": [str(g) for g in groups]}
    return RawResult(s.send("POST", f"{s.config.campaigner}api/v2/campaigns", json=body))


def launch_campaign(s: Session, campaign: UUID) -> CommandResult:
    logger.debug("launching campaign %s", campaign)
    return RawResult(s.send("POST", f"{s.config.campaigner}api/v2/campaigns/{campaign}/launch"))


def cancel_campaign(s: Session, campaign: UUID) -> CommandResult:
    logger.debug("cancelling campaign %s", campaign)
    return RawResult(s.send("POST", f"{s.config.campaigner}api/v2/campaigns/{campaign}/cancel"))


def list_updates(s: Session) -> CommandResult:
    logger.debug("listing updates")
    return json_table(s.send("GET", f"{s.config.campaigner}api/v2/updates"), UPDATE_COLUMNS, _update_row)


def create_update(s: Session, update: UUID, name: str, description: str) -> CommandResult:
    logger.debug("creating update %s from multi-target update %s", name, update)
    body = {
        "updateSource": {"id": str(update), "sourceType": "multi_target"},
        "name": name,
        "description": description,
    }
    return RawResult(s.send("POST", f"{s.config.campaigner}api/v2/updates", json=body))
