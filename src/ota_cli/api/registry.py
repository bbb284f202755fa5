"""
Device registry: devices and device groups.
"""
from __future__ import annotations
import logging
from enum import Enum
from uuid import UUID
from ..session import Session
from ..utils.output import CommandResult, RawResult, json_table

logger = logging.getLogger(__name__)

DEVICE_COLUMNS = ["uuid", "name", "device id", "type", "status", "last seen"]
GROUP_COLUMNS = ["id", "name", "type", "created at"]


class DeviceType(str, Enum):
    VEHICLE = "Vehicle"
    OTHER = "Other"


class GroupType(str, Enum):
    STATIC = "static"
    DYNAMIC = "dynamic"


def _device_row(it: dict) -> list:
    return [
        it.get("uuid"),
        it.get("deviceName"),
        it.get("deviceId"),
        it.get("deviceType"),
        it.get("deviceStatus"),
        it.get("lastSeen") or "",
    ]


def _group_row(it: dict) -> list:
    return [it.get("id"), it.get("groupName") or it.get("name"), it.get("groupType"), it.get("createdAt") or ""]


def create_device(s: Session, name: str, device_id: str, kind: DeviceType) -> CommandResult:
    logger.debug("creating device %s of type %s with id %s", name, kind.value, device_id)
    r = s.send(
        "POST",
        f"{s.config.registry}api/v1/devices",
        params={"deviceName": name, "deviceId": device_id, "deviceType": kind.value},
    )
    return RawResult(r)


def delete_device(s: Session, device: UUID) -> CommandResult:
    logger.debug("deleting device %s", device)
    return RawResult(s.send("DELETE", f"{s.config.registry}api/v1/devices/{device}"))


def list_device(s: Session, device: UUID) -> CommandResult:
    logger.debug("listing details for device %s", device)
    return RawResult(s.send("GET", f"{s.config.registry}api/v1/devices/{device}"))


def list_all_devices(s: Session) -> CommandResult:
    logger.debug("listing all devices")
    r = s.send("GET", f"{s.config.registry}api/v1/devices")
    return json_table(r, DEVICE_COLUMNS, _device_row)


def list_devices_in_group(s: Session, group: UUID) -> CommandResult:
    logger.debug("listing devices in group %s", group)
    return RawResult(s.send("GET", f"{s.config.registry}api/v1/device_groups/{group}/devices"))


def list_groups_of_device(s: Session, device: UUID) -> CommandResult:
    logger.debug("listing groups for device %s", device)
    return RawResult(s.send("GET", f"{s.config.registry}api/v1/devices/{device}/groups"))


def list_all_groups(s: Session) -> CommandResult:
    logger.debug("listing all groups")
    r = s.send("GET", f"{s.config.registry}api/v1/device_groups")
    return json_table(r, GROUP_COLUMNS, _group_row)


def create_group(s: Session, name: str, group_type: GroupType = GroupType.STATIC) -> CommandResult:
    logger.debug("creating device group %s", name)
    r = s.send(
        "POST",
        f"{s.config.registry}api/v1/device_groups",
        json={"name": name, "groupType": group_type.value},
    )
    return RawResult(r)


def rename_group(s: Session, group: UUID, name: str) -> CommandResult:
    logger.debug("renaming group %s to %s", group, name)
    r = s.send(
        "PUT",
        f"{s.config.registry}api/v1/device_groups/{group}/rename",
        params={"groupId": str(group), "groupName": name},
    )
    return RawResult(r)


def add_to_group(s: Session, group: UUID, device: UUID) -> CommandResult:
    logger.debug("adding device %s to group %s", device, group)
    r = s.send(
        "POST",
        f"{s.config.registry}api/v1/device_groups/{group}/devices/{device}",
        params={"deviceId": str(device), "groupId": str(group)},
    )
    return RawResult(r)


def remove_from_group(s: Session, group: UUID, device: UUID) -> CommandResult:
    logger.debug("removing device %s from group %s", device, group)
    r = s.send(
        "DELETE",
        f"{s.config.registry}api/v1/device_groups/{group}/devices/{device}",
        params={"deviceId": str(device), "groupId": str(group)},
    )
    return RawResult(r)
