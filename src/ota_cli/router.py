"""
Command grammar: `ota <command> <action>` with a closed vocabulary at both levels.

Tokens are matched case-insensitively. Each (command, action) pair maps to
exactly one handler, which reads its flags from a plain mapping and returns
a CommandResult.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Type
from uuid import UUID

import typer

from .api import campaigner, director, registry, reposerver
from .api.client import ApiClient
from .api.errors import ArgsError, CommandError, OtaError, ParseError
from .session import Session
from .targets import load_packages, load_updates, make_package
from .utils.config import ConfigStore, init_config
from .utils.output import CommandResult, EmptyResult, RawResult, render

logger = logging.getLogger(__name__)

Args = Mapping[str, Any]


class Command(str, Enum):
    INIT = "init"
    CAMPAIGN = "campaign"
    DEVICE = "device"
    GROUP = "group"
    PACKAGE = "package"
    UPDATE = "update"


class CampaignAction(str, Enum):
    LIST = "list"
    CREATE = "create"
    LAUNCH = "launch"
    CANCEL = "cancel"
    LIST_UPDATES = "listupdates"
    CREATE_UPDATE = "createupdate"


class DeviceAction(str, Enum):
    LIST = "list"
    CREATE = "create"
    DELETE = "delete"


class GroupAction(str, Enum):
    LIST = "list"
    CREATE = "create"
    ADD = "add"
    RENAME = "rename"
    REMOVE = "remove"


class PackageAction(str, Enum):
    LIST = "list"
    ADD = "add"
    FETCH = "fetch"
    UPLOAD = "upload"


class UpdateAction(str, Enum):
    CREATE = "create"
    LAUNCH = "launch"


ACTIONS: Dict[Command, Type[Enum]] = {
    Command.CAMPAIGN: CampaignAction,
    Command.DEVICE: DeviceAction,
    Command.GROUP: GroupAction,
    Command.PACKAGE: PackageAction,
    Command.UPDATE: UpdateAction,
}


@dataclass(frozen=True)
class Selection:
    command: Command
    action: Optional[Enum] = None


def _lookup(kind: Type[Enum], token: Optional[str], what: str) -> Enum:
    wanted = (token or "").strip().lower()
    for member in kind:
        if member.value == wanted:
            return member
    raise CommandError(f"unknown {what}: {token}")


def parse_command(command: str, action: Optional[str] = None) -> Selection:
    """Parse the two command-line tokens into a Selection."""
    cmd = _lookup(Command, command, "command")
    if cmd is Command.INIT:
        if action is not None:
            raise ArgsError(f"init takes no sub-command (got {action!r})")
        return Selection(cmd)
    if action is None:
        raise CommandError(f"missing {cmd.value} subcommand")
    return Selection(cmd, _lookup(ACTIONS[cmd], action, f"{cmd.value} subcommand"))


# ---- argument helpers

def _flag(key: str) -> str:
    return "--" + key.replace("_", "-")


def _present(value: Any) -> bool:
    if value is None or value is False or value == "":
        return False
    if isinstance(value, (list, tuple)) and not value:
        return False
    return True


def _required(args: Args, key: str) -> Any:
    value = args.get(key)
    if not _present(value):
        raise ArgsError(f"{_flag(key)} is required")
    return value


def _to_uuid(key: str, value: Any) -> UUID:
    try:
        return UUID(str(value).strip())
    except ValueError as e:
        raise ParseError(f"{_flag(key)}: invalid UUID {value!r}") from e


def _uuid(args: Args, key: str) -> UUID:
    return _to_uuid(key, _required(args, key))


def _values(args: Args, key: str) -> List[str]:
    # repeatable and comma-separated values are both accepted
    out: List[str] = []
    for v in _required(args, key):
        out.extend(x.strip() for x in str(v).split(",") if x.strip())
    if not out:
        raise ArgsError(f"{_flag(key)} is required")
    return out


def list_selector(args: Args) -> str:
    """
    Pick which listing was asked for: "all", "device" or "group".

    When several are supplied the first in that order wins.
    """
    given = [k for k in ("all", "device", "group") if _present(args.get(k))]
    if not given:
        raise ArgsError("one of --all, --device, or --group required")
    if len(given) > 1:
        logger.warning("several of --all, --device, --group given; using %s", _flag(given[0]))
    return given[0]


# ---- handlers

Handler = Callable[[Session, Args], CommandResult]


def _campaign_list(s: Session, args: Args) -> CommandResult:
    if _present(args.get("all")):
        return campaigner.list_campaigns(s)
    if _present(args.get("campaign")):
        return campaigner.get_campaign(s, _uuid(args, "campaign"), stats=bool(args.get("stats")))
    raise ArgsError("one of --all or --campaign required")


def _campaign_create(s: Session, args: Args) -> CommandResult:
    name = _required(args, "name")
    update = _uuid(args, "update")
    groups = [_to_uuid("group", g) for g in _values(args, "group")]
    return campaigner.create_campaign(s, name, update, groups)


def _campaign_create_update(s: Session, args: Args) -> CommandResult:
    update = _uuid(args, "update")
    return campaigner.create_update(s, update, _required(args, "name"), _required(args, "description"))


def _device_type(args: Args) -> registry.DeviceType:
    if _present(args.get("vehicle")):
        return registry.DeviceType.VEHICLE
    if _present(args.get("other")):
        return registry.DeviceType.OTHER
    raise ArgsError("Either --vehicle or --other flag is required")


def _device_list(s: Session, args: Args) -> CommandResult:
    which = list_selector(args)
    if which == "all":
        return registry.list_all_devices(s)
    if which == "device":
        return registry.list_device(s, _uuid(args, "device"))
    return registry.list_devices_in_group(s, _uuid(args, "group"))


def _device_create(s: Session, args: Args) -> CommandResult:
    name = _required(args, "name")
    device_id = _required(args, "id")
    return registry.create_device(s, name, device_id, _device_type(args))


def _group_list(s: Session, args: Args) -> CommandResult:
    which = list_selector(args)
    if which == "all":
        return registry.list_all_groups(s)
    if which == "device":
        return registry.list_groups_of_device(s, _uuid(args, "device"))
    return registry.list_devices_in_group(s, _uuid(args, "group"))


def _group_add(s: Session, args: Args) -> CommandResult:
    group, device = _uuid(args, "group"), _uuid(args, "device")
    return registry.add_to_group(s, group, device)


def _group_remove(s: Session, args: Args) -> CommandResult:
    group, device = _uuid(args, "group"), _uuid(args, "device")
    return registry.remove_from_group(s, group, device)


def _group_rename(s: Session, args: Args) -> CommandResult:
    group = _uuid(args, "group")
    return registry.rename_group(s, group, _required(args, "name"))


def _package_add(s: Session, args: Args) -> CommandResult:
    name, version = _required(args, "name"), _required(args, "version")
    meta = {
        "format": _required(args, "format"),
        "hardware": _values(args, "hardware"),
        "path": str(args["path"]) if _present(args.get("path")) else None,
        "url": args.get("url") or None,
    }
    return reposerver.add_package(s, make_package(name, version, meta))


def _package_upload(s: Session, args: Args) -> CommandResult:
    packages = load_packages(Path(_required(args, "packages")))
    return reposerver.add_packages(s, packages)


def _update_create(s: Session, args: Args) -> CommandResult:
    updates = load_updates(Path(_required(args, "targets")))
    return director.create_mtu(s, updates)


def _update_launch(s: Session, args: Args) -> CommandResult:
    update, device = _uuid(args, "update"), _uuid(args, "device")
    return director.launch_mtu(s, update, device)


HANDLERS: Dict[Command, Dict[Enum, Handler]] = {
    Command.CAMPAIGN: {
        CampaignAction.LIST: _campaign_list,
        CampaignAction.CREATE: _campaign_create,
        CampaignAction.LAUNCH: lambda s, a: campaigner.launch_campaign(s, _uuid(a, "campaign")),
        CampaignAction.CANCEL: lambda s, a: campaigner.cancel_campaign(s, _uuid(a, "campaign")),
        CampaignAction.LIST_UPDATES: lambda s, a: campaigner.list_updates(s),
        CampaignAction.CREATE_UPDATE: _campaign_create_update,
    },
    Command.DEVICE: {
        DeviceAction.LIST: _device_list,
        DeviceAction.CREATE: _device_create,
        DeviceAction.DELETE: lambda s, a: registry.delete_device(s, _uuid(a, "device")),
    },
    Command.GROUP: {
        GroupAction.LIST: _group_list,
        GroupAction.CREATE: lambda s, a: registry.create_group(s, _required(a, "name")),
        GroupAction.ADD: _group_add,
        GroupAction.RENAME: _group_rename,
        GroupAction.REMOVE: _group_remove,
    },
    Command.PACKAGE: {
        PackageAction.LIST: lambda s, a: reposerver.list_packages(s),
        PackageAction.ADD: _package_add,
        PackageAction.FETCH: lambda s, a: reposerver.get_package(s, _required(a, "name"), _required(a, "version")),
        PackageAction.UPLOAD: _package_upload,
    },
    Command.UPDATE: {
        UpdateAction.CREATE: _update_create,
        UpdateAction.LAUNCH: _update_launch,
    },
}


def _init(store: ConfigStore, args: Args) -> CommandResult:
    init_config(
        store,
        credentials_zip=Path(_required(args, "credentials")),
        campaigner=_required(args, "campaigner"),
        director=_required(args, "director"),
        registry=_required(args, "registry"),
        reposerver=args.get("reposerver") or None,
    )
    return EmptyResult()


def dispatch(selection: Selection, args: Args, store: ConfigStore, client: Optional[ApiClient] = None) -> CommandResult:
    """Run one parsed command against the configured services."""
    if selection.command is Command.INIT:
        return _init(store, args)

    handler = HANDLERS[selection.command][selection.action]
    config = store.load()
    with Session(config, store, client) as s:
        return handler(s, args)


def execute(ctx: typer.Context, command: str, action: Optional[str] = None, table: bool = False, **args: Any) -> None:
    """Entry point used by the typer commands: parse, dispatch, render, report errors."""
    obj = ctx.obj or {}
    try:
        selection = parse_command(command, action)
        result = dispatch(selection, args, ConfigStore.default(obj.get("config")))
        out = render(result, table)
    except OtaError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if out:
        typer.echo(out, nl=False)
    if isinstance(result, RawResult) and result.response.is_error:
        raise typer.Exit(code=1)
