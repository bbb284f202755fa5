"""
TUF reposerver: package targets in the user repository.
"""
from __future__ import annotations
import logging
import os
from typing import List, Optional
from urllib.parse import quote
import httpx
from ..session import Session
from ..targets import TufPackage
from ..utils.output import CommandResult, RawResult, TableResult
from .errors import ArgsError, FilesystemError, ParseError

logger = logging.getLogger(__name__)

PACKAGE_COLUMNS = ["target", "name", "version", "hardware ids", "uri", "target format", "updated at"]


def _targets_url(s: Session, entry: str = "") -> str:
    return f"{s.config.reposerver}api/v1/user_repo/targets/{quote(entry, safe='')}"


def add_package(s: Session, package: TufPackage) -> CommandResult:
    logger.debug("adding package with entry name %s", package.entry)
    url = _targets_url(s, package.entry)
    params = {
        "name": package.name,
        "version": package.version,
        "hardwareIds": ",".join(package.hardware),
        "targetFormat": str(package.format),
    }
    if package.url is not None:
        # (None, value) sends a plain form field inside the multipart body
        r = s.send("PUT", url, params=params, files={"fileUri": (None, package.url)})
        return RawResult(r)

    try:
        with open(package.path, "rb") as fh:
            r = s.send("PUT", url, params=params, files={"file": (os.path.basename(package.path), fh)})
    except OSError as e:
        raise FilesystemError(f"{package.path}: {e}") from e
    return RawResult(r)


def add_packages(s: Session, packages: List[TufPackage]) -> CommandResult:
    """
    Upload packages one at a time and return the last response.

    Stops at the first failed upload and returns that response instead.
    """
    if not packages:
        raise ArgsError("no packages to upload")
    result: Optional[CommandResult] = None
    for i, package in enumerate(packages, 1):
        logger.info("uploading %s (%d/%d)", package.entry, i, len(packages))
        result = add_package(s, package)
        if isinstance(result, RawResult) and result.response.is_error:
            logger.error("upload of %s failed with status %s", package.entry, result.response.status_code)
            break
    return result


def get_package(s: Session, name: str, version: str) -> CommandResult:
    entry = f"{name}_{version}"
    logger.debug("fetching package with entry name %s", entry)
    return RawResult(s.send("GET", _targets_url(s, entry)))


def _package_rows(r: httpx.Response) -> list:
    try:
        targets = r.json()["signed"]["targets"]
    except (ValueError, KeyError, TypeError) as e:
        raise ParseError(f"unexpected targets.json: {e}") from e
    if targets is None:
        targets = {}
    if not isinstance(targets, dict):
        raise ParseError(f"unexpected targets.json: targets is a {type(targets).__name__}, expected an object")
    rows = []
    for target, meta in targets.items():
        if not isinstance(meta or {}, dict):
            raise ParseError(f"unexpected targets.json: entry {target!r} is not an object")
        custom = (meta or {}).get("custom") or {}
        if not isinstance(custom, dict):
            raise ParseError(f"unexpected targets.json: custom of {target!r} is not an object")
        rows.append([
            target,
            custom.get("name"),
            custom.get("version"),
            ", ".join(custom.get("hardwareIds") or []),
            custom.get("uri") or "None",
            custom.get("targetFormat"),
            custom.get("updatedAt"),
        ])
    return rows


def list_packages(s: Session) -> CommandResult:
    logger.debug("listing packages")
    r = s.send("GET", f"{s.config.reposerver}api/v1/user_repo/targets.json")
    if r.is_error:
        return RawResult(r)
    return TableResult.from_response(r, PACKAGE_COLUMNS, _package_rows(r))
