"""
Declarative package and update-request files.

Package files map package name -> version -> metadata:

    [my-branch.1234]
    format = "ostree"
    hardware = ["qemux86-64"]
    path = "/ota/my-branch-01234"

Update files map hardware id -> target request:

    [qemux86-64]
    format = "ostree"
    generate_diff = false
    to = { name = "my-branch", version = "1234", length = 0, hash = "..." }

Both are expanded into flat, validated records before any request is sent.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older interpreters
    import tomli as tomllib  # type: ignore

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .api.client import ensure_url
from .api.errors import ParseError, describe_validation_error
from .utils.files import read_text


class TargetFormat(str, Enum):
    BINARY = "binary"
    OSTREE = "ostree"

    def __str__(self) -> str:
        return self.value.upper()


class ChecksumMethod(str, Enum):
    SHA256 = "sha256"
    SHA512 = "sha512"


class TufPackage(BaseModel):
    """A package target to upload, stored at either a local path or a remote URL."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    format: TargetFormat
    hardware: List[str] = Field(min_length=1)
    path: Optional[str] = None
    url: Optional[str] = None

    @field_validator("format", mode="before")
    @classmethod
    def _fold_format(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v

    @field_validator("url")
    @classmethod
    def _valid_url(cls, v: Optional[str]) -> Optional[str]:
        return ensure_url(v) if v is not None else v

    @model_validator(mode="after")
    def _one_target(self) -> "TufPackage":
        if self.path is not None and self.url is not None:
            raise ValueError("Either `path` or `url` expected. Not both.")
        if self.path is None and self.url is None:
            raise ValueError("One of `path` or `url` required.")
        return self

    @property
    def entry(self) -> str:
        return f"{self.name}-{self.version}"


def make_package(name: str, version: str, meta: Any) -> TufPackage:
    if not isinstance(meta, Mapping):
        raise ParseError(f"{name} {version}: expected a table of package metadata")
    try:
        return TufPackage(
            name=name,
            version=version,
            format=meta.get("format"),
            hardware=meta.get("hardware") or [],
            path=meta.get("path"),
            url=meta.get("url"),
        )
    except ValidationError as e:
        raise ParseError(f"{name} {version}: {describe_validation_error(e)}") from e


def expand_packages(mapping: Mapping[str, Any]) -> List[TufPackage]:
    """
    Flatten `name -> version -> metadata` into one TufPackage per version.

    Records come out in the mapping's insertion order. A single invalid
    record fails the whole expansion.
    """
    packages: List[TufPackage] = []
    for name, versions in mapping.items():
        if not isinstance(versions, Mapping):
            raise ParseError(f"{name}: expected a table of versions")
        for version, meta in versions.items():
            packages.append(make_package(str(name), str(version), meta))
    return packages


def _load_toml(path: Path) -> Dict[str, Any]:
    try:
        return tomllib.loads(read_text(path))
    except tomllib.TOMLDecodeError as e:
        raise ParseError(f"{path}: invalid TOML: {e}") from e


def load_packages(path: Path) -> List[TufPackage]:
    return expand_packages(_load_toml(path))


class TufTarget(BaseModel):
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    name: str
    version: str
    length: int = Field(ge=0)
    hash: str
    method: ChecksumMethod = ChecksumMethod.SHA256

    @field_validator("method", mode="before")
    @classmethod
    def _fold_method(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v

    def to_payload(self) -> Dict[str, Any]:
        return {
            "target": f"{self.name}-{self.version}",
            "checksum": {"method": self.method.value, "hash": self.hash},
            "targetLength": self.length,
        }


class TargetRequest(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    to: TufTarget
    from_: Optional[TufTarget] = Field(default=None, alias="from")
    format: TargetFormat
    generate_diff: bool = False

    @field_validator("format", mode="before")
    @classmethod
    def _fold_format(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "to": self.to.to_payload(),
            "targetFormat": str(self.format),
            "generateDiff": self.generate_diff,
        }
        if self.from_ is not None:
            payload["from"] = self.from_.to_payload()
        return payload


@dataclass
class TufUpdates:
    """Update requests keyed by hardware id, ready for the director."""
    targets: Dict[str, TargetRequest] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        return {"targets": {hw: req.to_payload() for hw, req in self.targets.items()}}


def expand_updates(mapping: Mapping[str, Any]) -> TufUpdates:
    updates = TufUpdates()
    for hardware_id, request in mapping.items():
        try:
            updates.targets[str(hardware_id)] = TargetRequest.model_validate(request)
        except ValidationError as e:
            raise ParseError(f"{hardware_id}: {describe_validation_error(e)}") from e
    if not updates.targets:
        raise ParseError("no update targets found")
    return updates


def load_updates(path: Path) -> TufUpdates:
    return expand_updates(_load_toml(path))
