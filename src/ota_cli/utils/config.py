# src/ota_cli/utils/config.py
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..api.auth_plus import AccessToken, Credentials
from ..api.client import ensure_url
from ..api.errors import FilesystemError, NotFoundError, ParseError
from .files import atomic_write, read_zip_entry

logger = logging.getLogger(__name__)

CONFIG_FILE = ".ota.conf"
TUFREPO_ENTRY = "tufrepo.url"


def _base_url(value: str) -> str:
    # endpoint paths are appended directly, e.g. f"{registry}api/v1/devices"
    url = ensure_url(value)
    return url if url.endswith("/") else url + "/"


class Config(BaseModel):
    """
    Values shared by every command: where the credentials live, where each
    service is, and the cached access token (if any).
    """

    credentials_zip: Path
    campaigner: str
    director: str
    registry: str
    reposerver: str
    token: Optional[AccessToken] = None
    # resolved from credentials_zip on first use, never written to disk
    credentials: Optional[Credentials] = Field(default=None, exclude=True)

    @field_validator("campaigner", "director", "registry", "reposerver")
    @classmethod
    def _normalize_url(cls, v: str) -> str:
        return _base_url(v)

    def to_json(self) -> bytes:
        data = self.model_dump(mode="json")
        if data.get("token") is None:
            data.pop("token", None)
        return json.dumps(data, indent=2).encode("utf-8")


@dataclass
class ConfigStore:
    """Load and save the configuration file shared by all invocations."""

    path: Path

    @classmethod
    def default(cls, override: Optional[Path] = None) -> "ConfigStore":
        """
        Resolve the config location. Order:
        1) explicit override (--config)
        2) OTA_CONFIG env var
        3) ~/.ota.conf
        """
        if override:
            return cls(Path(override).expanduser())
        env = os.environ.get("OTA_CONFIG")
        if env:
            return cls(Path(env).expanduser())
        return cls(Path.home() / CONFIG_FILE)

    def load(self) -> Config:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            raise NotFoundError("Config file", "Please run `ota init` first.")
        except OSError as e:
            raise FilesystemError(f"{self.path}: {e}") from e
        try:
            return Config.model_validate_json(raw)
        except ValidationError as e:
            raise ParseError(f"config file {self.path}: {e}") from e

    def save(self, config: Config) -> None:
        logger.debug("saving config to %s", self.path)
        try:
            atomic_write(self.path, config.to_json())
        except OSError as e:
            raise FilesystemError(f"{self.path}: {e}") from e


def reposerver_url(credentials_zip: Path) -> str:
    """Read the TUF reposerver URL bundled in credentials.zip."""
    logger.debug("reading %s from %s", TUFREPO_ENTRY, credentials_zip)
    raw = read_zip_entry(credentials_zip, TUFREPO_ENTRY)
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(f"{credentials_zip}:{TUFREPO_ENTRY}: not valid UTF-8: {e}") from e
    return ensure_url(text.strip())


def init_config(
    store: ConfigStore,
    credentials_zip: Path,
    campaigner: str,
    director: str,
    registry: str,
    reposerver: Optional[str] = None,
) -> Config:
    """Write a fresh config file (without a cached token) and return it."""
    credentials_zip = Path(credentials_zip).expanduser().absolute()
    if reposerver is None:
        reposerver = reposerver_url(credentials_zip)
    try:
        config = Config(
            credentials_zip=credentials_zip,
            campaigner=campaigner,
            director=director,
            registry=registry,
            reposerver=reposerver,
        )
    except ValidationError as e:
        raise ParseError(str(e)) from e
    store.save(config)
    logger.info("config written to %s", store.path)
    return config
