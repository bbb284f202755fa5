"""
Auth+ access tokens and the credentials bundled in credentials.zip.
"""
from __future__ import annotations
from typing import TYPE_CHECKING, List, Optional
from pathlib import Path
import logging
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from .client import ensure_url
from .errors import AuthError, ParseError, TokenError
from ..utils.files import read_zip_entry

if TYPE_CHECKING:
    from .client import ApiClient

logger = logging.getLogger(__name__)

TREEHUB_ENTRY = "treehub.json"
NAMESPACE_PREFIX = "namespace."


class AccessToken(BaseModel):
    """Bearer token returned by the Auth+ token endpoint."""

    access_token: str
    scope: Optional[str] = None

    def namespace(self) -> str:
        """
        Return the tenant namespace encoded in the token scope.

        Exactly one `namespace.<name>` scope entry must be present.
        """
        found: List[str] = [
            s[len(NAMESPACE_PREFIX):] for s in (self.scope or "").split() if s.startswith(NAMESPACE_PREFIX)
        ]
        if len(found) == 1:
            return found[0]
        if not found:
            raise TokenError("namespace not found")
        raise TokenError(f"multiple namespaces found: {found}")


class OAuth2(BaseModel):
    model_config = ConfigDict(frozen=True)

    server: str
    client_id: str
    client_secret: str

    @field_validator("server")
    @classmethod
    def _valid_server(cls, v: str) -> str:
        ensure_url(v)
        return v.rstrip("/")


class Ostree(BaseModel):
    model_config = ConfigDict(frozen=True)

    server: str

    @field_validator("server")
    @classmethod
    def _valid_server(cls, v: str) -> str:
        return ensure_url(v)


class Credentials(BaseModel):
    """Parsed contents of `treehub.json`."""

    model_config = ConfigDict(frozen=True)

    no_auth: Optional[bool] = None
    oauth2: Optional[OAuth2] = None
    ostree: Ostree

    @classmethod
    def parse(cls, credentials_zip: Path) -> "Credentials":
        logger.debug("reading %s from zip file: %s", TREEHUB_ENTRY, credentials_zip)
        raw = read_zip_entry(credentials_zip, TREEHUB_ENTRY)
        try:
            return cls.model_validate_json(raw)
        except ValidationError as e:
            raise ParseError(f"{TREEHUB_ENTRY}: {e}") from e

    def auth_method(self) -> Optional[OAuth2]:
        """Return the OAuth2 descriptor, or None when authentication is disabled."""
        if self.no_auth is True:
            return None
        if self.oauth2 is not None:
            return self.oauth2
        raise AuthError("no parseable auth method from credentials.zip")


def refresh_token(credentials: Credentials, client: "ApiClient") -> Optional[AccessToken]:
    """Fetch a new access token with the client-credentials grant."""
    oauth2 = credentials.auth_method()
    if oauth2 is None:
        logger.debug("skipping oauth2 authentication...")
        return None

    logger.debug("fetching access token from auth-plus server %s", oauth2.server)
    r = client.post(
        f"{oauth2.server}/token",
        auth=(oauth2.client_id, oauth2.client_secret),
        data={"grant_type": "client_credentials"},
    )
    if r.is_error:
        raise TokenError(f"token request failed with status {r.status_code}: {r.text.strip()}")
    try:
        return AccessToken.model_validate_json(r.content)
    except ValidationError as e:
        raise TokenError(f"unexpected token response: {e}") from e
