"""
Per-invocation state: the loaded config, its store, the HTTP client and the
token manager that keeps them in sync.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from .api.auth_plus import AccessToken, Credentials, refresh_token
from .api.client import ApiClient
from .utils.config import Config, ConfigStore

logger = logging.getLogger(__name__)


class TokenManager:
    """Return the cached access token or fetch (and persist) a new one."""

    def __init__(self, store: ConfigStore, client: ApiClient):
        self.store = store
        self.client = client

    def resolve_credentials(self, config: Config) -> Credentials:
        """Parse credentials.zip once and store the result on `config.credentials`."""
        if config.credentials is None:
            config.credentials = Credentials.parse(config.credentials_zip)
        return config.credentials

    def token(self, config: Config) -> Optional[AccessToken]:
        # No expiry check: a cached token is trusted until the config is re-initialized.
        if config.token is not None:
            logger.debug("using cached access token...")
            return config.token

        token = refresh_token(self.resolve_credentials(config), self.client)
        if token is not None:
            config.token = token
            self.store.save(config)
        return token


class Session:
    def __init__(self, config: Config, store: ConfigStore, client: Optional[ApiClient] = None):
        self.config = config
        self.store = store
        self._owns_client = client is None
        self.client = client or ApiClient()
        self.tokens = TokenManager(store, self.client)

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, *exc) -> None:
        if self._owns_client:
            self.client.close()

    def token(self) -> Optional[AccessToken]:
        return self.tokens.token(self.config)

    def send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send an authenticated request to one of the configured services."""
        return self.client.send(method, url, self.token(), **kwargs)
