import json
import zipfile
import pytest
from ota_cli.api.auth_plus import AccessToken
from ota_cli.utils.config import Config, ConfigStore

OAUTH2 = {"server": "https://auth.example.com", "client_id": "client", "client_secret": "secret"}
OSTREE = {"server": "https://treehub.example.com/api/v3/"}
TUFREPO = "https://repo.example.com/"


def make_zip(path, treehub, tufrepo=TUFREPO):
    with zipfile.ZipFile(path, "w") as zf:
        if treehub is not None:
            zf.writestr("treehub.json", treehub if isinstance(treehub, str) else json.dumps(treehub))
        if tufrepo is not None:
            zf.writestr("tufrepo.url", tufrepo)
    return path


def make_config(credentials_zip, token=None):
    return Config(
        credentials_zip=credentials_zip,
        campaigner="https://campaigner.example.com",
        director="https://director.example.com",
        registry="https://registry.example.com",
        reposerver="https://repo.example.com",
        token=token,
    )


@pytest.fixture
def oauth_zip(tmp_path):
    return make_zip(tmp_path / "credentials.zip", {"oauth2": OAUTH2, "ostree": OSTREE})


@pytest.fixture
def no_auth_zip(tmp_path):
    return make_zip(tmp_path / "credentials.zip", {"no_auth": True, "oauth2": OAUTH2, "ostree": OSTREE})


@pytest.fixture
def store(tmp_path):
    return ConfigStore(tmp_path / "ota.conf")


@pytest.fixture
def token():
    return AccessToken(access_token="abc", scope="namespace.acme uptane.read")


@pytest.fixture
def saved_config(store, oauth_zip, token):
    """A config on disk with a cached token, so no token request is needed."""
    config = make_config(oauth_zip, token=token)
    store.save(config)
    return config
