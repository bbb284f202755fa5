import pytest
from ota_cli.api.auth_plus import AccessToken, Credentials
from ota_cli.api.errors import ArchiveError, AuthError, FilesystemError, ParseError, TokenError
from conftest import OAUTH2, OSTREE, make_zip


class TestNamespace:
    def test_single_namespace(self):
        t = AccessToken(access_token="t", scope="uptane.read namespace.acme uptane.write")
        assert t.namespace() == "acme"

    @pytest.mark.parametrize("scope", [None, "", "uptane.read uptane.write", "namespaceacme"])
    def test_missing_namespace(self, scope):
        with pytest.raises(TokenError, match="namespace not found"):
            AccessToken(access_token="t", scope=scope).namespace()

    def test_multiple_namespaces(self):
        t = AccessToken(access_token="t", scope="namespace.acme namespace.other")
        with pytest.raises(TokenError, match="multiple namespaces"):
            t.namespace()

    def test_token_response_extra_fields_ignored(self):
        t = AccessToken.model_validate_json('{"access_token": "t", "scope": "namespace.x", "expires_in": 3600}')
        assert t.model_dump() == {"access_token": "t", "scope": "namespace.x"}


class TestCredentials:
    def test_parse_oauth2(self, oauth_zip):
        creds = Credentials.parse(oauth_zip)
        assert creds.no_auth is None
        assert creds.oauth2.client_id == "client"
        assert creds.auth_method() == creds.oauth2

    def test_no_auth_wins_over_oauth2(self, no_auth_zip):
        creds = Credentials.parse(no_auth_zip)
        assert creds.oauth2 is not None
        assert creds.auth_method() is None

    def test_no_auth_false_uses_oauth2(self, tmp_path):
        path = make_zip(tmp_path / "c.zip", {"no_auth": False, "oauth2": OAUTH2, "ostree": OSTREE})
        assert Credentials.parse(path).auth_method().server == "https://auth.example.com"

    def test_neither_auth_method(self, tmp_path):
        path = make_zip(tmp_path / "c.zip", {"ostree": OSTREE})
        with pytest.raises(AuthError):
            Credentials.parse(path).auth_method()

    def test_missing_entry(self, tmp_path):
        path = make_zip(tmp_path / "c.zip", None)
        with pytest.raises(ArchiveError, match="treehub.json"):
            Credentials.parse(path)

    def test_not_a_zip(self, tmp_path):
        path = tmp_path / "c.zip"
        path.write_bytes(b"definitely not a zip")
        with pytest.raises(ArchiveError):
            Credentials.parse(path)

    def test_missing_archive(self, tmp_path):
        with pytest.raises(FilesystemError):
            Credentials.parse(tmp_path / "nope.zip")

    def test_bad_shape(self, tmp_path):
        path = make_zip(tmp_path / "c.zip", {"oauth2": {"server": "https://auth.example.com"}, "ostree": OSTREE})
        with pytest.raises(ParseError):
            Credentials.parse(path)

    def test_bad_json(self, tmp_path):
        path = make_zip(tmp_path / "c.zip", "{not json")
        with pytest.raises(ParseError):
            Credentials.parse(path)
