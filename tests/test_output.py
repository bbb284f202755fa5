from httpx import Response
from ota_cli.utils.output import EmptyResult, RawResult, TableResult, json_table, render


def _table(raw: bytes) -> TableResult:
    return TableResult.from_response(
        Response(200, content=raw, headers={"content-type": "application/json"}),
        ["name", "version"],
        [["foo", "1"], ["my-branch", "1234"]],
    )


def test_table_off_returns_raw_bytes_unchanged():
    raw = b'{"signed":{"targets":{}},  "signatures" :[]}'
    assert render(_table(raw)) == raw
    assert render(_table(b"\x00not json\xff")) == b"\x00not json\xff"


def test_table_on_formats_rows():
    out = render(_table(b"{}"), table=True).decode()
    assert out.endswith("\n")
    lines = out.splitlines()
    assert lines[0].split() == ["name", "version"]
    assert "my-branch" in out and "1234" in out


def test_table_keeps_response_headers():
    assert _table(b"{}").headers["content-type"] == "application/json"


def test_raw_json_is_pretty_printed():
    out = render(RawResult(Response(200, content=b'{"a":1,"b":[1,2]}')))
    assert out == b'{\n  "a": 1,\n  "b": [\n    1,\n    2\n  ]\n}\n'


def test_raw_non_json_is_verbatim():
    assert render(RawResult(Response(200, content=b"plain text"))) == b"plain text"
    assert render(RawResult(Response(204))) == b""


def test_raw_ignores_table_mode():
    assert render(RawResult(Response(200, content=b"[]")), table=True) == b"[]\n"


def test_empty_renders_nothing():
    assert render(EmptyResult()) == b""
    assert render(EmptyResult(), table=True) == b""


def test_json_table_builds_rows_from_values():
    r = Response(200, json={"values": [{"n": "a"}, {"n": "b"}], "total": 2})
    result = json_table(r, ["n"], lambda it: [it["n"]])
    assert isinstance(result, TableResult)
    assert result.rows == [["a"], ["b"]]
    assert result.raw == r.content


def test_json_table_passes_errors_through():
    r = Response(500, json={"code": "boom"})
    assert isinstance(json_table(r, ["n"], lambda it: [it["n"]]), RawResult)
    r = Response(200, content=b"<html>")
    assert isinstance(json_table(r, ["n"], lambda it: [it["n"]]), RawResult)
