from __future__ import annotations
import json
from dataclasses import dataclass, field
from typing import Any, List, Sequence, Union
import httpx
from tabulate import tabulate


@dataclass(frozen=True)
class TableResult:
    """A tabular view that keeps the response bytes it was built from."""
    headers: httpx.Headers
    raw: bytes
    columns: Sequence[str]
    rows: List[Sequence[Any]] = field(default_factory=list)

    @classmethod
    def from_response(cls, r: httpx.Response, columns: Sequence[str], rows: List[Sequence[Any]]) -> "TableResult":
        return cls(headers=r.headers, raw=r.content, columns=columns, rows=rows)

    def table(self) -> str:
        return tabulate(self.rows, headers=list(self.columns))


@dataclass(frozen=True)
class RawResult:
    response: httpx.Response


@dataclass(frozen=True)
class EmptyResult:
    pass


CommandResult = Union[TableResult, RawResult, EmptyResult]


def pretty_json(body: bytes) -> bytes:
    """Indent a JSON body; anything that doesn't parse is returned verbatim."""
    try:
        data = json.loads(body)
    except (ValueError, UnicodeDecodeError):
        return body
    return (json.dumps(data, indent=2, ensure_ascii=False) + "\n").encode("utf-8")


def render(result: CommandResult, table: bool = False) -> bytes:
    if isinstance(result, TableResult):
        if table:
            return (result.table() + "\n").encode("utf-8")
        # table mode is display-only: without it the server bytes pass through untouched
        return result.raw
    if isinstance(result, RawResult):
        return pretty_json(result.response.content)
    if isinstance(result, EmptyResult):
        return b""
    raise TypeError(f"unknown command result: {result!r}")


def as_items(data) -> list:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        return data.get("values") or data.get("items") or []
    return []


def json_table(r: httpx.Response, columns: Sequence[str], row) -> CommandResult:
    """Tabulate a JSON listing; error or non-JSON responses pass through as raw results."""
    if r.is_error:
        return RawResult(r)
    try:
        data = r.json()
    except ValueError:
        return RawResult(r)
    rows = [row(it) if isinstance(it, dict) else [it] for it in as_items(data)]
    return TableResult.from_response(r, columns, rows)
