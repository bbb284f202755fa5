from __future__ import annotations
from typing import Optional


class OtaError(Exception):
    """Base class for every error surfaced to the command line."""

    prefix = ""

    def __str__(self) -> str:
        msg = super().__str__()
        return f"{self.prefix}: {msg}" if self.prefix else msg


class ArgsError(OtaError):
    prefix = "Command args"


class AuthError(OtaError):
    prefix = "Authorization"


class CommandError(OtaError):
    prefix = "Command input"


class ParseError(OtaError, ValueError):
    prefix = "Parse error"


class TokenError(OtaError):
    prefix = "Parsing access token"


class TransportError(OtaError):
    prefix = "HTTP"


class FilesystemError(OtaError):
    prefix = "I/O"


class ArchiveError(OtaError):
    prefix = "Zip I/O"


class NotFoundError(OtaError):
    def __init__(self, name: str, hint: Optional[str] = None):
        super().__init__(name)
        self.name = name
        self.hint = hint

    def __str__(self) -> str:
        if self.hint:
            return f"{self.name} not found. {self.hint}"
        return f"{self.name} not found."


def describe_validation_error(err) -> str:
    """Flatten a pydantic ValidationError into a one-line message."""
    parts = []
    for e in err.errors():
        loc = ".".join(str(x) for x in e.get("loc", ()))
        parts.append(f"{loc}: {e['msg']}" if loc else e["msg"])
    return "; ".join(parts)
