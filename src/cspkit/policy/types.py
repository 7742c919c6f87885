"""Value objects: origins, candidate locations and source positions."""

from dataclasses import dataclass
from typing import Callable
from urllib.parse import urlparse

DEFAULT_PORTS = {
    "http": 80,
    "https": 443,
    "ws": 80,
    "wss": 443,
    "ftp": 21,
}


def _split_netloc(text: str) -> tuple[str, str, int | None, str]:
    parsed = urlparse(text)
    scheme = parsed.scheme.lower()
    host = (parsed.hostname or "").lower()
    port = parsed.port if parsed.port is not None else DEFAULT_PORTS.get(scheme)
    return scheme, host, port, parsed.path


@dataclass(frozen=True)
class Origin:
    """Scheme/host/port triple of the enforcing document."""

    scheme: str
    host: str
    port: int | None = None

    @classmethod
    def parse(cls, text: str) -> "Origin":
        """Build an Origin from a URL, filling in the scheme's default port."""
        scheme, host, port, _ = _split_netloc(text)
        return cls(scheme=scheme, host=host, port=port)

    def show(self) -> str:
        if self.port is None or DEFAULT_PORTS.get(self.scheme) == self.port:
            return f"{self.scheme}://{self.host}"
        return f"{self.scheme}://{self.host}:{self.port}"


@dataclass(frozen=True)
class URI:
    """Location of a network resource load."""

    scheme: str
    host: str
    port: int | None = None
    path: str = ""

    @classmethod
    def parse(cls, text: str) -> "URI":
        scheme, host, port, path = _split_netloc(text)
        return cls(scheme=scheme, host=host, port=port, path=path)

    @property
    def origin(self) -> Origin:
        return Origin(scheme=self.scheme, host=self.host, port=self.port)

    def show(self) -> str:
        return self.origin.show() + self.path


@dataclass(frozen=True)
class GUID:
    """Opaque identifier for a non-network location (blob:, data:, ...).

    A GUID can also stand in for an opaque enforcing origin.
    """

    value: str

    def show(self) -> str:
        return self.value


EnforcingOrigin = Origin | GUID
Candidate = URI | GUID
OriginEquality = Callable[[EnforcingOrigin, Candidate], bool]


@dataclass(frozen=True)
class Location:
    """Position in source text: 1-based line and column, 0-based offset."""

    line: int
    column: int
    offset: int

    @classmethod
    def from_offset(cls, text: str, offset: int) -> "Location":
        line_start = text.rfind("\n", 0, offset) + 1
        return cls(
            line=text.count("\n", 0, offset) + 1,
            column=offset - line_start + 1,
            offset=offset,
        )

    def show(self) -> str:
        return f"{self.line}:{self.column}"

