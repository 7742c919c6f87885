"""Source expressions and the source matching predicate.

Only keyword sources take part in matching. Every other directive value is
kept verbatim as an UnparsedSource, which serializes unchanged and never
allows a load.
"""

from dataclasses import dataclass
from enum import Enum

from .types import GUID, URI, Candidate, EnforcingOrigin, Origin, OriginEquality


def same_origin(origin: EnforcingOrigin, candidate: Candidate) -> bool:
    """Default origin equality used by the 'self' keyword.

    Network origins compare by scheme/host/port (the URI path is ignored).
    An opaque (GUID) origin equals only an identical GUID, and a network
    origin never equals a GUID.
    """
    if isinstance(origin, Origin) and isinstance(candidate, URI):
        return (origin.scheme, origin.host, origin.port) == (
            candidate.scheme,
            candidate.host,
            candidate.port,
        )
    if isinstance(origin, GUID) and isinstance(candidate, GUID):
        return origin.value == candidate.value
    return False


class KeywordSource(Enum):
    """The quoted keyword source expressions."""

    SELF = "self"
    UNSAFE_INLINE = "unsafe-inline"
    UNSAFE_EVAL = "unsafe-eval"
    UNSAFE_REDIRECT = "unsafe-redirect"

    @classmethod
    def from_text(cls, text: str) -> "KeywordSource | None":
        """Resolve quoted keyword text (e.g. "'self'") to its member.

        Keywords are ASCII case-insensitive. Returns None for anything else.
        """
        if len(text) < 3 or text[0] != "'" or text[-1] != "'":
            return None
        try:
            return cls(text[1:-1].lower())
        except ValueError:
            return None

    def matches(
        self,
        origin: EnforcingOrigin,
        candidate: Candidate,
        origin_equals: OriginEquality = same_origin,
    ) -> bool:
        # unsafe-* keywords gate inline/eval/redirect handling, not URLs
        return self is KeywordSource.SELF and origin_equals(origin, candidate)

    def show(self) -> str:
        return f"'{self.value}'"


@dataclass(frozen=True)
class UnparsedSource:
    """A directive value this library keeps but does not interpret."""

    value: str

    def matches(
        self,
        origin: EnforcingOrigin,
        candidate: Candidate,
        origin_equals: OriginEquality = same_origin,
    ) -> bool:
        return False

    def show(self) -> str:
        return self.value


SourceExpression = KeywordSource | UnparsedSource


def source_matches(
    source: SourceExpression,
    origin: EnforcingOrigin,
    candidate: Candidate,
    origin_equals: OriginEquality = same_origin,
) -> bool:
    """Check one source expression against a candidate location."""
    if isinstance(source, KeywordSource):
        return source.matches(origin, candidate, origin_equals=origin_equals)
    if isinstance(source, UnparsedSource):
        return False
    raise TypeError(f"Unexpected source expression: {type(source).__name__}")


def source_to_dict(source: SourceExpression) -> dict:
    """Convert a source expression to a dict matching the fixture format."""
    if isinstance(source, KeywordSource):
        return {"type": "keyword", "value": source.show()}
    return {"type": "unparsed", "value": source.value}
