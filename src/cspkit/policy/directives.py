"""Directive and policy records."""

from dataclasses import dataclass, field

from .sources import SourceExpression, same_origin, source_matches
from .types import Candidate, EnforcingOrigin, OriginEquality

# Directives whose value is a source list. Empty lists serialize as 'none'.
SOURCE_LIST_DIRECTIVES = frozenset({
    "default-src",
    "child-src",
    "connect-src",
    "font-src",
    "frame-src",
    "img-src",
    "manifest-src",
    "media-src",
    "object-src",
    "prefetch-src",
    "script-src",
    "script-src-elem",
    "script-src-attr",
    "style-src",
    "style-src-elem",
    "style-src-attr",
    "worker-src",
    "base-uri",
    "form-action",
    "frame-ancestors",
    "navigate-to",
})

KNOWN_DIRECTIVES = SOURCE_LIST_DIRECTIVES | frozenset({
    "block-all-mixed-content",
    "plugin-types",
    "referrer",
    "report-to",
    "report-uri",
    "require-sri-for",
    "require-trusted-types-for",
    "sandbox",
    "trusted-types",
    "upgrade-insecure-requests",
})


@dataclass
class Directive:
    """A named policy rule and its ordered source expressions."""

    name: str
    sources: list[SourceExpression] = field(default_factory=list)

    @property
    def is_source_list(self) -> bool:
        return self.name in SOURCE_LIST_DIRECTIVES

    def matches(
        self,
        origin: EnforcingOrigin,
        candidate: Candidate,
        origin_equals: OriginEquality = same_origin,
    ) -> bool:
        """True if any source expression allows the candidate (logical OR)."""
        return any(
            source_matches(source, origin, candidate, origin_equals=origin_equals)
            for source in self.sources
        )

    def show(self) -> str:
        if not self.sources:
            return f"{self.name} 'none'" if self.is_source_list else self.name
        return " ".join([self.name] + [source.show() for source in self.sources])


@dataclass
class Policy:
    """One serialized policy: an ordered list of directives."""

    directives: list[Directive] = field(default_factory=list)

    def get(self, name: str) -> Directive | None:
        name = name.lower()
        for directive in self.directives:
            if directive.name == name:
                return directive
        return None

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def show(self) -> str:
        return "; ".join(directive.show() for directive in self.directives)
