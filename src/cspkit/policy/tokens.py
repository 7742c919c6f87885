"""Lexical units produced by the policy tokenizer."""

from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    """Closed set of token kinds."""

    DIRECTIVE_SEPARATOR = "directive-separator"
    POLICY_SEPARATOR = "policy-separator"
    DIRECTIVE_NAME = "directive-name"
    DIRECTIVE_VALUE = "directive-value"


@dataclass(frozen=True)
class Token:
    """A single lexeme and where it starts in the source text."""

    kind: TokenKind
    value: str
    start: int = 0  # code point offset into the tokenized text

    @property
    def end(self) -> int:
        return self.start + len(self.value)

    @property
    def is_separator(self) -> bool:
        return self.kind in (TokenKind.DIRECTIVE_SEPARATOR, TokenKind.POLICY_SEPARATOR)

    def to_dict(self) -> dict:
        """Convert to a plain dict (used by the CLI token dump)."""
        return {"kind": self.kind.value, "value": self.value, "start": self.start}
