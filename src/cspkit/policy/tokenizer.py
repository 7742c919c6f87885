"""Policy tokenizer - splits serialized CSP text into tokens.

Token shapes are declared as a parsimonious grammar and matched one at a time
at a single forward cursor. There is no backtracking. Every loop iteration
either consumes input or raises, so tokenization always terminates.
"""

import logging

from parsimonious.exceptions import ParseError
from parsimonious.grammar import Grammar

from .tokens import Token, TokenKind
from .types import Location

logger = logging.getLogger(__name__)

# =============================================================================
# Token grammar
# =============================================================================

# directive-value is printable ASCII minus space, ";" (0x3B) and "," (0x2C)
GRAMMAR = Grammar(r"""
directive_separator = ";"
policy_separator    = ","
directive_name      = ~"[a-zA-Z0-9-]+"
directive_value     = ~"[!-+--:<-~]+"
ws                  = ~"[ \t]+"
""")

WHITESPACE = (" ", "\t")


class PolicySyntaxError(ValueError):
    """Raised for the first grammar violation in policy text.

    Attributes:
        message: Human-readable description of the violation
        location: Where it happened, if the producer attached one
    """

    def __init__(self, message: str, location: Location | None = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self) -> str:
        if self.location is None:
            return self.message
        return f"{self.location.show()}: {self.message}"


class Tokenizer:
    """Single-use tokenizer over one piece of policy text."""

    def __init__(self, text: str):
        self.text = text
        self.length = len(text)
        self.index = 0
        self.tokens: list[Token] = []
        self._used = False
        self._eat_whitespace()

    def _create_error(self, message: str) -> PolicySyntaxError:
        return PolicySyntaxError(message)

    def _has_next(self) -> bool:
        return self.index < self.length

    def _eat(self, kind: TokenKind, rule: str, record: bool = True) -> bool:
        if not self._has_next():
            return False
        try:
            node = GRAMMAR[rule].match(self.text, self.index)
        except ParseError:
            return False
        if record:
            self.tokens.append(Token(kind=kind, value=node.text, start=self.index))
        self.index = node.end
        self._eat_whitespace()
        return True

    def _eat_whitespace(self) -> None:
        if not self._has_next():
            return
        try:
            self.index = GRAMMAR["ws"].match(self.text, self.index).end
        except ParseError:
            pass

    def _closes_directive(self) -> bool:
        return bool(self.tokens) and not self.tokens[-1].is_separator

    def _eat_separator(self) -> bool:
        # ";" is only recorded when it ends a non-empty directive
        return self._eat(
            TokenKind.DIRECTIVE_SEPARATOR,
            "directive_separator",
            record=self._closes_directive(),
        ) or self._eat(TokenKind.POLICY_SEPARATOR, "policy_separator")

    def _eat_directive_name(self) -> bool:
        return self._eat(TokenKind.DIRECTIVE_NAME, "directive_name")

    def _eat_directive_value(self) -> bool:
        return self._eat(TokenKind.DIRECTIVE_VALUE, "directive_value")

    def _lookahead(self) -> str:
        """Text from the cursor up to the next whitespace or ";" (cursor unchanged)."""
        end = self.index
        while end < self.length:
            ch = self.text[end]
            if ch in WHITESPACE or ch == ";":
                break
            end += 1
        return self.text[self.index:end]

    def tokenize(self) -> list[Token]:
        """Run the tokenizer. Raises PolicySyntaxError on the first violation."""
        if self._used:
            raise RuntimeError("Tokenizer instances are single-use")
        self._used = True

        while self._has_next():
            if self._eat_separator():
                continue
            if not self._eat_directive_name():
                raise self._create_error(
                    f"expecting directive-name but found {self._lookahead()}"
                )
            if self._eat_separator():
                continue
            while self._has_next():
                if not self._eat_directive_value():
                    char = self._lookahead()[0]
                    raise self._create_error(
                        f"expecting directive-value but found U+{ord(char):04X} ({char}). "
                        "Non-ASCII and non-printable characters must be percent-encoded"
                    )
                if self._eat_separator():
                    break

        logger.debug("tokenized %d characters into %d tokens", self.length, len(self.tokens))
        return list(self.tokens)


class LocatingTokenizer(Tokenizer):
    """Tokenizer whose errors carry the line/column of the cursor."""

    def _create_error(self, message: str) -> PolicySyntaxError:
        return PolicySyntaxError(message, Location.from_offset(self.text, self.index))


def tokenize(text: str, with_location: bool = False) -> list[Token]:
    """Tokenize serialized policy text.

    Args:
        text: Raw header value, e.g. "default-src 'self'; img-src https:".
        with_location: Attach line/column information to syntax errors.

    Returns:
        The complete token list. Nothing is returned on failure.

    Example:
        >>> [t.value for t in tokenize("img-src 'self'")]
        ['img-src', "'self'"]
    """
    cls = LocatingTokenizer if with_location else Tokenizer
    return cls(text).tokenize()
