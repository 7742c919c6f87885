"""Policy parser - groups tokens into directives and policies.

The tokenizer is the source of truth for what syntax is valid. This module
only gives the token stream structure: directive names are normalized,
keyword sources are resolved and everything else is kept verbatim.
"""

import logging
from dataclasses import dataclass

from .directives import KNOWN_DIRECTIVES, Directive, Policy
from .sources import KeywordSource, SourceExpression, UnparsedSource, source_to_dict
from .tokenizer import PolicySyntaxError, tokenize
from .tokens import Token, TokenKind
from .types import Location

logger = logging.getLogger(__name__)

NONE_KEYWORD = "'none'"


@dataclass
class ParseOptions:
    """Knobs for turning policy text into Policy objects.

    Attributes:
        with_location: Attach line/column to syntax errors
        strict: Raise PolicySyntaxError on warnings instead of collecting them
    """

    with_location: bool = True
    strict: bool = False


DEFAULT_OPTIONS = ParseOptions()


# =============================================================================
# Token stream -> Policy objects
# =============================================================================


class PolicyBuilder:
    """Builds Policy objects from a token list and collects warnings.

    Pass the tokenized text to have strict-mode errors carry a location.
    """

    def __init__(self, options: ParseOptions | None = None, text: str | None = None):
        self.options = options or DEFAULT_OPTIONS
        self.text = text
        self.policies: list[Policy] = []
        self.warnings: list[str] = []
        self._policy = Policy()
        self._directive: Directive | None = None
        self._name_token: Token | None = None
        self._values: list[Token] = []
        self._skip = False

    def _warn(self, message: str, token: Token) -> None:
        if self.options.strict:
            location = None
            if self.options.with_location and self.text is not None:
                location = Location.from_offset(self.text, token.start)
            raise PolicySyntaxError(message, location)
        logger.warning(message)
        self.warnings.append(message)

    def _resolve(self, value: str) -> SourceExpression:
        keyword = KeywordSource.from_text(value)
        if keyword is not None:
            return keyword
        return UnparsedSource(value)

    def _start_directive(self, token: Token) -> None:
        name = token.value.lower()
        self._values = []
        if name in self._policy:
            self._warn(f"duplicate directive {name} (only the first is used)", token)
            self._directive = None
            self._skip = True
            return
        if name not in KNOWN_DIRECTIVES:
            self._warn(f"unrecognised directive {name}", token)
        self._directive = Directive(name=name)
        self._name_token = token
        self._skip = False

    def _finish_directive(self) -> None:
        directive = self._directive
        self._directive = None
        if directive is None:
            return
        values = [token.value for token in self._values]
        if directive.is_source_list and any(v.lower() == NONE_KEYWORD for v in values):
            if len(values) == 1:
                values = []
            else:
                self._warn(
                    f"{directive.name}: 'none' must not be combined with other source expressions",
                    self._name_token,
                )
        directive.sources = [self._resolve(value) for value in values]
        self._policy.directives.append(directive)

    def _finish_policy(self) -> None:
        self._finish_directive()
        self.policies.append(self._policy)
        self._policy = Policy()

    def build(self, tokens: list[Token]) -> list[Policy]:
        """Consume tokens and return one Policy per policy-separated section."""
        for token in tokens:
            if token.kind == TokenKind.POLICY_SEPARATOR:
                self._finish_policy()
            elif token.kind == TokenKind.DIRECTIVE_SEPARATOR:
                self._finish_directive()
            elif token.kind == TokenKind.DIRECTIVE_NAME:
                self._start_directive(token)
            elif not self._skip:
                self._values.append(token)
        self._finish_policy()
        return self.policies


# =============================================================================
# Public API
# =============================================================================


def parse_policy_list(text: str, options: ParseOptions | None = None) -> list[Policy]:
    """Parse comma-joined serialized policies.

    Raises:
        PolicySyntaxError: on the first lexical error (or warning when strict).
    """
    options = options or DEFAULT_OPTIONS
    tokens = tokenize(text, with_location=options.with_location)
    return PolicyBuilder(options, text).build(tokens)


def parse_policy(text: str, options: ParseOptions | None = None) -> Policy:
    """Parse exactly one serialized policy.

    Example:
        >>> parse_policy("script-src 'self' 'unsafe-eval'").show()
        "script-src 'self' 'unsafe-eval'"
    """
    options = options or DEFAULT_OPTIONS
    tokens = tokenize(text, with_location=options.with_location)
    for token in tokens:
        if token.kind == TokenKind.POLICY_SEPARATOR:
            location = Location.from_offset(text, token.start) if options.with_location else None
            raise PolicySyntaxError(
                f"expecting end of policy but found {token.value}", location
            )
    return PolicyBuilder(options, text).build(tokens)[0]


def validate_policy(text: str) -> list[str]:
    """Validate policy text and return error and warning messages.

    Returns:
        Empty list if the text is valid and raised no warnings. A syntax
        error stops validation and is returned on its own.
    """
    try:
        tokens = tokenize(text, with_location=True)
    except PolicySyntaxError as e:
        return [str(e)]
    builder = PolicyBuilder(ParseOptions(with_location=True, strict=False), text)
    builder.build(tokens)
    return list(builder.warnings)


def show_policy_list(policies: list[Policy]) -> str:
    """Serialize policies back to header text."""
    return ", ".join(policy.show() for policy in policies)


def directive_to_dict(directive: Directive) -> dict:
    return {
        "name": directive.name,
        "sources": [source_to_dict(source) for source in directive.sources],
    }


def policy_to_dict(policy: Policy) -> dict:
    """Convert a Policy to a dictionary matching test fixture format."""
    return {"directives": [directive_to_dict(d) for d in policy.directives]}
