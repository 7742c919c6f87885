"""Policy tokenizing, parsing and source matching."""

from .parser import (
    DEFAULT_OPTIONS,
    ParseOptions,
    PolicyBuilder,
    parse_policy,
    parse_policy_list,
    policy_to_dict,
    show_policy_list,
    validate_policy,
)
from .sources import (
    KeywordSource,
    SourceExpression,
    UnparsedSource,
    same_origin,
    source_matches,
)
from .tokenizer import LocatingTokenizer, PolicySyntaxError, Tokenizer, tokenize
from .tokens import Token, TokenKind
from .directives import KNOWN_DIRECTIVES, SOURCE_LIST_DIRECTIVES, Directive, Policy
from .types import GUID, URI, Location, Origin

__all__ = [
    # Types
    "Origin",
    "URI",
    "GUID",
    "Location",
    "Directive",
    "Policy",
    "KNOWN_DIRECTIVES",
    "SOURCE_LIST_DIRECTIVES",
    # Tokenizer
    "Token",
    "TokenKind",
    "Tokenizer",
    "LocatingTokenizer",
    "PolicySyntaxError",
    "tokenize",
    # Sources
    "KeywordSource",
    "UnparsedSource",
    "SourceExpression",
    "same_origin",
    "source_matches",
    # Parser
    "ParseOptions",
    "DEFAULT_OPTIONS",
    "PolicyBuilder",
    "parse_policy",
    "parse_policy_list",
    "policy_to_dict",
    "show_policy_list",
    "validate_policy",
]
