#!/usr/bin/env python3
"""Command-line utility to validate and inspect Content-Security-Policy text.

Usage:
    python -m cspkit "default-src 'self'; img-src https:" [--strict]
    python -m cspkit -f header.txt --dump --format yaml
    python -m cspkit "img-src 'self'" --origin https://a.com --check img-src https://a.com/x.png

Exit codes:
    0 - Valid policy (or load allowed in check mode)
    1 - Invalid policy (or load denied in check mode)
    2 - File not found or bad arguments
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import yaml

from .logging import init_logging
from .policy import (
    GUID,
    URI,
    Origin,
    ParseOptions,
    PolicyBuilder,
    PolicySyntaxError,
    parse_policy,
    parse_policy_list,
    policy_to_dict,
    tokenize,
)

logger = logging.getLogger(__name__)

# Locations with these schemes have no host/port and are treated as GUIDs
GUID_SCHEMES = ("blob:", "data:", "filesystem:")


def parse_location(text: str) -> URI | GUID:
    """Turn a command-line location into a URI or GUID candidate."""
    if text.lower().startswith(GUID_SCHEMES):
        return GUID(text)
    return URI.parse(text)


def parse_origin(text: str) -> Origin | GUID:
    """Turn a command-line origin into an Origin, or a GUID for opaque origins."""
    if text.lower().startswith(GUID_SCHEMES):
        return GUID(text)
    return Origin.parse(text)


def format_output(data, fmt: str) -> str:
    """Render dump output as JSON or YAML."""
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False).rstrip("\n")
    return json.dumps(data, indent=2)


def check_load(
    policy_text: str,
    directive_name: str,
    origin: Origin | GUID,
    location: URI | GUID,
) -> bool:
    """Check whether a directive of the policy allows loading a location.

    Raises:
        PolicySyntaxError: policy text is invalid.
        KeyError: the policy has no such directive.
    """
    policy = parse_policy(policy_text)
    directive = policy.get(directive_name)
    if directive is None:
        raise KeyError(directive_name)
    allowed = directive.matches(origin, location)
    logger.debug(
        "%s %s under %s: %s",
        directive.show(),
        location.show(),
        origin.show(),
        "allow" if allowed else "deny",
    )
    return allowed


def read_policy_text(args) -> str | None:
    """Read the policy from --file, stdin ("-") or the positional argument."""
    if args.file is not None:
        if not args.file.exists():
            return None
        return args.file.read_text().strip("\r\n")
    if args.policy == "-":
        return sys.stdin.read().strip("\r\n")
    return args.policy


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        description="Validate and inspect Content-Security-Policy header values",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s "default-src 'self'; img-src https:"
  %(prog)s -f header.txt --tokens
  %(prog)s "img-src 'self'" --origin https://a.com --check img-src https://a.com/x.png
""",
    )
    parser.add_argument("policy", nargs="?", help="Policy text, or - to read stdin")
    parser.add_argument(
        "-f", "--file", type=Path, metavar="FILE", help="Read policy text from a file"
    )
    parser.add_argument(
        "--strict", action="store_true", help="Treat warnings as errors"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Only output errors, no summary"
    )
    parser.add_argument(
        "--tokens", action="store_true", help="Output the token stream to stdout"
    )
    parser.add_argument(
        "--dump", action="store_true", help="Output the parsed policies to stdout"
    )
    parser.add_argument(
        "--format",
        choices=["json", "yaml"],
        default="json",
        help="Output format for --tokens and --dump (default: json)",
    )
    parser.add_argument(
        "--origin", metavar="URL", help="Enforcing origin for --check"
    )
    parser.add_argument(
        "--check",
        nargs=2,
        metavar=("DIRECTIVE", "LOCATION"),
        help="Check whether DIRECTIVE allows loading LOCATION",
    )

    args = parser.parse_args(argv)
    init_logging(verbose=args.verbose)

    if args.policy is None and args.file is None:
        parser.error("a policy or --file is required")

    policy_text = read_policy_text(args)
    if policy_text is None:
        print(f"Error: File not found: {args.file}", file=sys.stderr)
        sys.exit(2)

    # Handle --tokens mode
    if args.tokens:
        try:
            tokens = tokenize(policy_text, with_location=True)
        except PolicySyntaxError as e:
            print(f"Syntax error: {e}", file=sys.stderr)
            sys.exit(1)
        print(format_output([token.to_dict() for token in tokens], args.format))
        sys.exit(0)

    # Handle --dump mode
    if args.dump:
        try:
            policies = parse_policy_list(policy_text, ParseOptions(strict=args.strict))
        except PolicySyntaxError as e:
            print(f"Syntax error: {e}", file=sys.stderr)
            sys.exit(1)
        print(format_output([policy_to_dict(p) for p in policies], args.format))
        sys.exit(0)

    # Handle --check mode
    if args.check:
        if not args.origin:
            parser.error("--check requires --origin")
        directive_name, location_text = args.check
        try:
            origin = parse_origin(args.origin)
            location = parse_location(location_text)
        except ValueError as e:
            print(f"Error: Invalid URL: {e}", file=sys.stderr)
            sys.exit(2)
        try:
            allowed = check_load(policy_text, directive_name, origin, location)
        except PolicySyntaxError as e:
            print(f"Syntax error: {e}", file=sys.stderr)
            sys.exit(1)
        except KeyError:
            print(f"Error: Directive not found: {directive_name}", file=sys.stderr)
            sys.exit(2)
        print("allow" if allowed else "deny")
        sys.exit(0 if allowed else 1)

    # Validate (warnings are reported through the logger)
    builder = PolicyBuilder(ParseOptions(strict=args.strict), policy_text)
    try:
        policies = builder.build(tokenize(policy_text, with_location=True))
    except PolicySyntaxError as e:
        print(f"Syntax error: {e}", file=sys.stderr)
        if not args.quiet:
            print("\nValidation failed")
        sys.exit(1)

    if not args.quiet:
        count = sum(len(p.directives) for p in policies)
        print(f"Validation passed: {count} directive(s), {len(builder.warnings)} warning(s)")

    sys.exit(0)


if __name__ == "__main__":
    main()
