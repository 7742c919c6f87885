"""Tests for the policy command-line tool."""

import json
import sys
from pathlib import Path

import pytest
import yaml

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cspkit.cli import (
    check_load,
    format_output,
    main,
    parse_location,
    parse_origin,
)
from cspkit.policy import GUID, URI, Origin, PolicySyntaxError


def run_main(argv):
    """Run main() and return its exit code."""
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


class TestParseLocation:
    """Command-line locations become URIs or GUIDs."""

    def test_url(self):
        assert parse_location("https://a.example/x.png") == URI("https", "a.example", 443, "/x.png")

    def test_explicit_port(self):
        assert parse_location("http://a.example:8080/").port == 8080

    @pytest.mark.parametrize("text", ["blob:https://a.example/1", "data:image/png;base64,AA=="])
    def test_guid(self, text):
        assert parse_location(text) == GUID(text)

    def test_origin(self):
        assert parse_origin("https://A.example/ignored") == Origin("https", "a.example", 443)
        assert parse_origin("blob:x") == GUID("blob:x")


class TestCheckLoad:
    """check_load() evaluates one directive of a policy."""

    def test_allowed(self):
        origin = Origin("https", "a.example", 443)
        assert check_load("img-src 'self'", "img-src", origin, URI("https", "a.example", 443, "/"))

    def test_denied(self):
        origin = Origin("https", "a.example", 443)
        assert not check_load(
            "img-src 'unsafe-inline'", "img-src", origin, URI("https", "a.example", 443, "/")
        )

    def test_missing_directive(self):
        with pytest.raises(KeyError):
            check_load("img-src 'self'", "script-src", Origin("https", "a", 443), GUID("blob:x"))

    def test_syntax_error(self):
        with pytest.raises(PolicySyntaxError):
            check_load("img-src ü", "img-src", Origin("https", "a", 443), GUID("blob:x"))


class TestFormatOutput:
    def test_json(self):
        assert json.loads(format_output([{"a": 1}], "json")) == [{"a": 1}]

    def test_yaml(self):
        assert yaml.safe_load(format_output([{"a": 1}], "yaml")) == [{"a": 1}]


class TestMain:
    """End-to-end runs of main()."""

    def test_valid_policy(self, capsys):
        assert run_main(["default-src 'self'; img-src https:"]) == 0
        assert "Validation passed: 2 directive(s), 0 warning(s)" in capsys.readouterr().out

    def test_syntax_error(self, capsys):
        assert run_main(["img-src ü"]) == 1
        captured = capsys.readouterr()
        assert "1:9: expecting directive-value but found U+00FC" in captured.err
        assert "Validation failed" in captured.out

    def test_warning_passes_unless_strict(self, capsys):
        assert run_main(["img-src a; img-src b"]) == 0
        captured = capsys.readouterr()
        assert "1 warning(s)" in captured.out
        assert "duplicate directive img-src" in captured.err
        assert run_main(["--strict", "img-src a; img-src b"]) == 1

    def test_quiet(self, capsys):
        assert run_main(["-q", "img-src a"]) == 0
        assert capsys.readouterr().out == ""

    def test_tokens(self, capsys):
        assert run_main(["--tokens", "img-src 'self'"]) == 0
        tokens = json.loads(capsys.readouterr().out)
        assert tokens == [
            {"kind": "directive-name", "value": "img-src", "start": 0},
            {"kind": "directive-value", "value": "'self'", "start": 8},
        ]

    def test_dump_yaml(self, capsys):
        assert run_main(["--dump", "--format", "yaml", "img-src 'self', object-src 'none'"]) == 0
        policies = yaml.safe_load(capsys.readouterr().out)
        assert policies == [
            {"directives": [{"name": "img-src", "sources": [{"type": "keyword", "value": "'self'"}]}]},
            {"directives": [{"name": "object-src", "sources": []}]},
        ]

    def test_check_allow(self, capsys):
        argv = [
            "img-src 'self'",
            "--origin", "https://a.example",
            "--check", "img-src", "https://a.example/logo.png",
        ]
        assert run_main(argv) == 0
        assert capsys.readouterr().out.strip() == "allow"

    def test_check_deny_guid(self, capsys):
        argv = [
            "img-src 'self'",
            "--origin", "https://a.example",
            "--check", "img-src", "blob:https://a.example/1",
        ]
        assert run_main(argv) == 1
        assert capsys.readouterr().out.strip() == "deny"

    def test_check_requires_origin(self):
        assert run_main(["img-src 'self'", "--check", "img-src", "https://a.example/"]) == 2

    def test_check_missing_directive(self, capsys):
        argv = ["img-src 'self'", "--origin", "https://a", "--check", "font-src", "https://a/"]
        assert run_main(argv) == 2
        assert "Directive not found: font-src" in capsys.readouterr().err

    @pytest.mark.parametrize(
        "origin_url, location_url",
        [
            ("https://a.com:99999", "https://a.com/x"),
            ("https://a.com", "https://[::1/x"),
        ],
    )
    def test_check_invalid_url(self, capsys, origin_url, location_url):
        argv = ["img-src 'self'", "--origin", origin_url, "--check", "img-src", location_url]
        assert run_main(argv) == 2
        assert "Error: Invalid URL:" in capsys.readouterr().err

    def test_file_input(self, tmp_path, capsys):
        header = tmp_path / "header.txt"
        header.write_text("script-src 'self' 'unsafe-eval'\n")
        assert run_main(["-f", str(header)]) == 0
        assert "1 directive(s)" in capsys.readouterr().out

    def test_file_not_found(self, tmp_path, capsys):
        assert run_main(["-f", str(tmp_path / "missing.txt")]) == 2
        assert "File not found" in capsys.readouterr().err

    def test_stdin(self, monkeypatch, capsys):
        import io

        monkeypatch.setattr(sys, "stdin", io.StringIO("img-src 'self'\n"))
        assert run_main(["-"]) == 0
        assert "1 directive(s)" in capsys.readouterr().out

    def test_no_input(self):
        assert run_main([]) == 2
