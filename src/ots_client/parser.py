"""Command-line token classification.

The command line is deliberately loose: actions, output formats and
``name=value`` form fields may appear anywhere, options may be given as
``--flag value`` or ``--flag=value``, and everything after ``--`` is taken
verbatim. :func:`classify` walks the tokens once and sorts each one into a
:class:`ParsedInvocation`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from .actions import Action
from .config import OUTPUT_FORMATS, normalize_output
from .logging import get_logger


logger = get_logger("ots.parser")

SEPARATOR = "--"
FORMAT_KEYWORDS = ("json", "yaml", "raw")

# option -> configuration field
_CONFIG_OPTIONS = {
    "-h": "host",
    "--host": "host",
    "-u": "username",
    "--user": "username",
    "-k": "api_key",
    "--key": "api_key",
    "-f": "output",
    "--format": "output",
    "--template": "template",
    "--api-version": "api_version",
}

# option -> form field name
_FIELD_OPTIONS = {
    "-r": "recipient",
    "--recipient": "recipient",
    "-p": "passphrase",
    "--passphrase": "passphrase",
    "-t": "ttl",
    "--ttl": "ttl",
}

_SECRET_OPTIONS = ("-s", "--secret")
_DEBUG_OPTIONS = ("-D", "--debug")
_HELP_OPTIONS = ("-H", "--help")


@dataclass(frozen=True)
class ParsedInvocation:
    """Structured result of classifying one command line."""

    action: Action = Action.SHARE
    overrides: Mapping[str, Any] = field(default_factory=dict)
    fields: Tuple[Tuple[str, str], ...] = ()
    secrets: Tuple[str, ...] = ()
    arguments: Tuple[str, ...] = ()
    ignored: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    show_help: bool = False

    @property
    def explicit_secret(self) -> Optional[str]:
        """Secret text given on the command line, if any.

        ``--secret`` values win over positional tokens; both are joined with
        single spaces in the order given.
        """

        if self.secrets:
            return " ".join(self.secrets)
        if self.arguments:
            return " ".join(self.arguments)
        return None

    @property
    def first_argument(self) -> Optional[str]:
        return self.arguments[0] if self.arguments else None


def classify(argv: Sequence[str]) -> ParsedInvocation:
    """Sort command-line tokens into configuration, action, fields and arguments."""

    action = Action.SHARE
    overrides: Dict[str, Any] = {}
    fields: List[Tuple[str, str]] = []
    secrets: List[str] = []
    arguments: List[str] = []
    ignored: List[str] = []
    warnings: List[str] = []

    tokens: Iterator[str] = iter(argv)
    for token in tokens:
        if token == SEPARATOR:
            arguments.extend(tokens)
            break

        if token in _HELP_OPTIONS:
            return ParsedInvocation(show_help=True)

        if token in _DEBUG_OPTIONS:
            overrides["debug"] = True
            continue

        option, inline = _split_option(token)

        if option in _CONFIG_OPTIONS:
            value = _option_value(option, inline, tokens, warnings)
            if value is None:
                ignored.append(token)
                continue
            name = _CONFIG_OPTIONS[option]
            if name == "output":
                value = _output_format(value, warnings)
            elif name == "template":
                overrides["output"] = "fmt"
            overrides[name] = value
            continue

        if option in _SECRET_OPTIONS:
            value = _option_value(option, inline, tokens, warnings)
            if value is None:
                ignored.append(token)
                continue
            secrets.append(value)
            continue

        if option in _FIELD_OPTIONS:
            value = _option_value(option, inline, tokens, warnings)
            if value is None:
                ignored.append(token)
                continue
            fields.append((_FIELD_OPTIONS[option], value))
            continue

        if token in Action.keywords():
            action = Action(token)
            continue

        if token in FORMAT_KEYWORDS:
            overrides["output"] = token
            continue

        if token.startswith("-") and len(token) > 1:
            warnings.append(f"unknown option '{token}'")
            ignored.append(token)
            continue

        if "=" in token:
            name, value = token.split("=", 1)
            fields.append((name, value))
            continue

        arguments.append(token)

    return ParsedInvocation(
        action=action,
        overrides=overrides,
        fields=tuple(fields),
        secrets=tuple(secrets),
        arguments=tuple(arguments),
        ignored=tuple(ignored),
        warnings=tuple(warnings),
    )


def _split_option(token: str) -> Tuple[str, Optional[str]]:
    if token.startswith("-") and "=" in token:
        option, value = token.split("=", 1)
        return option, value
    return token, None


def _option_value(
    option: str, inline: Optional[str], tokens: Iterator[str], warnings: List[str]
) -> Optional[str]:
    if inline is not None:
        return inline
    value = next(tokens, None)
    if value is None:
        warnings.append(f"option '{option}' requires a value")
    return value


def _output_format(value: str, warnings: List[str]) -> str:
    normalized = normalize_output(value)
    if normalized not in OUTPUT_FORMATS:
        warnings.append(f"unknown output format '{value}', using raw")
        return "raw"
    return normalized


def report_warnings(invocation: ParsedInvocation) -> None:
    """Log the problems :func:`classify` skipped over."""

    for message in invocation.warnings:
        logger.warning(message)
