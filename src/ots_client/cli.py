"""Command-line client for the one-time secret service."""

from __future__ import annotations

import sys
from dataclasses import replace
from typing import Iterable, Optional, TextIO

import httpx

from .actions import Action, dispatch
from .config import DEFAULT_HOST, ClientConfig
from .errors import OtsError
from .logging import configure_logging, get_logger
from .parser import ParsedInvocation, classify, report_warnings


logger = get_logger("ots.cli")

USAGE = f"""\
usage: ots [options] [action] [name=value ...] [-- secret ...]

Share and retrieve one-time secrets (default host: {DEFAULT_HOST}).

actions:
  share          share a secret (default); prints the secret URL
  metashare      share a secret; prints the private metadata key
  generate       generate a random secret; prints the secret URL
  metagenerate   generate a random secret; prints the metadata key
  get, retrieve  print a secret's value, given its key or URL
  metadata       print the metadata for a metadata key
  state          print the state of a secret, given its metadata key
  burn           burn a secret, given its metadata key
  key, secret_key
                 print the secret key for a metadata key
  url            print the secret URL for a metadata key
  metaurl        print the private URL for a metadata key
  recent         list recent metadata keys (requires --user and --key)
  status         print the server status

options:
  -h, --host URL          service URL (env: OTS_HOST)
  -u, --user NAME         account name for basic auth (env: OTS_USER)
  -k, --key APIKEY        API key for basic auth (env: OTS_KEY)
  -f, --format FORMAT     json, yaml, fmt (printf) or raw (env: OTS_FORMAT)
  json, yaml, raw         shorthand for --format
  --template TEMPLATE     format each result with a str.format() template
  --api-version VERSION   API version segment (default: v1)
  -s, --secret SECRET     secret text; repeat to append words
  -r, --recipient EMAIL   email the secret link to a recipient
  -p, --passphrase WORD   passphrase protecting the secret
  -t, --ttl SECONDS       lifetime of the secret
  -D, --debug             print the request as a curl command instead of sending it
  -H, --help              show this help and exit

Without --secret or trailing arguments, `share` reads the secret from
standard input. Everything after `--` is taken as secret text.
"""


def read_secret(stdin: TextIO, stderr: TextIO) -> str:
    """Read a secret to end of stream, prompting only on a terminal."""

    if stdin.isatty():
        stderr.write("Enter the secret, end with Ctrl-D:\n")
        stderr.flush()
    return stdin.read()


def _resolve_secret(invocation: ParsedInvocation, stdin: TextIO, stderr: TextIO) -> ParsedInvocation:
    if invocation.action not in (Action.SHARE, Action.METASHARE):
        return invocation
    if invocation.secrets:
        if invocation.arguments:
            logger.warning("ignoring positional arguments, --secret was given")
        return invocation
    if invocation.arguments:
        return invocation
    return replace(invocation, secrets=(read_secret(stdin, stderr),))


def _write(stdout: TextIO, text: str) -> None:
    # raw bodies carry undecodable bytes as surrogate escapes
    buffer = getattr(stdout, "buffer", None)
    if buffer is None:
        stdout.write(text)
        return
    stdout.flush()
    buffer.write(text.encode(stdout.encoding or "utf-8", errors="surrogateescape"))
    buffer.flush()


def run(
    argv: Optional[Iterable[str]] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
    client: Optional[httpx.Client] = None,
    base_config: Optional[ClientConfig] = None,
) -> int:
    """Run one invocation and return the process exit status."""

    argv = list(sys.argv[1:] if argv is None else argv)
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    invocation = classify(argv)
    if invocation.show_help:
        stdout.write(USAGE)
        return 0

    try:
        config = base_config or ClientConfig.from_sources()
        configure_logging(config, stream=stderr)
        report_warnings(invocation)

        config = config.with_overrides(invocation.overrides)
        if config.debug:
            configure_logging(config, stream=stderr)
        logger.debug("Resolved configuration", extra={"config": config.logging_dict()})

        invocation = _resolve_secret(invocation, stdin, stderr)
        _write(stdout, dispatch(config, invocation, client))
    except (OtsError, ValueError, FileNotFoundError) as exc:
        stderr.write(f"Error: {exc}\n")
        return 1
    except httpx.RequestError as exc:
        stderr.write(f"HTTP request failed: {exc}\n")
        return 1
    return 0


def main(argv: Optional[Iterable[str]] = None) -> None:
    sys.exit(run(argv))


if __name__ == "__main__":
    main()
