"""Request construction and transport for the one-time secret HTTP API."""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import httpx

from .config import ClientConfig
from .errors import AuthenticationRequiredError, MissingArgumentError
from .logging import get_logger, redact_mapping


FormFields = Tuple[Tuple[str, str], ...]

logger = get_logger("ots.api")


@dataclass(frozen=True)
class ApiRequest:
    """A single outbound call, relative to the configured API base URL."""

    method: str
    path: str
    fields: FormFields = ()
    auth: Optional[Tuple[str, str]] = None

    def describe(self, config: ClientConfig) -> str:
        """Render the request as an equivalent curl command line."""

        parts: List[str] = ["curl", "-s", "-X", self.method]
        if self.auth is not None:
            parts += ["-u", f"{self.auth[0]}:***REDACTED***"]
        for name, value in self.fields:
            shown = redact_mapping({name: value})[name]
            parts += ["-F", f"{name}={shown}"]
        parts.append(f"{config.api_url}{self.path}")
        return shlex.join(parts)


def _fields(fields: Iterable[Tuple[str, str]]) -> FormFields:
    return tuple((str(name), str(value)) for name, value in fields)


def _require(value: Optional[str], what: str) -> str:
    if value is None or not value.strip():
        raise MissingArgumentError(f"A {what} is required.")
    return value.strip()


def secret_key_from(value: str, host: str) -> str:
    """Accept a bare secret key or a full secret URL on the configured host."""

    value = value.strip()
    if value.startswith(host.rstrip("/") + "/"):
        return value.rstrip("/").rsplit("/", 1)[-1]
    return value


def share_request(
    config: ClientConfig, secret: str, fields: Iterable[Tuple[str, str]] = ()
) -> ApiRequest:
    return ApiRequest("POST", "/share", _fields(fields) + (("secret", secret),), config.auth)


def generate_request(config: ClientConfig, fields: Iterable[Tuple[str, str]] = ()) -> ApiRequest:
    return ApiRequest("POST", "/generate", _fields(fields), config.auth)


def retrieve_request(
    config: ClientConfig, key: Optional[str], fields: Iterable[Tuple[str, str]] = ()
) -> ApiRequest:
    secret_key = secret_key_from(_require(key, "secret key"), config.host)
    return ApiRequest("POST", f"/secret/{secret_key}", _fields(fields), config.auth)


def metadata_request(
    config: ClientConfig, metadata_key: Optional[str], fields: Iterable[Tuple[str, str]] = ()
) -> ApiRequest:
    key = _require(metadata_key, "metadata key")
    return ApiRequest("POST", f"/private/{key}", _fields(fields), config.auth)


def burn_request(
    config: ClientConfig, metadata_key: Optional[str], fields: Iterable[Tuple[str, str]] = ()
) -> ApiRequest:
    key = _require(metadata_key, "metadata key")
    return ApiRequest("POST", f"/private/{key}/burn", _fields(fields), config.auth)


def recent_request(config: ClientConfig) -> ApiRequest:
    if config.auth is None:
        raise AuthenticationRequiredError(
            "Recent metadata requires authentication information (--user and --key)."
        )
    return ApiRequest("GET", "/private/recent", (), config.auth)


def status_request(config: ClientConfig) -> ApiRequest:
    return ApiRequest("GET", "/status", (), config.auth)


def build_client(config: ClientConfig) -> httpx.Client:
    return httpx.Client(base_url=config.api_url, timeout=config.timeout)


def send(client: httpx.Client, request: ApiRequest) -> httpx.Response:
    """Issue `request` once; remote error payloads are returned, not raised."""

    files: Optional[Sequence[Tuple[str, Tuple[None, bytes]]]] = None
    if request.fields:
        # filename-less parts keep multipart order and duplicate names
        files = [(name, (None, value.encode("utf-8"))) for name, value in request.fields]
    logger.debug(
        "Sending request",
        extra={
            "method": request.method,
            "path": request.path,
            "fields": redact_mapping(dict(request.fields)),
            "authenticated": request.auth is not None,
        },
    )
    response = client.request(request.method, request.path, files=files, auth=request.auth)
    logger.debug(
        "Received response",
        extra={"status_code": response.status_code, "path": request.path},
    )
    return response
