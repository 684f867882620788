"""Command-line and library client for one-time secret sharing services."""

from .actions import (
    Action,
    burn,
    dispatch,
    generate,
    get,
    key,
    metadata,
    metagenerate,
    metashare,
    metaurl,
    recent,
    retrieve,
    secret_key,
    share,
    state,
    status,
    url,
)
from .config import ClientConfig
from .errors import AuthenticationRequiredError, FormatError, MissingArgumentError, OtsError

__all__ = [
    "Action",
    "AuthenticationRequiredError",
    "ClientConfig",
    "FormatError",
    "MissingArgumentError",
    "OtsError",
    "burn",
    "dispatch",
    "generate",
    "get",
    "key",
    "metadata",
    "metagenerate",
    "metashare",
    "metaurl",
    "recent",
    "retrieve",
    "secret_key",
    "share",
    "state",
    "status",
    "url",
]
__version__ = "0.1.0"
