"""Action handlers for the one-time secret API.

Each public function issues one request and returns the formatted text.
They all take an explicit :class:`ClientConfig` and an optional
``httpx.Client``; a client is created (and closed) per call when none is
given. With ``config.debug`` set the request is echoed as a curl command
line instead of being sent.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, FrozenSet, Iterable, Optional, Tuple

import httpx

from . import api
from .api import ApiRequest
from .config import ClientConfig
from .errors import MissingArgumentError
from .formatter import Selector, extract, first_of, render

if TYPE_CHECKING:  # pragma: no cover
    from .parser import ParsedInvocation


UNKNOWN_ERROR = "Unknown Error"

Fields = Iterable[Tuple[str, str]]


class Action(str, Enum):
    STATUS = "status"
    SHARE = "share"
    METASHARE = "metashare"
    GENERATE = "generate"
    METAGENERATE = "metagenerate"
    GET = "get"
    RETRIEVE = "retrieve"
    BURN = "burn"
    METADATA = "metadata"
    RECENT = "recent"
    STATE = "state"
    KEY = "key"
    SECRET_KEY = "secret_key"
    URL = "url"
    METAURL = "metaurl"

    @classmethod
    def keywords(cls) -> FrozenSet[str]:
        return frozenset(member.value for member in cls)


def _fallback(*paths: str, default: str = UNKNOWN_ERROR) -> Selector:
    return lambda data: first_of(data, paths, default)


def _secret_url(config: ClientConfig) -> Selector:
    def select(data: Any) -> Any:
        key = extract(data, "secret_key")
        if key:
            return f"{config.host}/secret/{key}"
        return first_of(data, ("message",), UNKNOWN_ERROR)

    return select


def _metadata_or_object(data: Any) -> Any:
    message = extract(data, "message")
    return message if message else data


def _recent_keys(data: Any) -> Any:
    if isinstance(data, list):
        return [extract(item, "metadata_key") or "" for item in data]
    return first_of(data, ("message",), UNKNOWN_ERROR)


def _call(
    config: ClientConfig,
    client: Optional[httpx.Client],
    request: ApiRequest,
    select: Selector,
    template: str = "%s\n",
) -> str:
    if config.debug:
        return request.describe(config) + "\n"
    if client is None:
        with api.build_client(config) as owned:
            response = api.send(owned, request)
    else:
        response = api.send(client, request)
    return render(
        response.content,
        config.output,
        template=template,
        select=select,
        user_template=config.template,
    )


def status(config: ClientConfig, client: Optional[httpx.Client] = None) -> str:
    """Report the server status."""

    return _call(config, client, api.status_request(config), _fallback("status", "message"))


def share(
    config: ClientConfig, secret: str, fields: Fields = (), client: Optional[httpx.Client] = None
) -> str:
    """Share `secret` and return the recipient's secret URL."""

    return _call(config, client, api.share_request(config, secret, fields), _secret_url(config))


def metashare(
    config: ClientConfig, secret: str, fields: Fields = (), client: Optional[httpx.Client] = None
) -> str:
    """Share `secret` and return the private metadata key."""

    request = api.share_request(config, secret, fields)
    return _call(config, client, request, _fallback("metadata_key", "message"))


def generate(config: ClientConfig, fields: Fields = (), client: Optional[httpx.Client] = None) -> str:
    """Generate a random secret and return its secret URL."""

    return _call(config, client, api.generate_request(config, fields), _secret_url(config))


def metagenerate(
    config: ClientConfig, fields: Fields = (), client: Optional[httpx.Client] = None
) -> str:
    request = api.generate_request(config, fields)
    return _call(config, client, request, _fallback("metadata_key", "message"))


def retrieve(
    config: ClientConfig,
    key: Optional[str],
    fields: Fields = (),
    client: Optional[httpx.Client] = None,
) -> str:
    """Fetch a secret's value, by secret key or full secret URL."""

    request = api.retrieve_request(config, key, fields)
    return _call(config, client, request, _fallback("value", "message"))


get = retrieve


def metadata(
    config: ClientConfig,
    metadata_key: Optional[str],
    fields: Fields = (),
    client: Optional[httpx.Client] = None,
) -> str:
    request = api.metadata_request(config, metadata_key, fields)
    return _call(config, client, request, _metadata_or_object)


def state(
    config: ClientConfig,
    metadata_key: Optional[str],
    fields: Fields = (),
    client: Optional[httpx.Client] = None,
) -> str:
    request = api.metadata_request(config, metadata_key, fields)
    return _call(config, client, request, _fallback("state", "message", default="unknown"))


def burn(
    config: ClientConfig,
    metadata_key: Optional[str],
    fields: Fields = (),
    client: Optional[httpx.Client] = None,
) -> str:
    request = api.burn_request(config, metadata_key, fields)
    return _call(config, client, request, _fallback("state.state", "message"))


def recent(config: ClientConfig, client: Optional[httpx.Client] = None) -> str:
    """List metadata keys of recently created secrets (authenticated)."""

    return _call(config, client, api.recent_request(config), _recent_keys)


def secret_key(
    config: ClientConfig,
    metadata_key: Optional[str],
    fields: Fields = (),
    client: Optional[httpx.Client] = None,
) -> str:
    """Look up the public secret key belonging to a metadata key."""

    request = api.metadata_request(config, metadata_key, fields)
    return _call(config, client, request, _fallback("secret_key", "message"))


key = secret_key


def url(
    config: ClientConfig,
    metadata_key: Optional[str],
    fields: Fields = (),
    client: Optional[httpx.Client] = None,
) -> str:
    """Build the recipient's secret URL from a metadata key."""

    request = api.metadata_request(config, metadata_key, fields)
    return _call(config, client, request, _secret_url(config))


def metaurl(config: ClientConfig, metadata_key: Optional[str]) -> str:
    """Build the private metadata URL; no request is made."""

    if metadata_key is None or not metadata_key.strip():
        raise MissingArgumentError("A metadata key is required.")
    return f"{config.host}/private/{metadata_key.strip()}\n"


Handler = Callable[[ClientConfig, Optional[httpx.Client], "ParsedInvocation"], str]


def _cmd_status(config: ClientConfig, client: Optional[httpx.Client], inv: ParsedInvocation) -> str:
    return status(config, client)


def _cmd_share(config: ClientConfig, client: Optional[httpx.Client], inv: ParsedInvocation) -> str:
    return share(config, inv.explicit_secret or "", inv.fields, client)


def _cmd_metashare(
    config: ClientConfig, client: Optional[httpx.Client], inv: ParsedInvocation
) -> str:
    return metashare(config, inv.explicit_secret or "", inv.fields, client)


def _cmd_generate(
    config: ClientConfig, client: Optional[httpx.Client], inv: ParsedInvocation
) -> str:
    return generate(config, inv.fields, client)


def _cmd_metagenerate(
    config: ClientConfig, client: Optional[httpx.Client], inv: ParsedInvocation
) -> str:
    return metagenerate(config, inv.fields, client)


def _cmd_retrieve(
    config: ClientConfig, client: Optional[httpx.Client], inv: ParsedInvocation
) -> str:
    return retrieve(config, inv.first_argument, inv.fields, client)


def _cmd_burn(config: ClientConfig, client: Optional[httpx.Client], inv: ParsedInvocation) -> str:
    return burn(config, inv.first_argument, inv.fields, client)


def _cmd_metadata(
    config: ClientConfig, client: Optional[httpx.Client], inv: ParsedInvocation
) -> str:
    return metadata(config, inv.first_argument, inv.fields, client)


def _cmd_recent(config: ClientConfig, client: Optional[httpx.Client], inv: ParsedInvocation) -> str:
    return recent(config, client)


def _cmd_state(config: ClientConfig, client: Optional[httpx.Client], inv: ParsedInvocation) -> str:
    return state(config, inv.first_argument, inv.fields, client)


def _cmd_secret_key(
    config: ClientConfig, client: Optional[httpx.Client], inv: ParsedInvocation
) -> str:
    return secret_key(config, inv.first_argument, inv.fields, client)


def _cmd_url(config: ClientConfig, client: Optional[httpx.Client], inv: ParsedInvocation) -> str:
    return url(config, inv.first_argument, inv.fields, client)


def _cmd_metaurl(
    config: ClientConfig, client: Optional[httpx.Client], inv: ParsedInvocation
) -> str:
    return metaurl(config, inv.first_argument)


HANDLERS: Dict[Action, Handler] = {
    Action.STATUS: _cmd_status,
    Action.SHARE: _cmd_share,
    Action.METASHARE: _cmd_metashare,
    Action.GENERATE: _cmd_generate,
    Action.METAGENERATE: _cmd_metagenerate,
    Action.GET: _cmd_retrieve,
    Action.RETRIEVE: _cmd_retrieve,
    Action.BURN: _cmd_burn,
    Action.METADATA: _cmd_metadata,
    Action.RECENT: _cmd_recent,
    Action.STATE: _cmd_state,
    Action.KEY: _cmd_secret_key,
    Action.SECRET_KEY: _cmd_secret_key,
    Action.URL: _cmd_url,
    Action.METAURL: _cmd_metaurl,
}


def dispatch(
    config: ClientConfig, invocation: ParsedInvocation, client: Optional[httpx.Client] = None
) -> str:
    """Run the handler for `invocation.action` and return its output."""

    return HANDLERS[invocation.action](config, client, invocation)
