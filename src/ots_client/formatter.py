"""Output formatting for API responses."""

from __future__ import annotations

import json
from typing import Any, Callable, Optional, Sequence, Union

import yaml

from .errors import FormatError


Selector = Callable[[Any], Any]


def parse_body(body: Union[str, bytes]) -> Any:
    """Decode a JSON response body, raising `FormatError` when malformed."""

    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise FormatError(f"Response is not valid JSON: {exc}") from exc


def extract(data: Any, path: str) -> Any:
    """Follow a dotted `path` through nested objects; missing keys give None."""

    current = data
    for part in path.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    return current


def first_of(data: Any, paths: Sequence[str], default: Any = None) -> Any:
    """Return the first present (non-null, non-false) value among `paths`."""

    for path in paths:
        value = extract(data, path)
        if value is not None and value is not False:
            return value
    return default


def render(
    body: Union[str, bytes],
    output: str,
    template: str = "%s\n",
    select: Optional[Selector] = None,
    user_template: Optional[str] = None,
) -> str:
    """Render a raw response `body` in the requested `output` mode.

    ``raw`` passes the body through untouched. ``json`` pretty-prints the
    document and ``yaml`` lists the top-level keys as ``key: value`` lines.
    ``fmt`` fills the handler's printf `template` with the value returned by
    `select` (one line per element when it returns a list), or the caller's
    `user_template` through :meth:`str.format` when one is configured.
    """

    if output == "raw":
        return body.decode("utf-8", errors="surrogateescape") if isinstance(body, bytes) else body

    data = parse_body(body)
    if output == "json":
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    if output == "yaml":
        return render_yaml(data)
    if user_template is not None:
        return render_user_template(data, user_template)
    value = select(data) if select is not None else data
    return render_template(value, template)


def render_yaml(data: Any) -> str:
    if not isinstance(data, dict):
        return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)
    return "".join(f"{key}: {_scalar(value)}\n" for key, value in data.items())


def render_template(value: Any, template: str) -> str:
    if isinstance(value, list):
        return "".join(template % (_scalar(item, pretty=True),) for item in value)
    return template % (_scalar(value, pretty=True),)


def render_user_template(data: Any, template: str) -> str:
    """Apply a :meth:`str.format` template to an object or to each list element.

    For lists the element index is passed as ``{0}`` and object elements'
    keys as named fields; plain objects provide their keys as named fields.
    """

    if not template.endswith("\n"):
        template += "\n"
    try:
        if isinstance(data, list):
            lines = []
            for index, item in enumerate(data):
                if isinstance(item, dict):
                    lines.append(template.format(index, **item))
                else:
                    lines.append(template.format(index, item))
            return "".join(lines)
        if isinstance(data, dict):
            return template.format(**data)
        return template.format(data)
    except (KeyError, IndexError) as exc:
        raise FormatError(f"Template references a missing field: {exc}") from exc


def _scalar(value: Any, pretty: bool = False) -> str:
    if isinstance(value, str):
        return value
    if pretty and isinstance(value, (dict, list)):
        return json.dumps(value, indent=2, ensure_ascii=False)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
