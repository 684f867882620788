import pytest

from ots_client.errors import FormatError
from ots_client.formatter import extract, first_of, render


def test_yaml_single_key() -> None:
    assert render(b'{"status": "ok"}', "yaml") == "status: ok\n"


def test_yaml_renders_non_strings_as_json() -> None:
    output = render(b'{"ttl": 3600, "recipient": ["a"], "passphrase_required": false}', "yaml")
    assert output.splitlines() == [
        "ttl: 3600",
        'recipient: ["a"]',
        "passphrase_required: false",
    ]


def test_yaml_array_uses_block_dump() -> None:
    assert render(b'[{"metadata_key": "m1"}]', "yaml") == "- metadata_key: m1\n"


def test_json_pretty_prints() -> None:
    assert render(b'{"a":1}', "json") == '{\n  "a": 1\n}\n'


def test_raw_passes_malformed_input_through() -> None:
    assert render(b"<html>oops", "raw") == "<html>oops"


@pytest.mark.parametrize("output", ["json", "yaml", "fmt"])
def test_parsing_modes_reject_malformed_input(output: str) -> None:
    with pytest.raises(FormatError):
        render(b"<html>oops", output)


def test_fmt_applies_template_to_selection() -> None:
    output = render(
        b'{"secret_key": "abc"}',
        "fmt",
        template="https://ots.test/secret/%s\n",
        select=lambda data: data["secret_key"],
    )
    assert output == "https://ots.test/secret/abc\n"


def test_fmt_list_selection_yields_one_line_each() -> None:
    assert render(b'["a", "b"]', "fmt") == "a\nb\n"


def test_user_template_over_list_passes_index() -> None:
    body = b'[{"metadata_key": "m1"}, {"metadata_key": "m2"}]'
    assert render(body, "fmt", user_template="{0}: {metadata_key}") == "0: m1\n1: m2\n"


def test_user_template_missing_field() -> None:
    with pytest.raises(FormatError):
        render(b'{"a": 1}', "fmt", user_template="{b}")


def test_extract_and_first_of() -> None:
    data = {"state": {"state": "burned"}, "message": "", "flag": False}
    assert extract(data, "state.state") == "burned"
    assert extract(data, "value.nested") is None
    assert extract(["not", "a", "dict"], "state") is None
    assert first_of(data, ["flag", "missing", "state.state"]) == "burned"
    assert first_of(data, ["missing"], "Unknown Error") == "Unknown Error"


def test_raw_keeps_undecodable_bytes() -> None:
    body = b"\xff\xfeabc"
    output = render(body, "raw")
    assert output.encode("utf-8", errors="surrogateescape") == body


def test_non_ascii_is_printed_verbatim() -> None:
    assert render('{"value": "café"}'.encode("utf-8"), "json") == '{\n  "value": "café"\n}\n'
    assert render('{"value": "café"}'.encode("utf-8"), "yaml") == "value: café\n"


def test_yaml_nested_values_are_compact() -> None:
    output = render(b'{"state": {"state": "burned", "ttl": 60}}', "yaml")
    assert output == 'state: {"state":"burned","ttl":60}\n'
