import pytest

from ots_client.actions import Action
from ots_client.parser import classify


def test_defaults_to_share() -> None:
    parsed = classify([])
    assert parsed.action is Action.SHARE
    assert parsed.overrides == {}
    assert parsed.explicit_secret is None


def test_connection_options_become_overrides() -> None:
    parsed = classify(["-h", "https://ots.test", "--user", "me@example.com", "-k", "apikey", "status"])
    assert parsed.action is Action.STATUS
    assert parsed.overrides == {
        "host": "https://ots.test",
        "username": "me@example.com",
        "api_key": "apikey",
    }


def test_inline_option_values() -> None:
    parsed = classify(["--host=https://ots.test", "--format=json"])
    assert parsed.overrides == {"host": "https://ots.test", "output": "json"}


def test_last_action_wins() -> None:
    assert classify(["share", "generate", "status"]).action is Action.STATUS


@pytest.mark.parametrize("keyword", ["json", "yaml", "raw"])
def test_bare_format_keyword(keyword: str) -> None:
    assert classify([keyword]).overrides == {"output": keyword}


def test_printf_format_is_fmt() -> None:
    assert classify(["-f", "printf"]).overrides == {"output": "fmt"}


def test_unknown_format_falls_back_to_raw() -> None:
    assert classify(["--format", "xml"]).overrides == {"output": "raw"}


def test_template_selects_fmt_output() -> None:
    parsed = classify(["--template", "{metadata_key}", "recent"])
    assert parsed.overrides == {"output": "fmt", "template": "{metadata_key}"}


def test_repeated_secret_options_are_joined() -> None:
    parsed = classify(["--secret", "a", "-s=b", "--secret=c d"])
    assert parsed.secrets == ("a", "b", "c d")
    assert parsed.explicit_secret == "a b c d"


def test_secret_option_wins_over_positionals() -> None:
    parsed = classify(["-s", "flag", "positional"])
    assert parsed.explicit_secret == "flag"


def test_positionals_form_the_secret() -> None:
    parsed = classify(["my", "secret", "text"])
    assert parsed.action is Action.SHARE
    assert parsed.explicit_secret == "my secret text"


def test_separator_keeps_tokens_verbatim() -> None:
    parsed = classify(["share", "--", "--host", "ttl=5", "generate"])
    assert parsed.action is Action.SHARE
    assert parsed.arguments == ("--host", "ttl=5", "generate")
    assert parsed.fields == ()
    assert parsed.overrides == {}


def test_form_fields_keep_order_and_duplicates() -> None:
    parsed = classify(["ttl=60", "recipient=a@x", "-r", "b@x", "--passphrase=pw", "-t", "30", "ttl=90"])
    assert parsed.fields == (
        ("ttl", "60"),
        ("recipient", "a@x"),
        ("recipient", "b@x"),
        ("passphrase", "pw"),
        ("ttl", "30"),
        ("ttl", "90"),
    )


def test_form_field_value_may_contain_equals() -> None:
    assert classify(["passphrase=a=b"]).fields == (("passphrase", "a=b"),)


def test_unknown_options_are_skipped() -> None:
    parsed = classify(["--bogus", "state", "-x", "meta1"])
    assert parsed.action is Action.STATE
    assert parsed.ignored == ("--bogus", "-x")
    assert parsed.arguments == ("meta1",)


def test_option_missing_value_is_skipped() -> None:
    parsed = classify(["status", "--host"])
    assert parsed.action is Action.STATUS
    assert parsed.overrides == {}
    assert parsed.ignored == ("--host",)


def test_help_short_circuits() -> None:
    parsed = classify(["-k", "key", "--help", "status"])
    assert parsed.show_help
    assert parsed.overrides == {}


def test_debug_flag() -> None:
    assert classify(["-D"]).overrides == {"debug": True}


def test_key_argument_for_metadata_actions() -> None:
    parsed = classify(["burn", "meta1", "passphrase=pw"])
    assert parsed.action is Action.BURN
    assert parsed.first_argument == "meta1"
    assert parsed.fields == (("passphrase", "pw"),)


def test_secret_key_keyword() -> None:
    assert classify(["secret_key", "meta1"]).action is Action.SECRET_KEY


def test_skipped_tokens_are_reported() -> None:
    parsed = classify(["--bogus", "-f", "xml", "status", "--host"])
    assert parsed.warnings == (
        "unknown option '--bogus'",
        "unknown output format 'xml', using raw",
        "option '--host' requires a value",
    )


def test_clean_command_line_has_no_warnings() -> None:
    assert classify(["status", "json"]).warnings == ()
