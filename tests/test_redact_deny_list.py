"""Tests for deny-list redaction."""

from __future__ import annotations

from collections import UserString
from dataclasses import dataclass, field

from value_redaction.redactor import REDACTED, REDACTED_BYTES, redact, redact_with_deny_list


@dataclass
class User:
    username: str
    password: str
    key: bytes
    is_admin: bool


@dataclass
class Session:
    user: User
    headers: dict = field(default_factory=dict)
    cookies: list = field(default_factory=list)


class Vault:
    def __init__(self, label, secret):
        self.label = label
        self._secret = secret


def test_scenario_only_deny_listed_fields_are_redacted():
    user = User(username="dustin", password="hunter2", key=b"secret", is_admin=True)

    out = redact_with_deny_list(user, ["Password", "Key"])

    assert out == User(username="dustin", password=REDACTED, key=REDACTED_BYTES, is_admin=True)
    assert user.password == "hunter2"


def test_deny_list_matches_case_insensitively():
    out = redact_with_deny_list({"Password": "hunter2", "user": "dustin"}, ["password"])

    assert out == {"Password": REDACTED, "user": "dustin"}


def test_bare_string_is_kept():
    assert redact_with_deny_list("password", None) == "password"
    assert redact_with_deny_list("password", ["password"]) == "password"


def test_none_deny_list_redacts_nothing():
    payload = {"password": "hunter2", "token": b"abc"}

    assert redact_with_deny_list(payload, None) == payload


def test_empty_values_are_not_redacted_even_when_denied():
    user = User(username="dustin", password="", key=b"", is_admin=False)

    out = redact_with_deny_list(user, ["password", "key"])

    assert out == user


def test_nested_denied_keys_are_found_at_any_depth():
    session = Session(
        user=User(username="dustin", password="hunter2", key=b"", is_admin=False),
        headers={"Authorization": "Bearer abc", "Accept": "json"},
    )

    out = redact_with_deny_list(session, ["password", "authorization"])

    assert out.user.password == REDACTED
    assert out.user.username == "dustin"
    assert out.headers == {"Authorization": REDACTED, "Accept": "json"}
    assert session.headers["Authorization"] == "Bearer abc"


def test_sequence_elements_inherit_the_denied_name():
    session = Session(
        user=User(username="dustin", password="", key=b"", is_admin=False),
        cookies=["sid=abc", {"password": "p"}],
    )

    out = redact_with_deny_list(session, ["cookies", "password"])

    assert out.cookies == [REDACTED, {"password": REDACTED}]


@dataclass
class Tags:
    StringSlice: list[str]
    Labels: tuple[str, ...]
    Blobs: list[bytes]


def test_denied_sequence_fields_redact_every_element():
    tags = Tags(StringSlice=["a", "", "c"], Labels=("x",), Blobs=[b"k", b""])

    out = redact_with_deny_list(tags, ["StringSlice", "Blobs"])

    assert out.StringSlice == [REDACTED, "", REDACTED]
    assert out.Labels == ("x",)
    assert out.Blobs == [REDACTED_BYTES, b""]
    assert tags.StringSlice == ["a", "", "c"]


def test_unlisted_sequence_fields_are_kept_in_deny_mode():
    tags = Tags(StringSlice=["a"], Labels=("x",), Blobs=[b"k"])

    assert redact_with_deny_list(tags, None) == tags
    assert redact_with_deny_list(tags, ["other"]) == tags


def test_nested_sequences_keep_the_denied_name():
    out = redact_with_deny_list({"tokens": [["a"], {"b"}, ("c",)]}, ["tokens"])

    assert out == {"tokens": [[REDACTED], {REDACTED}, (REDACTED,)]}


def test_bare_sequence_is_kept_in_deny_mode():
    assert redact_with_deny_list(["a", b"b"], ["anything"]) == ["a", b"b"]


def test_exception_args_are_redacted_by_name():
    out = redact_with_deny_list({"error": KeyError("session")}, ["args"])

    assert out["error"].args == (REDACTED,)


def test_holder_under_denied_name_is_redacted():
    out = redact_with_deny_list({"token": UserString("abc")}, ["token"])

    assert out["token"] == REDACTED


def test_private_attribute_is_redacted_by_its_own_name():
    out = redact_with_deny_list(Vault("prod", "s3cr3t"), ["_secret"])

    assert out.label == "prod"
    assert out._secret == REDACTED


def test_redact_dispatches_on_mode():
    payload = {"password": "hunter2", "user": "dustin"}

    assert redact(payload, ["password"], "deny") == {"password": REDACTED, "user": "dustin"}
    assert redact(payload, ["user"], "allow") == {"password": REDACTED, "user": "dustin"}
    assert redact(payload, ["user"]) == {"password": REDACTED, "user": "dustin"}
