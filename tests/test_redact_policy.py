import pytest

from value_redaction.redact_policy import RedactPolicy, normalize_name


def test_names_are_normalized_once():
    policy = RedactPolicy.from_names("allow", ["UserName", "username", "E-Mail"])

    assert policy.names == frozenset({"username", "e-mail"})


def test_allow_mode_redacts_unless_listed():
    policy = RedactPolicy.from_names("allow", ["username"])

    assert policy.should_redact("USERNAME") is False
    assert policy.should_redact("password") is True
    assert policy.should_redact(None) is True


def test_deny_mode_redacts_only_listed():
    policy = RedactPolicy.from_names("deny", ["password"])

    assert policy.should_redact("Password") is True
    assert policy.should_redact("username") is False
    assert policy.should_redact(None) is False


def test_sequence_elements_inherit_the_name_only_in_deny_mode():
    assert RedactPolicy.from_names("deny", ["tags"]).element_name("tags") == "tags"
    assert RedactPolicy.from_names("deny", ["tags"]).element_name(None) is None
    assert RedactPolicy.from_names("allow", ["tags"]).element_name("tags") is None


def test_none_and_empty_lists_are_equivalent():
    assert RedactPolicy.from_names("allow", None) == RedactPolicy.from_names("allow", [])
    assert RedactPolicy.from_names("deny", None).should_redact("anything") is False
    assert RedactPolicy.from_names("allow", ()).should_redact("anything") is True


def test_unknown_mode_raises():
    with pytest.raises(ValueError):
        RedactPolicy.from_names("block", ["x"])


@pytest.mark.parametrize("names", ["password", b"password"])
def test_single_string_list_raises(names):
    with pytest.raises(TypeError):
        RedactPolicy.from_names("deny", names)


def test_normalize_name_casefolds():
    assert normalize_name("STRASSE") == normalize_name("straße")
