from __future__ import annotations

import pytest

from reportdesk.domain import fragments
from reportdesk.domain.fragments import Fragment, FragmentError


@pytest.mark.parametrize(
    "name, args",
    [
        ("accept", ("1234", "BAN")),
        ("decline", ("1234",)),
        ("accept", ("1234", "MUTE", "1099511627776")),
    ],
)
def test_encode_decode_returns_name_and_args(name: str, args: tuple[str, ...]) -> None:
    assert fragments.decode(fragments.encode(name, *args)) == Fragment(name=name, args=args)


def test_numeric_ids_keep_the_legacy_wire_form() -> None:
    assert fragments.encode("accept", 1234, "DRAWBAN") == "accept(1234,DRAWBAN)"
    assert fragments.encode("decline", 1234) == "decline(1234)"
    assert fragments.encode("accept", 1234, "MUTE", 555) == "accept(1234,MUTE,555)"


def test_arguments_with_grammar_characters_round_trip() -> None:
    args = ("a,b", "(x)", "100%")
    encoded = fragments.encode("note", *args)
    assert encoded == "note(a%2Cb,%28x%29,100%25)"
    assert fragments.decode(encoded) == Fragment(name="note", args=args)


@pytest.mark.parametrize(
    "data",
    [
        "",
        None,
        "accept",
        "accept1234",
        "accept(1234",
        "accept1234)",
        "accept((1234)",
        "accept(12)34)",
        "accept()",
        "bad name(1)",
    ],
)
def test_decode_rejects_foreign_identifiers(data: str | None) -> None:
    assert fragments.decode(data) is None


def test_decode_splits_on_commas() -> None:
    assert fragments.decode("accept(1,2,3)") == Fragment(name="accept", args=("1", "2", "3"))


def test_encode_rejects_invalid_names_and_empty_groups() -> None:
    with pytest.raises(FragmentError):
        fragments.encode("not-a-word", "1")
    with pytest.raises(FragmentError):
        fragments.encode("accept")
    with pytest.raises(FragmentError):
        fragments.encode("accept", "")


def test_encode_enforces_custom_id_limit() -> None:
    with pytest.raises(FragmentError):
        fragments.encode("accept", "9" * 120)


def test_fragment_encode_method() -> None:
    assert Fragment(name="decline", args=("77",)).encode() == "decline(77)"
