"""Unit tests for the compact JSON wire format."""

from __future__ import annotations

import pytest

from transcanon.content import assign_ids, decode_source, decode_target, encode_source
from transcanon.models import (
    MISSING,
    Branch,
    Element,
    TargetBranch,
    TargetElement,
    TargetVariable,
    Variable,
)


def test_decode_source_builds_elements_variables_and_text() -> None:
    """Authoring JSON should decode into the equivalent authored tree."""

    tree = decode_source(
        {"t": "div", "c": ["Hello ", {"k": "name", "default": "World", "options": {"case": "upper"}}]}
    )

    assert tree == Element(
        tag="div",
        children=(
            "Hello ",
            Variable(key="name", default_value="World", options={"case": "upper"}),
        ),
    )


def test_decode_source_builds_plural_branch_with_authored_selector() -> None:
    """Branch payloads should carry kind, selector key, arms, fallback, and value."""

    tree = decode_source(
        {
            "d": {"t": "p", "b": {"one": "1 item", "other": [{"k": "n", "v": "n"}, " items"]}},
            "c": "items",
            "value": 3,
        }
    )

    assert tree == Branch(
        selector_key="n",
        kind="plural",
        arms={"one": "1 item", "other": (Variable(key="n", kind="number"), " items")},
        fallback="items",
        selector_value=3,
    )


def test_decode_source_defaults_branch_selector_to_missing_and_kind_key() -> None:
    """Conditional branches without an authored value should read the selector from scope."""

    tree = decode_source({"d": {"t": "b", "s": "gender", "b": {"female": "She"}}})

    assert tree.selector_key == "gender"
    assert tree.kind == "branch"
    assert tree.selector_value is MISSING


def test_decode_source_reads_plural_count_shorthand() -> None:
    """Plural branches may author their count under `n`."""

    tree = decode_source({"d": {"t": "p", "b": {"other": "items"}}, "n": 2})

    assert tree.selector_value == 2


def test_decode_source_merges_full_attributes_with_translatable_props() -> None:
    """Elements should keep `a` attributes and expand wire-coded props to full names."""

    tree = decode_source({"t": "input", "a": {"type": "text"}, "d": {"pl": "Name"}})

    assert tree.attributes == {"type": "text", "placeholder": "Name"}


def test_decode_source_normalizes_text_and_omits_empty_runs() -> None:
    """Whitespace-only runs with line breaks should disappear from the tree."""

    assert decode_source(["\n   ", {"t": "b", "c": "\n  bold\n"}, 5]) == (
        Element(tag="b", children="bold"),
        "5",
    )
    assert decode_source("\n  raw\n", normalize=False) == "\n  raw\n"


@pytest.mark.parametrize(
    "payload",
    [
        {"k": ""},
        {"k": "x", "v": "percent"},
        {"d": {"t": "q", "b": {}}},
        {"t": "div", "c": [True]},
        {"t": 5},
        [object()],
    ],
)
def test_decode_source_rejects_malformed_authoring_json(payload: object) -> None:
    """Authoring mistakes should surface as `ValueError`."""

    with pytest.raises(ValueError):
        decode_source(payload)


def test_decode_target_is_lenient_and_marks_malformed_items_absent() -> None:
    """Unrecognized target items should decode to `None` without raising."""

    target = decode_target(
        ["ok", True, {"k": 5}, {"k": "count", "v": "n"}, {"i": "2", "c": "x"}, 3]
    )

    assert target == (
        "ok",
        None,
        None,
        TargetVariable(key="count", kind="number"),
        TargetElement(id=2, children="x"),
        "3",
    )


def test_decode_target_decodes_tuples_and_keeps_decoded_nodes() -> None:
    """Tuples decode like lists; already decoded target nodes pass through."""

    decoded = TargetElement(id=1, children="la doc")

    assert decode_target(("Bonjour ", {"k": "name"})) == (
        "Bonjour ",
        TargetVariable(key="name"),
    )
    assert decode_target(["Lisez ", decoded, {"k": "n", "v": "n"}]) == (
        "Lisez ",
        decoded,
        TargetVariable(key="n", kind="number"),
    )
    assert decode_target(decoded) is decoded


def test_decode_target_reads_branch_payloads_and_translated_props() -> None:
    """Branch selections and translated html props should decode to target nodes."""

    branch = decode_target({"i": 4, "d": {"t": "p", "b": {"other": "autres"}}, "c": "défaut"})
    element = decode_target({"i": 1, "d": {"ti": "Titre", "href": "/x"}})

    assert branch == TargetBranch(id=4, kind="plural", arms={"other": "autres"}, fallback="défaut")
    assert element == TargetElement(id=1, attributes={"title": "Titre"})


def test_encode_source_keeps_ids_and_drops_defaults() -> None:
    """Request payloads should carry ids for references but no render defaults."""

    source = assign_ids(
        Element(
            tag="p",
            attributes={"class": "lead", "title": "Intro"},
            children=(
                "Hi ",
                Variable(key="name", default_value="Ada"),
                Branch(selector_key="n", kind="plural", arms={"one": "x"}, fallback="y"),
            ),
        )
    )

    assert encode_source(source) == {
        "t": "p",
        "i": 1,
        "c": [
            "Hi ",
            {"k": "name", "v": "v", "i": 2},
            {"d": {"b": {"one": "x"}, "s": "n", "t": "p"}, "i": 3, "c": "y"},
        ],
        "d": {"ti": "Intro"},
    }


def test_encode_then_decode_target_reattaches_consistent_ids() -> None:
    """Encoding a source tree and decoding it as a target should keep matching ids."""

    source = assign_ids(Element(tag="div", children=("Hello ", Variable(key="name"))))

    assert decode_target(encode_source(source)) == TargetElement(
        id=1, children=("Hello ", TargetVariable(key="name"))
    )
