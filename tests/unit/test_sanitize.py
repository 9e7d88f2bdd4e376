"""Unit tests for hash-ready tree sanitization."""

from __future__ import annotations

from transcanon.content import assign_ids, sanitize, translatable_attributes
from transcanon.models import Branch, Element, Variable


def test_sanitize_drops_ids_defaults_and_non_translatable_attributes() -> None:
    """Only tag, children, and allow-listed string props should remain."""

    element = Element(
        tag="input",
        id=3,
        attributes={
            "class": "field",
            "placeholder": "Your name",
            "aria-label": "",
            "title": 12,
        },
        children=Variable(key="name", kind="variable", id=4, default_value="Ada"),
    )

    assert sanitize(element) == {
        "t": "input",
        "c": {"k": "name", "v": "v"},
        "d": {"pl": "Your name"},
    }


def test_sanitize_omits_empty_fields_instead_of_emitting_nulls() -> None:
    """Elements without tag, children, or props should sanitize to an empty mapping."""

    assert sanitize(Element(tag="")) == {}
    assert sanitize(Element(tag="br", children=())) == {"t": "br"}
    assert sanitize(()) is None
    assert sanitize(None) is None


def test_sanitize_branch_emits_sorted_arms_selector_and_kind() -> None:
    """Branches should keep arm keys, selector key, kind code, and fallback."""

    branch = Branch(
        selector_key="n",
        kind="plural",
        arms={"other": ("many ", Variable(key="n", kind="number")), "one": "one"},
        fallback="some",
        id=9,
    )

    sanitized = sanitize(branch)

    assert sanitized == {
        "c": "some",
        "d": {
            "b": {"one": "one", "other": ["many ", {"k": "n", "v": "n"}]},
            "s": "n",
            "t": "p",
        },
    }
    assert list(sanitized["d"]["b"]) == ["one", "other"]


def test_sanitize_drops_unserializable_variable_fields() -> None:
    """A bad key or unknown kind should drop that field and keep the rest."""

    assert sanitize(Variable(key=5, kind="number")) == {"v": "n"}  # type: ignore[arg-type]
    assert sanitize(Variable(key="total", kind="percentage")) == {"k": "total"}


def test_sanitize_accepts_a_source_tree() -> None:
    """A `SourceTree` should sanitize through its id-carrying root."""

    source = assign_ids(Element(tag="div", children=("Hi", Element(tag="b"))))

    assert sanitize(source) == {"t": "div", "c": ["Hi", {"t": "b"}]}


def test_translatable_attributes_accepts_names_and_wire_codes() -> None:
    """Both full attribute names and wire codes should map to sorted wire codes."""

    assert translatable_attributes(
        {"title": "Hello", "arl": "Close", "alt": "Logo", "href": "/home"}
    ) == {"alt": "Logo", "arl": "Close", "ti": "Hello"}
