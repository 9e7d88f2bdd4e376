"""Unit tests for render scope handling and branch arm selection."""

from __future__ import annotations

from transcanon.content import assign_ids
from transcanon.models import MISSING, RenderedVariable, Variable
from transcanon.reconcile import (
    DEFAULT_RENDERERS,
    RenderScope,
    default_plural_resolver,
    render_variable,
    select_arm_key,
)


def test_scope_from_source_lets_caller_values_override_hoisted_defaults() -> None:
    """Caller variables should win over defaults; options should merge per key."""

    source = assign_ids(
        (
            Variable(key="name", default_value="Ada"),
            Variable(key="price", kind="currency", default_value=3, options={"currency": "USD"}),
        )
    )

    scope = RenderScope.from_source(
        source,
        variables={"name": "Grace"},
        variable_options={"price": {"style": "accounting"}},
    )

    assert scope.lookup("name") == "Grace"
    assert scope.lookup("price") == 3
    assert scope.options["price"] == {"currency": "USD", "style": "accounting"}
    assert scope.lookup("missing") is MISSING


def test_scope_absorb_binds_only_unbound_keys_and_never_mutates() -> None:
    """Absorbing variables should keep existing bindings and return a new scope."""

    scope = RenderScope(values={"name": "Ada"}, options={"name": {"case": "upper"}})

    absorbed = scope.absorb(
        [
            Variable(key="name", default_value="Grace", options={"case": "lower"}),
            Variable(key="city", default_value="Paris"),
        ]
    )

    assert absorbed.values == {"name": "Ada", "city": "Paris"}
    assert absorbed.options["name"] == {"case": "upper"}
    assert scope.values == {"name": "Ada"}
    assert scope.absorb([Variable(key="name")]) is scope


def test_scope_bind_isolates_sibling_scopes() -> None:
    """Binding a selector in one subtree must not leak into another."""

    root = RenderScope()
    left = root.bind("n", 1)
    right = root.bind("n", 2)

    assert (left.lookup("n"), right.lookup("n"), root.has("n")) == (1, 2, False)


def test_render_variable_marks_unbound_keys_unresolved() -> None:
    """Unbound references should produce an unresolved binding rendering `undefined`."""

    binding = render_variable("ghost", "variable", RenderScope(), ("fr",), DEFAULT_RENDERERS)

    assert binding == RenderedVariable(
        key="ghost", kind="variable", value=None, locales=("fr",), resolved=False
    )
    assert binding.text == "undefined"


def test_render_variable_renders_none_value_as_empty_text() -> None:
    """A key bound to `None` is resolved and renders as empty text."""

    binding = render_variable(
        "name", "variable", RenderScope(values={"name": None}), (), DEFAULT_RENDERERS
    )

    assert binding.resolved
    assert binding.text == ""


def test_select_arm_key_matches_non_plural_selector_by_string_value() -> None:
    """Conditional branches should match the selector's string form."""

    arms = {"true": "yes", "3": "three"}

    assert select_arm_key("branch", True, ("en",), {"True": "yes"}) == "True"
    assert select_arm_key("branch", 3, ("en",), arms) == "3"
    assert select_arm_key("branch", "4", ("en",), arms) is None
    assert select_arm_key("branch", "3", ("en",), {}) is None


def test_select_arm_key_walks_locale_chain_for_plural_categories() -> None:
    """The first locale whose category the arms define should win."""

    categories = {"pl": "few", "fr": "many", "en": "other"}

    def resolver(value: object, locale: str) -> str | None:
        """Return a fixed category per locale."""

        _ = value
        return categories.get(locale)

    arms = {"one": "x", "other": "y"}

    assert select_arm_key("plural", 5, ("pl", "fr", "en"), arms, resolver) == "other"
    assert select_arm_key("plural", 5, ("pl", "fr"), arms, resolver) is None
    assert select_arm_key("plural", 5, ("de",), arms, resolver) is None


def test_default_plural_resolver_only_accepts_category_strings() -> None:
    """The built-in resolver never applies locale plural rules to numbers."""

    assert default_plural_resolver("few", "pl") == "few"
    assert default_plural_resolver(5, "en") is None
    assert default_plural_resolver("", "en") is None
    assert select_arm_key("plural", "plural", ("en",), {"other": "many"}) == "other"
    assert select_arm_key("plural", "one", ("en",), {"singular": "1"}) == "singular"
