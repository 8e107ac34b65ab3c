"""Tests for path resolution."""

from taxonomy.core.cascading_selector import CascadingSelector
from taxonomy.core.category_store import CategoryStore
from taxonomy.core.path_resolver import (
    describe_path,
    path_names,
    resolve_partial,
    resolve_path,
)


class TestResolvePath:
    """Tests for resolve_path."""

    def test_leaf_resolves_to_full_chain(self, store: CategoryStore):
        assert resolve_path("12mm", store) == ("glass", "frameless", "clear", "12mm")

    def test_level_zero_node(self, store: CategoryStore):
        assert resolve_path("hinges", store) == ("hardware", "hinges")

    def test_category_id_resolves_to_itself(self, store: CategoryStore):
        assert resolve_path("shower", store) == ("shower",)

    def test_unknown_or_empty_resolves_to_empty_chain(self, store: CategoryStore):
        assert resolve_path("stale", store) == ()
        assert resolve_path(None, store) == ()
        assert resolve_path("", store) == ()

    def test_round_trip_through_selector(self, store: CategoryStore):
        """A chain built by the selector is reproduced from its leaf."""
        selector = CascadingSelector(store)
        selector.select(0, "glass")
        selector.select(1, "frameless")
        selector.select(2, "tinted")

        assert resolve_path(selector.leaf_id, store) == selector.current_chain

    def test_round_trip_for_every_node(self, store: CategoryStore):
        for node in store.nodes():
            chain = resolve_path(node.id, store)
            selector = CascadingSelector(store)
            for level, item_id in enumerate(chain):
                selector.select(level, item_id)
            assert selector.current_chain == chain


class TestResolvePartial:
    """Tests for resolve_partial."""

    def test_full_valid_chain(self, store: CategoryStore):
        chain = resolve_partial(["glass", "frameless", "clear", "12mm"], store)
        assert chain == ("glass", "frameless", "clear", "12mm")

    def test_trailing_empties(self, store: CategoryStore):
        assert resolve_partial(["glass", "frameless", "", None], store) == ("glass", "frameless")

    def test_main_category_only(self, store: CategoryStore):
        assert resolve_partial(["hardware", None, None, None], store) == ("hardware",)

    def test_stops_at_stale_id(self, store: CategoryStore):
        """A gap invalidates everything deeper, even ids that still exist."""
        assert resolve_partial(["glass", "stale", "clear"], store) == ("glass",)

    def test_stops_at_id_under_wrong_parent(self, store: CategoryStore):
        """An existing id that is not a child of the previous level is a gap."""
        assert resolve_partial(["glass", "hinges", None], store) == ("glass",)
        assert resolve_partial(["glass", "clear"], store) == ("glass",)

    def test_does_not_skip_over_empty_level(self, store: CategoryStore):
        assert resolve_partial(["glass", "", "clear"], store) == ("glass",)

    def test_unknown_main_category(self, store: CategoryStore):
        assert resolve_partial(["gone", "frameless"], store) == ()

    def test_node_id_in_main_position(self, store: CategoryStore):
        assert resolve_partial(["frameless"], store) == ()

    def test_empty_input(self, store: CategoryStore):
        assert resolve_partial([], store) == ()


class TestDescribePath:
    """Tests for breadcrumb helpers."""

    def test_path_names(self, store: CategoryStore):
        assert path_names(("glass", "frameless", "clear"), store) == [
            "Glass Pool Fencing",
            "Frameless Panels",
            "Clear Glass",
        ]

    def test_describe_path_default_separator(self, store: CategoryStore):
        assert describe_path(("hardware", "hinges"), store) == "Hardware → Hinges"

    def test_describe_path_custom_separator(self, store: CategoryStore):
        assert describe_path(("hardware", "hinges"), store, " / ") == "Hardware / Hinges"

    def test_describe_path_shows_only_resolvable_segments(self, store: CategoryStore):
        assert describe_path(("glass", "stale", "clear"), store) == "Glass Pool Fencing"

    def test_describe_empty_chain(self, store: CategoryStore):
        assert describe_path((), store) == ""
