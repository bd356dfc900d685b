"""
Unit tests for siteplan.core.tree module.
"""

import pytest

from siteplan.core.exceptions import InvalidTreeOperationError, NotFoundError
from siteplan.core.tree import (
    FlatNode,
    SiteItemType,
    SiteNode,
    SiteTree,
    build_tree,
    flatten_tree,
)


def ids(flat):
    return [node.item.id for node in flat]


@pytest.fixture
def rows():
    """
    Flat rows, deliberately out of order:

        Marketing/ (open): Home, About
        Docs/ (closed): Guide
        Logo
    """
    return [
        {"id": "logo", "type": "image", "name": "Logo", "parent_id": None, "order": 2},
        {"id": "about", "type": "page", "name": "About", "url": "/about", "parent_id": "marketing", "order": 1},
        {"id": "docs", "type": "folder", "name": "Docs", "parent_id": None, "order": 1, "is_open": False},
        {"id": "home", "type": "page", "name": "Home", "url": "/", "parent_id": "marketing", "order": 0},
        {"id": "guide", "type": "page", "name": "Guide", "parent_id": "docs", "order": 0},
        {"id": "marketing", "type": "folder", "name": "Marketing", "parent_id": None, "order": 0, "is_open": True},
    ]


@pytest.fixture
def tree(rows):
    return SiteTree.from_rows(rows)


class TestSiteNode:
    """Tests for SiteNode."""

    def test_folder_defaults_to_open(self):
        node = SiteNode(id="f", type="folder", name="Folder")

        assert node.is_folder
        assert node.is_open is True

    def test_non_folder_has_no_open_state(self):
        node = SiteNode(id="p", type="page", name="Page", is_open=True)

        assert node.type == SiteItemType.PAGE
        assert node.is_open is None

    def test_non_folder_cannot_have_children(self):
        child = SiteNode(id="c", type="page", name="Child")

        with pytest.raises(InvalidTreeOperationError):
            SiteNode(id="p", type="page", name="Page", children=[child])

    def test_unknown_type_rejected(self):
        with pytest.raises(ValueError):
            SiteNode(id="x", type="video", name="Clip")

    def test_to_dict_only_folders_list_children(self, tree):
        marketing = tree.get("marketing").to_dict()
        logo = tree.get("logo").to_dict()

        assert [child["id"] for child in marketing["children"]] == ["home", "about"]
        assert "children" not in logo
        assert logo["type"] == "image"


class TestBuildTree:
    """Tests for build_tree."""

    def test_roots_and_children_sorted_by_order(self, rows):
        roots = build_tree(rows)

        assert [node.id for node in roots] == ["marketing", "docs", "logo"]
        assert [node.id for node in roots[0].children] == ["home", "about"]
        assert [node.id for node in roots[1].children] == ["guide"]

    def test_equal_order_keeps_row_position(self):
        roots = build_tree(
            [
                {"id": "b", "type": "page", "name": "B", "order": 0},
                {"id": "a", "type": "page", "name": "A", "order": 0},
            ]
        )

        assert [node.id for node in roots] == ["b", "a"]

    def test_missing_parent_goes_to_root(self):
        roots = build_tree([{"id": "p", "type": "page", "name": "Orphan", "parent_id": "gone"}])

        assert [node.id for node in roots] == ["p"]

    def test_non_folder_parent_goes_to_root(self):
        roots = build_tree(
            [
                {"id": "page", "type": "page", "name": "Page", "order": 0},
                {"id": "img", "type": "image", "name": "Img", "parent_id": "page", "order": 1},
            ]
        )

        assert [node.id for node in roots] == ["page", "img"]
        assert roots[0].children == []

    def test_self_parent_goes_to_root(self):
        roots = build_tree([{"id": "f", "type": "folder", "name": "F", "parent_id": "f"}])

        assert [node.id for node in roots] == ["f"]
        assert roots[0].children == []

    def test_parent_cycle_is_broken(self):
        tree = SiteTree.from_rows(
            [
                {"id": "a", "type": "folder", "name": "A", "parent_id": "b"},
                {"id": "b", "type": "folder", "name": "B", "parent_id": "a"},
            ]
        )

        assert len(tree) == 2
        assert [node.id for node in tree.roots] == ["a"]
        assert [node.id for node in tree.roots[0].children] == ["b"]

    def test_duplicate_ids_rejected(self):
        with pytest.raises(InvalidTreeOperationError):
            build_tree(
                [
                    {"id": "x", "type": "page", "name": "One"},
                    {"id": "x", "type": "page", "name": "Two"},
                ]
            )

    def test_accepts_objects(self):
        class Row:
            def __init__(self, **kwargs):
                self.__dict__.update(kwargs)

        roots = build_tree(
            [
                Row(id=1, type="folder", name="F", parent_id=None, order=0, is_open=None, url=None, meta=None),
                Row(id=2, type="page", name="P", parent_id=1, order=0, is_open=None, url=None, meta={"k": 1}),
            ]
        )

        assert roots[0].id == "1"
        assert roots[0].children[0].meta == {"k": 1}


class TestFlatten:
    """Tests for flattening."""

    def test_pre_order_skips_closed_folders(self, tree):
        flat = tree.flatten()

        assert ids(flat) == ["marketing", "home", "about", "docs", "logo"]
        assert [node.depth for node in flat] == [0, 1, 1, 0, 0]

    def test_include_collapsed(self, tree):
        flat = tree.flatten(include_collapsed=True)

        assert ids(flat) == ["marketing", "home", "about", "docs", "guide", "logo"]
        guide = flat[4]
        assert guide.parent_id == "docs"
        assert guide.depth == 1

    def test_flatten_tree_function(self, rows):
        flat = flatten_tree(build_tree(rows))

        assert all(isinstance(node, FlatNode) for node in flat)
        assert flat[1].parent_id == "marketing"

    def test_flat_node_to_dict(self, tree):
        data = tree.flatten()[0].to_dict()

        assert data["id"] == "marketing"
        assert data["depth"] == 0
        assert data["parent_id"] is None
        assert data["child_count"] == 2


class TestLookup:
    """Tests for lookup helpers."""

    def test_find_and_get(self, tree):
        assert tree.find("guide").name == "Guide"
        assert tree.find("nope") is None
        with pytest.raises(NotFoundError):
            tree.get("nope")

    def test_find_parent(self, tree):
        assert tree.find_parent("about").id == "marketing"
        assert tree.find_parent("logo") is None

    def test_find_by_url(self, tree):
        assert tree.find_by_url("/about").id == "about"
        assert tree.find_by_url("/missing") is None

    def test_is_descendant(self, tree):
        assert tree.is_descendant("marketing", "home")
        assert not tree.is_descendant("home", "marketing")
        assert not tree.is_descendant("marketing", "marketing")

    def test_type_queries(self, tree):
        assert [node.id for node in tree.collect_by_type("page")] == ["home", "about", "guide"]
        assert tree.count_by_type(SiteItemType.FOLDER) == 2
        assert tree.first_of_type("image").id == "logo"
        assert tree.first_of_type("flow") is None
        assert [node.id for node in tree.folders()] == ["marketing", "docs"]

    def test_len_and_iter(self, tree):
        assert len(tree) == 6
        assert [node.id for node in tree] == ["marketing", "home", "about", "docs", "guide", "logo"]


class TestMove:
    """Tests for drag-and-drop moves."""

    def test_move_onto_folder_becomes_first_child(self, tree):
        tree.move("logo", "marketing")

        assert [node.id for node in tree.get("marketing").children] == ["logo", "home", "about"]
        assert [node.id for node in tree.roots] == ["marketing", "docs"]

    def test_move_onto_closed_folder_opens_it(self, tree):
        tree.move("home", "docs")

        docs = tree.get("docs")
        assert docs.is_open is True
        assert [node.id for node in docs.children] == ["home", "guide"]

    def test_move_onto_item_places_after_it(self, tree):
        tree.move("logo", "home")

        assert [node.id for node in tree.get("marketing").children] == ["home", "logo", "about"]

    def test_move_within_siblings(self, tree):
        tree.move("home", "about")

        assert [node.id for node in tree.get("marketing").children] == ["about", "home"]

    def test_move_onto_itself_is_noop(self, tree):
        before = ids(tree.flatten(include_collapsed=True))
        tree.move("docs", "docs")

        assert ids(tree.flatten(include_collapsed=True)) == before

    def test_move_into_own_subtree_rejected(self, tree):
        with pytest.raises(InvalidTreeOperationError):
            tree.move("marketing", "home")

        assert tree.find_parent("home").id == "marketing"
        assert len(tree) == 6

    def test_move_unknown_item(self, tree):
        with pytest.raises(NotFoundError):
            tree.move("ghost", "marketing")

    def test_move_folder_carries_subtree(self, tree):
        tree.move("docs", "logo")

        assert [node.id for node in tree.roots] == ["marketing", "logo", "docs"]
        assert [node.id for node in tree.get("docs").children] == ["guide"]


class TestMutation:
    """Tests for add, remove, reparent, toggle and rename."""

    def test_add_to_root(self, tree):
        tree.add(SiteNode(id="new", type="page", name="New"))

        assert tree.roots[-1].id == "new"

    def test_add_to_closed_folder_opens_it(self, tree):
        tree.add(SiteNode(id="faq", type="page", name="FAQ"), parent_id="docs")

        docs = tree.get("docs")
        assert docs.is_open is True
        assert [node.id for node in docs.children] == ["guide", "faq"]

    def test_add_to_non_folder_rejected(self, tree):
        with pytest.raises(InvalidTreeOperationError):
            tree.add(SiteNode(id="x", type="page", name="X"), parent_id="home")

    def test_add_duplicate_rejected(self, tree):
        with pytest.raises(InvalidTreeOperationError):
            tree.add(SiteNode(id="home", type="page", name="Home again"))

    def test_add_to_missing_parent(self, tree):
        with pytest.raises(NotFoundError):
            tree.add(SiteNode(id="x", type="page", name="X"), parent_id="ghost")

    def test_remove_detaches_subtree(self, tree):
        removed = tree.remove("marketing")

        assert [node.id for node in removed.walk()] == ["marketing", "home", "about"]
        assert len(tree) == 3
        assert tree.remove("marketing") is None

    def test_reparent_appends(self, tree):
        tree.reparent("home", "docs")

        assert [node.id for node in tree.get("docs").children] == ["guide", "home"]

    def test_reparent_to_root(self, tree):
        tree.reparent("guide", None)

        assert tree.roots[-1].id == "guide"

    def test_reparent_into_descendant_rejected(self, tree):
        tree.add(SiteNode(id="sub", type="folder", name="Sub"), parent_id="marketing")

        with pytest.raises(InvalidTreeOperationError):
            tree.reparent("marketing", "sub")

    def test_reparent_under_page_rejected(self, tree):
        with pytest.raises(InvalidTreeOperationError):
            tree.reparent("logo", "home")

    def test_toggle_folder(self, tree):
        tree.toggle("marketing")

        assert tree.get("marketing").is_open is False
        assert ids(tree.flatten()) == ["marketing", "docs", "logo"]

    def test_toggle_non_folder_is_noop(self, tree):
        node = tree.toggle("logo")

        assert node.is_open is None

    def test_rename(self, tree):
        tree.rename("home", "Start")

        assert tree.get("home").name == "Start"

    def test_positions(self, tree):
        assert list(tree.positions()) == [
            ("marketing", None, 0),
            ("home", "marketing", 0),
            ("about", "marketing", 1),
            ("docs", None, 1),
            ("guide", "docs", 0),
            ("logo", None, 2),
        ]
