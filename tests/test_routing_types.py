"""Tests for twineweb.routing.types and pattern — URL and import naming."""

import pytest

from twineweb.errors import GenerationError
from twineweb.routing.pattern import (
    Segment,
    parse_segment,
    router_method_name,
    sanitize_package_name,
)
from twineweb.routing.types import LayoutChain, LayoutInfo, RouteNode


def _chain(*segments: str, root: str = "/proj/app") -> RouteNode:
    """Build root -> segment -> ... and return the deepest node.

    Segments are directory names; bracketed names become parameters.
    """
    node = RouteNode(path=root)
    path = root
    for name in segments:
        path = f"{path}/{name}"
        seg = parse_segment(name)
        child = RouteNode(
            path=path,
            url_segment=seg.value,
            is_dynamic=seg.is_dynamic,
            is_catch_all=seg.is_catch_all,
            param_name=seg.param_name,
        )
        node.add_child(child)
        node = child
    return node


class TestParseSegment:
    def test_literal(self) -> None:
        assert parse_segment("users") == Segment("users")

    def test_dynamic(self) -> None:
        seg = parse_segment("[id]")
        assert seg.value == "{id}"
        assert seg.is_dynamic is True
        assert seg.is_catch_all is False
        assert seg.param_name == "id"

    def test_catch_all(self) -> None:
        seg = parse_segment("[...slug]")
        assert seg.value == "{slug...}"
        assert seg.is_dynamic is True
        assert seg.is_catch_all is True
        assert seg.param_name == "slug"

    def test_unbalanced_bracket_is_literal(self) -> None:
        assert parse_segment("[id").value == "[id"

    def test_empty_param_kept_for_validator(self) -> None:
        seg = parse_segment("[]")
        assert seg.is_dynamic is True
        assert seg.param_name == ""


class TestSanitizePackageName:
    @pytest.mark.parametrize(
        ("dir_name", "expected"),
        [
            ("users", "users"),
            ("[id]", "id_param"),
            ("[...slug]", "slug_catchall"),
            ("user-profile", "user_profile"),
            ("v1.2", "v1_2"),
            ("2fa", "_2fa"),
        ],
    )
    def test_sanitize(self, dir_name: str, expected: str) -> None:
        assert sanitize_package_name(dir_name) == expected


class TestRouterMethodName:
    @pytest.mark.parametrize(
        ("verb", "expected"),
        [("GET", "get"), ("POST", "post"), ("PUT", "put"), ("DELETE", "delete"), ("PATCH", "patch")],
    )
    def test_known_verbs(self, verb: str, expected: str) -> None:
        assert router_method_name(verb) == expected

    def test_unknown_verb_passes_through(self) -> None:
        assert router_method_name("UNKNOWN") == "UNKNOWN"


class TestFullPath:
    def test_pages_branch_is_elided(self) -> None:
        assert _chain("pages", "users", "[id]").full_path() == "/users/{id}"

    def test_api_branch_is_kept(self) -> None:
        assert _chain("api", "users", "[id]").full_path() == "/api/users/{id}"

    def test_catch_all(self) -> None:
        assert _chain("pages", "docs", "[...path]").full_path() == "/docs/{path...}"

    def test_pages_node_is_index(self) -> None:
        node = _chain("pages")
        assert node.full_path() == ""
        assert node.url_pattern() == "/"

    def test_root_is_index(self) -> None:
        assert RouteNode(path="/proj/app").url_pattern() == "/"

    def test_nested_directory_named_pages_is_kept(self) -> None:
        assert _chain("pages", "docs", "pages").full_path() == "/docs/pages"

    def test_api_index(self) -> None:
        assert _chain("api").url_pattern() == "/api"


class TestPackageAlias:
    def test_alias_from_path_below_app(self) -> None:
        assert _chain("pages", "users").package_alias() == "pages_users"

    def test_dynamic_segments_sanitized(self) -> None:
        node = _chain("pages", "users", "[id]", "[...rest]")
        assert node.package_alias() == "pages_users_id_param_rest_catchall"

    def test_root_alias(self) -> None:
        assert RouteNode(path="/proj/app").package_alias() == "root"

    def test_detached_branch(self) -> None:
        pages = RouteNode(path="/proj/app/pages", url_segment="pages")
        users = RouteNode(path="/proj/app/pages/users", url_segment="users")
        pages.add_child(users)
        assert users.package_alias() == "pages_users"


class TestPackagePath:
    def test_relative_to_project_root(self) -> None:
        node = _chain("pages", "users", "[id]", root="/proj/app")
        assert node.package_path("demo_app", "/proj") == "demo_app.app.pages.users.id_param"

    def test_without_project_root(self) -> None:
        node = RouteNode(path="/app/pages/users")
        assert node.package_path("demo") == "demo.app.pages.users"

    def test_outside_project_root_fails(self) -> None:
        node = RouteNode(path="/elsewhere/app/pages")
        with pytest.raises(GenerationError, match="not inside project root"):
            node.package_path("demo", "/proj")


class TestRouteNode:
    def test_add_child_sets_parent(self) -> None:
        parent = RouteNode(path="/app")
        child = RouteNode(path="/app/pages", url_segment="pages")
        parent.add_child(child)
        assert child.parent is parent
        assert parent.children == [child]

    def test_ancestors_root_first(self) -> None:
        leaf = _chain("pages", "users")
        assert [n.url_segment for n in leaf.ancestors()] == ["", "pages", "users"]

    def test_walk_is_preorder(self) -> None:
        root = RouteNode(path="/app")
        a = RouteNode(path="/app/a", url_segment="a")
        b = RouteNode(path="/app/b", url_segment="b")
        a1 = RouteNode(path="/app/a/1", url_segment="1")
        root.add_child(a)
        root.add_child(b)
        a.add_child(a1)
        assert [n.url_segment for n in root.walk()] == ["", "a", "1", "b"]

    def test_has_content(self) -> None:
        assert RouteNode(path="/x").has_content() is False
        assert RouteNode(path="/x", handler_file="/x/page.py").has_content() is True
        assert RouteNode(path="/x", has_layout=True).has_content() is True

    def test_repr_omits_parent(self) -> None:
        leaf = _chain("pages", "users")
        assert "parent=" not in repr(leaf)


class TestLayoutChain:
    def test_empty(self) -> None:
        chain = LayoutChain()
        assert chain.has_layouts() is False
        assert len(chain) == 0

    def test_layout_dir(self) -> None:
        info = LayoutInfo("/app/pages/layout.py", "demo.app.pages.layout", "pages_layout")
        assert info.layout_dir == "/app/pages"
        assert info.func_name == "layout"
