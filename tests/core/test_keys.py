import pytest

from aria_treeview.core.exceptions import ConfigurationError
from aria_treeview.core.keys import (
    CommandKind,
    InputTarget,
    Key,
    KeyCommand,
    KeyCommandResolver,
    KeyMap,
)
from aria_treeview.core.tree import Tree


@pytest.fixture
def resolver():
    return KeyCommandResolver()


def _press(tree, resolver, key, node=None, target=InputTarget.ITEM):
    """Resolve ``key`` on ``node`` (default: active node) and apply it."""
    node = node if node is not None else tree.active_node
    command = resolver.resolve(key, node, tree, target)
    tree.apply_command(command)
    return command


# ---------------------------
# Resolution table
# ---------------------------

@pytest.mark.parametrize("key", [Key.RETURN, Key.SPACE])
def test_return_and_space_select_the_item(tree, resolver, key):
    b = tree.get_node("B")
    command = resolver.resolve(key, b, tree)
    assert command == KeyCommand(CommandKind.SELECT_AND_ACTIVATE, b, consumed=True)


@pytest.mark.parametrize("key", [Key.RETURN, Key.SPACE])
def test_return_on_expand_control_is_left_to_platform(tree, resolver, key):
    command = resolver.resolve(key, tree.get_node("A"), tree, InputTarget.EXPAND_CONTROL)
    assert command.kind is CommandKind.NONE
    assert command.consumed is False


def test_right_on_parent_expands_and_on_leaf_is_consumed_noop(tree, resolver):
    a = tree.get_node("A")
    assert resolver.resolve(Key.RIGHT, a, tree).kind is CommandKind.EXPAND_AND_FOCUS_FIRST_CHILD
    leaf = resolver.resolve(Key.RIGHT, tree.get_node("B"), tree)
    assert leaf.kind is CommandKind.NONE
    assert leaf.consumed is True


def test_left_collapses_expanded_node(tree, resolver):
    a = tree.get_node("A")
    tree.set_expanded(a, True)
    assert resolver.resolve(Key.LEFT, a, tree) == KeyCommand(CommandKind.COLLAPSE, a)


def test_left_on_collapsed_child_focuses_parent(tree, resolver):
    a2 = tree.get_node("A2")
    assert resolver.resolve(Key.LEFT, a2, tree) == KeyCommand(CommandKind.FOCUS, tree.get_node("A"))


def test_left_on_root_focuses_first_root(tree, resolver):
    command = resolver.resolve(Key.LEFT, tree.get_node("C"), tree)
    assert command == KeyCommand(CommandKind.FOCUS, tree.get_node("A"))


def test_down_and_up_follow_rendered_rows(tree, resolver):
    tree.expand_all()
    a2a = tree.get_node("A2a")
    assert resolver.resolve(Key.DOWN, a2a, tree).node is tree.get_node("B")
    assert resolver.resolve(Key.UP, tree.get_node("B"), tree).node is a2a


def test_down_at_end_and_up_at_top_are_consumed_noops(tree, resolver):
    end = resolver.resolve(Key.DOWN, tree.get_node("C"), tree)
    top = resolver.resolve(Key.UP, tree.get_node("A"), tree)
    for command in (end, top):
        assert command.kind is CommandKind.NONE
        assert command.consumed is True


def test_home_and_end_jump_between_roots(record, resolver):
    t = Tree([record("A"), record("B"), record("C", children=[record("C1")])])
    t.set_expanded(t.get_node("C"), True)
    c1 = t.get_node("C1")
    assert resolver.resolve(Key.HOME, c1, t).node is t.get_node("A")
    # END never descends into an expanded last root
    assert resolver.resolve(Key.END, t.get_node("A"), t).node is t.get_node("C")


@pytest.mark.parametrize("key", [Key.TAB, Key.PAGE_UP, Key.PAGE_DOWN, None])
def test_other_keys_are_not_consumed(tree, resolver, key):
    command = resolver.resolve(key, tree.get_node("A"), tree)
    assert command.kind is CommandKind.NONE
    assert command.consumed is False


def test_without_focus_only_home_and_end_resolve(tree, resolver):
    assert resolver.resolve(Key.DOWN, None, tree).consumed is False
    assert resolver.resolve(Key.RETURN, None, tree).consumed is False
    assert resolver.resolve(Key.HOME, None, tree).node is tree.get_node("A")
    assert resolver.resolve(Key.END, None, tree).node is tree.get_node("C")


def test_home_on_empty_tree_is_noop(resolver):
    command = resolver.resolve(Key.HOME, None, Tree([]))
    assert command.kind is CommandKind.NONE


def test_resolution_does_not_mutate(tree, resolver):
    a = tree.get_node("A")
    for key in Key:
        resolver.resolve(key, a, tree)
    assert not a.expanded and not a.selected
    assert tree.active_node is None


# ---------------------------
# Interaction sequences
# ---------------------------

def test_right_then_left_returns_to_parent(tree, resolver):
    a = tree.get_node("A")
    tree.set_active(a)

    _press(tree, resolver, Key.RIGHT)
    assert a.expanded is True
    assert tree.active_node is tree.get_node("A1")

    _press(tree, resolver, Key.LEFT)
    assert tree.active_node is a
    assert a.expanded is True

    _press(tree, resolver, Key.LEFT)
    assert a.expanded is False
    assert tree.active_node is a


def test_arrow_walk_through_tree(tree, resolver):
    tree.set_active(tree.get_node("A"))
    visited = [tree.active_node.id]
    for key in (Key.RIGHT, Key.DOWN, Key.RIGHT, Key.DOWN, Key.DOWN, Key.DOWN, Key.RIGHT, Key.DOWN):
        _press(tree, resolver, key)
        visited.append(tree.active_node.id)
    assert visited == ["A", "A1", "A2", "A2a", "B", "C", "C", "C1", "C1"]


# ---------------------------
# KeyMap
# ---------------------------

def test_keymap_translates_names_codes_and_symbols():
    keymap = KeyMap.from_mapping({"keys": {"ArrowDown": "DOWN", " ": "space"}})
    assert keymap.lookup("ArrowDown") is Key.DOWN
    assert keymap.lookup(" ") is Key.SPACE
    assert keymap.lookup(13) is Key.RETURN
    assert keymap.lookup("home") is Key.HOME
    assert keymap.lookup(Key.END) is Key.END
    assert keymap.lookup("F5") is None
    assert keymap.lookup(999) is None
    assert keymap.lookup(None) is None
    assert len(keymap) == 2


def test_keymap_rejects_unknown_symbol():
    with pytest.raises(ConfigurationError) as exc_info:
        KeyMap.from_mapping({"keys": {"Escape": "ESCAPE"}})
    assert "keymap.keys" in str(exc_info.value)


def test_resolver_accepts_raw_key_codes(tree, resolver):
    b = tree.get_node("B")
    assert resolver.resolve(40, b, tree) == KeyCommand(CommandKind.FOCUS, tree.get_node("C"))
    assert resolver.resolve(13, b, tree).kind is CommandKind.SELECT_AND_ACTIVATE


@pytest.mark.parametrize("key", [33, 112, "ArrowDown", True, 1.5])
def test_resolver_ignores_unrecognised_raw_keys(tree, resolver, key):
    command = resolver.resolve(key, tree.get_node("A"), tree)
    assert command == KeyCommand.ignored()
