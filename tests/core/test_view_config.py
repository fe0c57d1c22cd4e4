import pytest

from aria_treeview.core.exceptions import ConfigurationError
from aria_treeview.core.models.view_config import (
    DEFAULT_TREE_VIEW_SETTINGS,
    ScrollOptions,
    TreeViewSettings,
)


def test_empty_section_yields_defaults():
    settings = TreeViewSettings.from_mapping({})
    assert settings == DEFAULT_TREE_VIEW_SETTINGS
    assert settings.single_selection is False
    assert settings.scroll_options == ScrollOptions("smooth", "center", "center")


def test_partial_section_is_merged_with_defaults():
    settings = TreeViewSettings.from_mapping({
        "selection_mode": " Single ",
        "scroll_into_view": False,
        "scroll_options": {"block": "nearest"},
        "expand_control": {"label_collapsed": "open"},
    })
    assert settings.single_selection is True
    assert settings.scroll_into_view is False
    assert settings.scroll_options == ScrollOptions("smooth", "nearest", "center")
    assert settings.expand_control.label_collapsed == "open"
    assert settings.expand_control.label_expanded == "collapse item"


@pytest.mark.parametrize(
    "section, key",
    [
        ({"selection_mode": "many"}, "selection_mode"),
        ({"scroll_options": {"behavior": "bouncy"}}, "scroll_options"),
        ({"scroll_options": {"inline": "left"}}, "scroll_options"),
        ({"scroll_options": ["smooth"]}, "scroll_options"),
        ({"expand_control": "labels"}, "expand_control"),
    ],
)
def test_invalid_values_raise_configuration_error(section, key):
    with pytest.raises(ConfigurationError) as exc_info:
        TreeViewSettings.from_mapping(section)
    assert exc_info.value.section == "tree_view"
    assert exc_info.value.key == key


def test_to_dict_round_trips_through_from_mapping():
    settings = TreeViewSettings.from_mapping({"selection_mode": "single"})
    assert TreeViewSettings.from_mapping(settings.to_dict()) == settings
