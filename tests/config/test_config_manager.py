import logging

import pytest

from aria_treeview.config import ConfigManager
from aria_treeview.core.exceptions import ConfigurationError
from aria_treeview.core.keys import Key


def test_packaged_defaults_are_loaded():
    config = ConfigManager()
    assert config.get_tree_view_config()["selection_mode"] == "multiple"
    assert config.get_keymap_config()["keys"]["ArrowDown"] == "DOWN"
    assert config.get_logging_config()["version"] == 1


def test_singleton_until_reset():
    first = ConfigManager()
    assert ConfigManager() is first
    ConfigManager.reset()
    assert ConfigManager() is not first


def test_user_directory_is_seeded_with_defaults(isolated_config):
    ConfigManager()
    for name in ("tree_view.yml", "keymap.yml", "logging.yml"):
        assert (isolated_config / name).is_file()


def test_user_overrides_are_merged(isolated_config):
    isolated_config.mkdir(parents=True)
    (isolated_config / "tree_view.yml").write_text(
        "selection_mode: single\nscroll_into_view: false\n", encoding="utf-8"
    )
    settings = ConfigManager().get_tree_view_settings()
    assert settings.single_selection is True
    assert settings.scroll_into_view is False
    # untouched keys still come from the packaged default
    assert settings.expand_control.label_collapsed == "expand item"


def test_unparsable_user_file_is_ignored(isolated_config, caplog):
    isolated_config.mkdir(parents=True)
    (isolated_config / "keymap.yml").write_text("keys: [unclosed\n", encoding="utf-8")
    with caplog.at_level(logging.ERROR, logger="aria_treeview.config.manager"):
        keymap = ConfigManager().get_keymap()
    assert keymap.lookup("ArrowUp") is Key.UP
    assert "Could not parse user config" in caplog.text


def test_non_mapping_user_file_is_ignored(isolated_config):
    isolated_config.mkdir(parents=True)
    (isolated_config / "tree_view.yml").write_text("- just\n- a list\n", encoding="utf-8")
    assert ConfigManager().get_tree_view_config()["selection_mode"] == "multiple"


def test_invalid_override_value_surfaces_when_building_settings(isolated_config):
    isolated_config.mkdir(parents=True)
    (isolated_config / "tree_view.yml").write_text("selection_mode: sometimes\n", encoding="utf-8")
    config = ConfigManager()
    with pytest.raises(ConfigurationError):
        config.get_tree_view_settings()
