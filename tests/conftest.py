"""Shared fixtures for aria_treeview tests.

Provides sample source data, a presentation adapter that records every
engine-to-adapter call, and an isolated user configuration directory so no
test reads or writes the real home directory.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from aria_treeview.config import ConfigManager
from aria_treeview.core.tree import Tree

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


class RecordingAdapter:
    """Presentation adapter fake recording every call it receives."""

    def __init__(self):
        self.rendered = []
        self.focus_requests = []
        self.scroll_requests = []
        self.notifications = []

    def render(self, node):
        self.rendered.append(node.id)
        return f"h-{node.id}"

    def request_focus(self, handle):
        self.focus_requests.append(handle)

    def request_scroll_into_view(self, handle, options):
        self.scroll_requests.append((handle, options))

    def notify_state_changed(self, node, aspects):
        self.notifications.append((node.id, set(a.value for a in aspects)))


def make_record(node_id, label=None, payload=None, children=None):
    record = {"id": node_id, "label": label if label is not None else str(node_id)}
    if payload is not None:
        record["payload"] = payload
    if children is not None:
        record["children"] = children
    return record


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the user config directory at a temp dir and reset the singleton."""
    config_dir = tmp_path / "user_config"
    monkeypatch.setenv("ARIA_TREEVIEW_CONFIG_DIR", str(config_dir))
    ConfigManager.reset()
    yield config_dir
    ConfigManager.reset()


@pytest.fixture
def record():
    """Factory building one source record mapping."""
    return make_record


@pytest.fixture
def adapter():
    return RecordingAdapter()


@pytest.fixture
def sample_records():
    """Forest used across tests.

    A
    ├─ A1
    └─ A2
       └─ A2a
    B
    C
    └─ C1
    """
    return [
        make_record("A", "Alpha", payload={"kind": "folder"}, children=[
            make_record("A1", "Alpha one", payload={"kind": "file"}),
            make_record("A2", "Alpha two", payload={"kind": "folder"}, children=[
                make_record("A2a", "Alpha two a", payload={"kind": "file"}),
            ]),
        ]),
        make_record("B", "Bravo", payload={"kind": "file"}),
        make_record("C", "Charlie", payload={"kind": "folder"}, children=[
            make_record("C1", "Charlie one", payload={"kind": "file"}),
        ]),
    ]


@pytest.fixture
def tree(sample_records, adapter):
    return Tree(sample_records, adapter)


@pytest.fixture
def small_records():
    """``[A[B, C], D]``."""
    return [
        make_record("A", children=[make_record("B"), make_record("C")]),
        make_record("D"),
    ]


@pytest.fixture
def small_tree(small_records):
    return Tree(small_records)
