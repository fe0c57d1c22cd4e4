"""View configuration models for the tree engine.

Typed views over the ``tree_view`` configuration section: selection policy,
scroll behaviour requested from the presentation adapter, and the labels of
the expand/collapse control.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from aria_treeview.core.exceptions import ConfigurationError

SELECTION_MODES = ("multiple", "single")

_SCROLL_BEHAVIORS = ("auto", "smooth", "instant")
_SCROLL_ALIGNMENTS = ("start", "center", "end", "nearest")


@dataclass(frozen=True)
class ScrollOptions:
    """How the adapter should scroll a newly active node into view."""

    behavior: str = "smooth"
    block: str = "center"
    inline: str = "center"

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "ScrollOptions":
        data = data or {}
        if not isinstance(data, Mapping):
            raise ConfigurationError("expected a mapping", section="tree_view", key="scroll_options")
        defaults = cls()
        behavior = str(data.get("behavior", defaults.behavior))
        block = str(data.get("block", defaults.block))
        inline = str(data.get("inline", defaults.inline))
        if behavior not in _SCROLL_BEHAVIORS:
            raise ConfigurationError(
                f"unsupported behavior {behavior!r}", section="tree_view", key="scroll_options"
            )
        for name, value in (("block", block), ("inline", inline)):
            if value not in _SCROLL_ALIGNMENTS:
                raise ConfigurationError(
                    f"unsupported {name} alignment {value!r}", section="tree_view", key="scroll_options"
                )
        return cls(behavior=behavior, block=block, inline=inline)


@dataclass(frozen=True)
class ExpandControlConfig:
    """Accessible labels for the expand/collapse control of a parent node."""

    label_expanded: str = "collapse item"
    label_collapsed: str = "expand item"
    prepend: bool = True

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "ExpandControlConfig":
        data = data or {}
        if not isinstance(data, Mapping):
            raise ConfigurationError("expected a mapping", section="tree_view", key="expand_control")
        defaults = cls()
        return cls(
            label_expanded=str(data.get("label_expanded", defaults.label_expanded)),
            label_collapsed=str(data.get("label_collapsed", defaults.label_collapsed)),
            prepend=bool(data.get("prepend", defaults.prepend)),
        )


@dataclass(frozen=True)
class TreeViewSettings:
    """Validated ``tree_view`` section."""

    selection_mode: str = "multiple"
    scroll_into_view: bool = True
    scroll_options: ScrollOptions = field(default_factory=ScrollOptions)
    expand_control: ExpandControlConfig = field(default_factory=ExpandControlConfig)

    @property
    def single_selection(self) -> bool:
        return self.selection_mode == "single"

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "TreeViewSettings":
        """Build settings from a config section, filling gaps with defaults.

        Raises
        ------
        ConfigurationError
            If a value is present but unusable.
        """
        data = data or {}
        mode = str(data.get("selection_mode", "multiple")).strip().lower()
        if mode not in SELECTION_MODES:
            raise ConfigurationError(
                f"expected one of {', '.join(SELECTION_MODES)}, got {mode!r}",
                section="tree_view",
                key="selection_mode",
            )
        return cls(
            selection_mode=mode,
            scroll_into_view=bool(data.get("scroll_into_view", True)),
            scroll_options=ScrollOptions.from_mapping(data.get("scroll_options")),
            expand_control=ExpandControlConfig.from_mapping(data.get("expand_control")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "selection_mode": self.selection_mode,
            "scroll_into_view": self.scroll_into_view,
            "scroll_options": {
                "behavior": self.scroll_options.behavior,
                "block": self.scroll_options.block,
                "inline": self.scroll_options.inline,
            },
            "expand_control": {
                "label_expanded": self.expand_control.label_expanded,
                "label_collapsed": self.expand_control.label_collapsed,
                "prepend": self.expand_control.prepend,
            },
        }


DEFAULT_TREE_VIEW_SETTINGS = TreeViewSettings()
