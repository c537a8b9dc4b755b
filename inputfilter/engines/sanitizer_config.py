"""Immutable configuration for the HTML sanitization engine.

A `SanitizerConfig` is built once and handed to the engine. It is frozen, so a
single instance can be shared between threads. To change the policy, build a
new config (and a new engine) instead of mutating the old one.

The fixed block-lists below ship with every instance and are only consulted
when `xss_auto_clean` is enabled.
"""

from enum import IntEnum
from typing import FrozenSet, Iterable

from pydantic import BaseModel, ConfigDict, field_validator


class FilterMode(IntEnum):
    """How a configured name-list is interpreted."""
    ALLOW_ONLY_LISTED = 0  # Only the listed names are permitted
    BLOCK_ONLY_LISTED = 1  # The listed names are forbidden, all others pass


BLOCKED_TAGS: FrozenSet[str] = frozenset({
    "applet", "body", "bgsound", "base", "basefont", "canvas", "embed",
    "frame", "frameset", "head", "html", "id", "iframe", "ilayer", "layer",
    "link", "meta", "name", "object", "script", "style", "title", "xml",
})

BLOCKED_ATTRIBUTES: FrozenSet[str] = frozenset({
    "action", "background", "codebase", "dynsrc", "formaction", "lowsrc",
})

# Attributes that may appear without a value, e.g. <input disabled>
BOOLEAN_ATTRIBUTES: FrozenSet[str] = frozenset({
    # HTML5
    "allowfullscreen", "async", "autofocus", "autoplay", "checked",
    "controls", "default", "defer", "disabled", "formnovalidate",
    "hidden", "inert", "ismap", "itemscope", "loop", "multiple",
    "muted", "nomodule", "novalidate", "open", "readonly", "required",
    "reversed", "selected", "truespeed",
    # Legacy
    "compact", "declare", "nohref", "noresize", "noshade", "nowrap", "scoped",
})

VOID_ELEMENTS: FrozenSet[str] = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input", "link",
    "meta", "source", "track", "wbr",
})


def is_allowed(name: str, listed: FrozenSet[str], mode: FilterMode) -> bool:
    """Applies the allow/block rule to a single (already lowercased) name.

    A name is rejected when it is listed in BLOCK mode, or missing from the
    list in ALLOW mode. Every other combination is accepted.
    """
    found = name in listed
    return (
        (found and mode == FilterMode.ALLOW_ONLY_LISTED)
        or (not found and mode == FilterMode.BLOCK_ONLY_LISTED)
    )


class SanitizerConfig(BaseModel):
    """The tag/attribute policy of one sanitizer instance.

    Attributes:
        tag_allow_list (FrozenSet[str]): Lowercase tag names the `tag_mode`
            applies to.
        attribute_allow_list (FrozenSet[str]): Lowercase attribute names the
            `attribute_mode` applies to.
        tag_mode (FilterMode): Whether `tag_allow_list` lists the only
            permitted tags or the only forbidden ones.
        attribute_mode (FilterMode): Same, for attributes.
        xss_auto_clean (bool): Enables the fixed block-lists and the `on*`
            event-handler rule on top of the configured lists.
    """
    model_config = ConfigDict(frozen=True)

    tag_allow_list: FrozenSet[str] = frozenset()
    attribute_allow_list: FrozenSet[str] = frozenset()
    tag_mode: FilterMode = FilterMode.ALLOW_ONLY_LISTED
    attribute_mode: FilterMode = FilterMode.ALLOW_ONLY_LISTED
    xss_auto_clean: bool = True

    @field_validator("tag_allow_list", "attribute_allow_list", mode="before")
    @classmethod
    def _lowercase_names(cls, value: Iterable[str]) -> FrozenSet[str]:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            value = [value]
        try:
            names = iter(value)
        except TypeError:
            raise ValueError(f"Expected a list of names, got {type(value).__name__}")
        return frozenset(str(name).lower() for name in names)

    def tag_allowed(self, name: str) -> bool:
        """Returns True if the tag policy admits `name`."""
        return is_allowed(name.lower(), self.tag_allow_list, self.tag_mode)

    def attribute_allowed(self, name: str) -> bool:
        """Returns True if the attribute policy admits `name`."""
        return is_allowed(name.lower(), self.attribute_allow_list, self.attribute_mode)
