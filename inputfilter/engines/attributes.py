"""Attribute policy for the tag scanner.

Takes the raw attribute substrings of one opening tag and returns the ones
that may be re-emitted, rebuilt as `name="value"` or as a bare boolean name.
"""

import html
import re
from typing import Iterable, List, NamedTuple, Optional

from inputfilter.engines.sanitizer_config import (
    BLOCKED_ATTRIBUTES,
    BOOLEAN_ATTRIBUTES,
    SanitizerConfig,
)

# Characters stripped by a plain trim
TRIM_CHARS = " \t\n\r\0\x0b"

_EQUALS_SPACING = re.compile(r"\s*=\s*", re.ASCII)
_ATTRIBUTE_NAME = re.compile(r"[\w:-]+")
_BACKSLASH_ESCAPE = re.compile(r"\\(.?)", re.DOTALL)

# `&column;` is a misspelling seen in real payloads, matched on purpose
_SCRIPT_SCHEME = re.compile(
    r"(?:(?:java|vb|live)script|behaviour|mocha)(?::|&colon;|&column;)",
    re.IGNORECASE,
)

_STRIPPED_FROM_VALUES = ("&#", "\n", "\r", '"')


class AttributeToken(NamedTuple):
    """One attribute split into its decoded name and optional raw value."""
    name: str
    value: Optional[str]

    @property
    def has_value(self) -> bool:
        return self.value is not None


def check_attribute(name: str, value: str) -> bool:
    """Returns True if the name/value pair looks like a script injection.

    Flags a `style` value containing `expression`, and any value using a
    script-like scheme (`javascript:`, `vbscript:`, `livescript:`,
    `behaviour:`, `mocha:`), including the `&colon;` and `&column;` forms.
    """
    name = name.lower()
    value = html.unescape(value.lower()).lower()

    return (
        ("expression" in value and name == "style")
        or _SCRIPT_SCHEME.search(value) is not None
    )


def parse_attribute(raw: str) -> Optional[AttributeToken]:
    """Splits a raw `name=value` substring on its first `=`.

    Returns None when the decoded name is not made of letters, digits,
    underscores, colons and hyphens.
    """
    raw = _EQUALS_SPACING.sub("=", raw.strip(TRIM_CHARS))
    name, separator, value = raw.partition("=")
    name = html.unescape(name).strip(TRIM_CHARS).lower()

    if not _ATTRIBUTE_NAME.fullmatch(name):
        return None

    return AttributeToken(name, value if separator else None)


def _strip_slashes(value: str) -> str:
    return _BACKSLASH_ESCAPE.sub(
        lambda match: "\0" if match.group(1) == "0" else match.group(1), value
    )


def _clean_value(value: str) -> str:
    value = _strip_slashes(value)
    for fragment in _STRIPPED_FROM_VALUES:
        value = value.replace(fragment, "")
    return value


def clean_attributes(raw_attributes: Iterable[str], config: SanitizerConfig) -> List[str]:
    """Filters the attributes of one tag against the configured policy.

    Rules, applied per attribute and independently of its siblings:

    1. Names outside the `[\\w:-]` character class are dropped.
    2. With `xss_auto_clean`, blocked names and `on*` event handlers are
       dropped.
    3. An explicit value is unquoted and trimmed; an empty one is dropped.
       Values flagged by `check_attribute` are dropped even when the name is
       allowed.
    4. A bare name survives only if it is allowed and a boolean attribute.

    Args:
        raw_attributes (Iterable[str]): Attribute substrings in tag order.
        config (SanitizerConfig): The active policy.

    Returns:
        List[str]: Attributes to re-emit, in their original order.
    """
    new_set = []

    for raw in raw_attributes:
        if not raw:
            continue

        token = parse_attribute(raw)
        if token is None:
            continue

        name = token.name
        if config.xss_auto_clean and (name in BLOCKED_ATTRIBUTES or name.startswith("on")):
            continue

        allowed = config.attribute_allowed(name)

        if token.has_value:
            value = token.value.strip("\"'").strip(TRIM_CHARS)
            if not value:
                # An empty quoted value is not a boolean attribute
                continue

            value = _clean_value(value)

            if check_attribute(name, value):
                continue

            if allowed:
                new_set.append(f'{name}="{value}"')
        elif allowed and name in BOOLEAN_ATTRIBUTES:
            new_set.append(name)

    return new_set
