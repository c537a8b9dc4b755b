"""HTML Sanitization Engine for XSS Protection.

This module implements a small, deliberately non-conformant tag scanner. It
does not build a DOM: the input is split into text (copied verbatim) and
`<...>` spans, and each span is either rebuilt from its allowed parts or
dropped. The scan is repeated until the output stops changing, so removing an
outer tag cannot expose a new one (e.g. `<<script>script>`).

Pipeline per pass:
    1. `escape_attribute_values` neutralizes `<`, `>` and `"` inside quoted
       attribute values so they cannot end a tag early.
    2. Each tag name is checked against the tag-name grammar, the fixed
       block-list and the configured tag policy.
    3. Attributes of surviving opening tags go through `clean_attributes`.

Opening and closing tags are judged on their own. There is no open/close
pairing, so output may be unbalanced.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from inputfilter.engines.attributes import TRIM_CHARS, clean_attributes
from inputfilter.engines.escaper import escape_attribute_values
from inputfilter.engines.sanitizer_config import (
    BLOCKED_TAGS,
    VOID_ELEMENTS,
    SanitizerConfig,
)

logger = logging.getLogger("inputfilter.engine")

_TAG_NAME = re.compile(r"[a-z][a-z0-9]*", re.IGNORECASE | re.ASCII)


@dataclass
class ParsedTag:
    """A single `<...>` span split into name, kind and raw attributes."""
    name: str
    is_closing_tag: bool = False
    raw_attributes: List[str] = field(default_factory=list)

    @property
    def is_void_element(self) -> bool:
        return self.name.lower() in VOID_ELEMENTS


def tokenize_attributes(tag_content: str) -> List[str]:
    """Splits the inside of a tag into raw attribute substrings.

    Starting at each space, the rest of the tag is inspected:

    - no `=` left, or a space before the next `=`: the token runs up to that
      space (or to the end).
    - otherwise, if a `"`...`"` pair follows, the token runs through the
      closing quote. Without a pair the token runs up to the next space.

    Args:
        tag_content (str): Text between `<` and `>`, tag name included.

    Returns:
        List[str]: Trimmed, non-empty tokens in tag order.
    """
    attributes = []
    tag_left = tag_content
    current_space = tag_left.find(" ")

    while current_space != -1:
        from_space = tag_left[current_space + 1:]
        next_equal = from_space.find("=")
        next_space = from_space.find(" ")

        if next_equal == -1 or (next_space != -1 and next_space < next_equal):
            # Standalone token
            if next_space == -1:
                attr, from_space = from_space.strip(TRIM_CHARS), ""
            else:
                attr, from_space = from_space[:next_space], from_space[next_space:]
        else:
            open_quote = from_space.find('"')
            close_quote = from_space.find('"', open_quote + 1) if open_quote != -1 else -1

            if close_quote != -1:
                attr, from_space = from_space[:close_quote + 1], from_space[close_quote + 1:]
            elif next_space == -1:
                attr, from_space = from_space.strip(TRIM_CHARS), ""
            else:
                attr, from_space = from_space[:next_space], from_space[next_space + 1:]

        if attr:
            attributes.append(attr.strip(TRIM_CHARS))

        current_space = from_space.find(" ")
        if current_space == -1 and from_space.strip(TRIM_CHARS):
            attributes.append(from_space.strip(TRIM_CHARS))

        tag_left = from_space

    return attributes


def parse_tag(tag_content: str) -> Optional[ParsedTag]:
    """Parses the inside of a `<...>` span.

    Returns None when the tag name is not a letter followed by letters and
    digits; such spans are removed entirely.
    """
    is_closing_tag = tag_content.startswith("/")
    name = tag_content.split(" ", 1)[0]
    if is_closing_tag:
        name = name[1:]

    if not _TAG_NAME.fullmatch(name):
        return None

    return ParsedTag(name, is_closing_tag, tokenize_attributes(tag_content))


class SanitizerEngine:
    """Strips disallowed tags and attributes according to a `SanitizerConfig`."""

    def __init__(self, config: SanitizerConfig = None):
        """Initializes the engine.

        Args:
            config (SanitizerConfig, optional): The tag/attribute policy.
                Defaults to empty allow-lists in ALLOW_ONLY_LISTED mode with
                XSS auto-clean enabled, which strips every tag.
        """
        self.config = config or SanitizerConfig()

    def remove(self, source: str) -> str:
        """Runs `clean_tags` until a pass leaves the string unchanged."""
        passes = 0

        while True:
            cleaned = self.clean_tags(source)
            passes += 1
            if cleaned == source:
                break
            source = cleaned

        logger.debug(f"Sanitizer converged after {passes} pass(es)")
        return source

    def clean_tags(self, source: str) -> str:
        """Runs one scan over `source`, rebuilding or dropping each tag.

        A `<` with no `>` after it is kept as text together with the rest of
        the string, and scanning stops.
        """
        source = escape_attribute_values(source)
        pre_tag = []
        post_tag = source

        while True:
            tag_open_start = post_tag.find("<")
            if tag_open_start == -1:
                break

            pre_tag.append(post_tag[:tag_open_start])
            post_tag = post_tag[tag_open_start:]

            tag_open_end = post_tag.find(">", 1)
            if tag_open_end == -1:
                pre_tag.append(post_tag)
                post_tag = ""
                break

            current_tag = post_tag[1:tag_open_end]
            post_tag = post_tag[tag_open_end + 1:]

            tag = parse_tag(current_tag)
            if tag is None or self._is_blocked(tag):
                continue

            if self.config.tag_allowed(tag.name):
                pre_tag.append(self._render(tag))

        return "".join(pre_tag) + post_tag

    def _is_blocked(self, tag: ParsedTag) -> bool:
        return self.config.xss_auto_clean and tag.name.lower() in BLOCKED_TAGS

    def _render(self, tag: ParsedTag) -> str:
        if tag.is_closing_tag:
            return f"</{tag.name}>"

        rendered = "<" + tag.name
        for attr in clean_attributes(tag.raw_attributes, self.config):
            rendered += " " + attr

        if tag.is_void_element:
            return rendered + " />"
        return rendered + ">"
