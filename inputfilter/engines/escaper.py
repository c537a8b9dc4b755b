"""Attribute value pre-pass for the tag scanner.

The tag scanner looks for the first `>` after a `<`. A quoted attribute value
such as `title="a>b"` would end the tag early and leak the rest of the value
out as text. Before each scan, the quoted values found inside tags have their
`<`, `>` and `"` characters turned into entities, and CSS `expression(...)`
vectors removed.
"""

import re

# `<` ... `=` then an opening quote, without crossing a `>`
_ATTRIBUTE_OPENER = re.compile(r"<[^>]*?=\s*?([\"'])", re.ASCII | re.DOTALL)

# The closing quote is the first one followed by `/>`, `>`, whitespace or the end
_CLOSING_QUOTE = {
    '"': re.compile(r'"\s*/\s*>|"\s*>|"\s+|"$', re.ASCII),
    "'": re.compile(r"'\s*/\s*>|'\s*>|'\s+|'$", re.ASCII),
}

_ESCAPES = (("<", "&lt;"), ('"', "&quot;"), (">", "&gt;"))

_CSS_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_EXPRESSION = re.compile("expression", re.IGNORECASE)
_COLON_EXPRESSION = ":expression"


def strip_css_expressions(source: str) -> str:
    """Removes CSS `expression(...)` vectors from one attribute value.

    Comments are stripped first so that `:expr/**/ession(` cannot hide the
    keyword. Three outcomes:

    - no `:expression` in the comment-free text: the value is returned as is.
    - `:expression` followed later by `(`: the comment-free text is returned
      with every `expression` removed.
    - `:expression` with no `(` after it: the comment-free text is returned.
    """
    test = _CSS_COMMENT.sub("", source)

    position = test.lower().find(_COLON_EXPRESSION)
    if position == -1:
        return source

    if "(" in test[position + len(_COLON_EXPRESSION):]:
        return _EXPRESSION.sub("", test)

    return test


def escape_attribute_values(source: str) -> str:
    """Escapes `<`, `>` and `"` inside quoted attribute values.

    The string is consumed left to right. Each time an `=` followed by a quote
    is found after a `<` (with no `>` in between), the matching closing quote
    is located and the value between them is escaped. A value with no closing
    quote runs to the end of the string; the closing quote is added back.
    Text between values is copied unchanged.

    Args:
        source (str): Raw markup.

    Returns:
        str: The markup with its attribute values escaped.
    """
    already_filtered = []
    remainder = source

    while True:
        opener = _ATTRIBUTE_OPENER.search(remainder)
        if opener is None:
            break

        value_start = opener.end()
        quote = opener.group(1)

        closing = _CLOSING_QUOTE[quote].search(remainder, value_start)
        value_end = closing.start() if closing else len(remainder)

        value = remainder[value_start:value_end]
        for char, entity in _ESCAPES:
            value = value.replace(char, entity)
        value = strip_css_expressions(value)

        already_filtered.append(remainder[:value_start] + value + quote)
        remainder = remainder[value_end + 1:]

    return "".join(already_filtered) + remainder
