"""Primitive value coercers.

Each filter takes the text form of a value and returns the coerced result.
They share no state and never raise: a value that cannot be coerced yields
the zero value of the target type (0, 0.0 or an empty string).
"""

import re

_INT_PATTERN = re.compile(r"[-+]?[0-9]+")
_FLOAT_PATTERN = re.compile(r"[-+]?[0-9]+(\.[0-9]+)?([eE][-+]?[0-9]+)?")

_NOT_WORD = re.compile(r"[^A-Z_]", re.IGNORECASE | re.ASCII)
_NOT_ALNUM = re.compile(r"[^A-Z0-9]", re.IGNORECASE | re.ASCII)
_NOT_CMD = re.compile(r"[^A-Z0-9_.-]", re.IGNORECASE | re.ASCII)
_NOT_BASE64 = re.compile(r"[^A-Z0-9/+=]", re.IGNORECASE | re.ASCII)
_USERNAME_JUNK = re.compile(r"[\x00-\x1F\x7F<>\"'%&]")

_POSIX_PATH = re.compile(
    r"^[A-Za-z0-9_/-]+[A-Za-z0-9_.-]*([\\/]+[A-Za-z0-9_-]+[A-Za-z0-9_.-]*)*$"
)
_WINDOWS_PATH = re.compile(
    r"^([A-Za-z]:(\\|/))?[A-Za-z0-9_-]+[A-Za-z0-9_.-]*((\\|/)+[A-Za-z0-9_-]+[A-Za-z0-9_.-]*)*$"
)
_POSIX_SEPARATORS = re.compile(r"/+")
_WINDOWS_SEPARATORS = re.compile(r"(\\|/)+")

_ASCII_SPACE = " \t\n\r\0\x0b"
_IDEOGRAPHIC_SPACE = "\u3000"
_NO_BREAK_SPACE = "\u00a0"


def clean_int(source: str) -> int:
    """Returns the first signed integer literal in `source`, or 0."""
    match = _INT_PATTERN.search(source)
    return int(match.group(0)) if match else 0


def clean_uint(source: str) -> int:
    """Like `clean_int`, but always non-negative."""
    return abs(clean_int(source))


def clean_float(source: str) -> float:
    """Returns the first signed float (exponent allowed) in `source`, or 0.0."""
    match = _FLOAT_PATTERN.search(source)
    return float(match.group(0)) if match else 0.0


def clean_bool(source: str) -> bool:
    """Empty text and "0" are false, everything else is true."""
    return source not in ("", "0")


def clean_word(source: str) -> str:
    return _NOT_WORD.sub("", source)


def clean_alnum(source: str) -> str:
    return _NOT_ALNUM.sub("", source)


def clean_cmd(source: str) -> str:
    """Keeps letters, digits, `_`, `.` and `-`, minus any leading periods."""
    return _NOT_CMD.sub("", source).lstrip(".")


def clean_base64(source: str) -> str:
    return _NOT_BASE64.sub("", source)


def clean_path(source: str) -> str:
    """Validates a file path against a POSIX or a Windows grammar.

    POSIX paths have repeated `/` collapsed. Windows paths have every run of
    separators replaced by a single backslash. Anything else yields "".
    """
    if _POSIX_PATH.match(source):
        return _POSIX_SEPARATORS.sub("/", source)

    if _WINDOWS_PATH.match(source):
        return _WINDOWS_SEPARATORS.sub("\\\\", source)

    return ""


def clean_trim(source: str) -> str:
    """Trims ASCII whitespace, then ideographic spaces, then no-break spaces."""
    result = source.strip(_ASCII_SPACE)
    result = result.strip(_IDEOGRAPHIC_SPACE)
    return result.strip(_NO_BREAK_SPACE)


def clean_username(source: str) -> str:
    """Removes control characters and `<>"'%&`."""
    return _USERNAME_JUNK.sub("", source)
