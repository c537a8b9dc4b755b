"""Typed input filtering and HTML sanitization."""

from inputfilter.engines.attributes import check_attribute
from inputfilter.engines.input_filter import InputFilter
from inputfilter.engines.sanitizer_config import FilterMode, SanitizerConfig
from inputfilter.engines.sanitizer_engine import SanitizerEngine

__all__ = [
    "InputFilter",
    "FilterMode",
    "SanitizerConfig",
    "SanitizerEngine",
    "check_attribute",
]
