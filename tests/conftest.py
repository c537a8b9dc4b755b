from __future__ import annotations

import os
from collections.abc import Callable, Generator

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("INPUTFILTER_POLICY_PATH", "tests/does-not-exist.yaml")

from inputfilter.app.main import app  # noqa: E402
from inputfilter.engines.input_filter import InputFilter  # noqa: E402
from inputfilter.engines.sanitizer_config import FilterMode  # noqa: E402


@pytest.fixture()
def default_filter() -> InputFilter:
    """Empty allow-lists, allow-only modes, XSS auto-clean on."""
    return InputFilter()


@pytest.fixture()
def make_filter() -> Callable[..., InputFilter]:
    def _make(
        tags=(),
        attributes=(),
        tag_mode: FilterMode = FilterMode.ALLOW_ONLY_LISTED,
        attribute_mode: FilterMode = FilterMode.ALLOW_ONLY_LISTED,
        xss_auto_clean: bool = True,
    ) -> InputFilter:
        return InputFilter(tags, attributes, tag_mode, attribute_mode, xss_auto_clean)

    return _make


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client
