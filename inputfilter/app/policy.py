"""Filtering Policy Loader.

This module loads the tag/attribute policy for the InputFilter service from
an external YAML file (`inputfilter.yaml`). Missing or broken policy files
never stop the service: it falls back to the secure defaults (no tags, no
attributes, XSS auto-clean on).

Example policy:
    services:
      filter: true
    sanitization:
      allowed_tags: [b, i, a, img]
      allowed_attributes: [href, src, title]
      tag_mode: allow_only_listed
      attribute_mode: allow_only_listed
      xss_auto_clean: true

Typical Usage:
    from inputfilter.app.policy import policy
    if policy.filter_enabled:
        ...
"""

import logging
import os
from typing import List

import yaml
from pydantic import ValidationError

from inputfilter.app.config import settings
from inputfilter.engines.sanitizer_config import FilterMode, SanitizerConfig

logger = logging.getLogger("inputfilter.policy")


def parse_mode(value) -> FilterMode:
    """Accepts a `FilterMode`, its name (any case) or its integer value.

    Raises:
        ValueError: If `value` names no mode.
    """
    if isinstance(value, FilterMode):
        return value
    if isinstance(value, str):
        try:
            return FilterMode[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown filter mode: {value!r}")
    return FilterMode(value)


class FilterPolicy:
    """A wrapper around the YAML policy file enforcing default behaviors."""

    def __init__(self, config_path: str = None):
        """Initializes the policy.

        Args:
            config_path (str, optional): Path to the policy file. Defaults to
                `settings.POLICY_PATH`.
        """
        self.config_path = config_path or settings.POLICY_PATH
        self._config = {}
        self.reload()

    def reload(self):
        """Loads or reloads the policy from disk.

        If the file is missing or invalid, the defaults from
        `_default_config()` are used and a warning is logged.
        """
        if not os.path.exists(self.config_path):
            logger.warning(f"⚠️ Policy file not found at {self.config_path}. Using Defaults.")
            self._config = self._default_config()
            return

        try:
            with open(self.config_path, "r") as f:
                loaded = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.critical(f"❌ Failed to load filtering policy: {e}")
            self._config = self._default_config()
            return

        if not isinstance(loaded, dict):
            logger.critical(f"❌ Filtering policy at {self.config_path} is not a mapping")
            self._config = self._default_config()
            return

        defaults = self._default_config()
        for section in ("services", "sanitization"):
            if section in loaded and not isinstance(loaded[section], dict):
                logger.critical(
                    f"❌ Policy section '{section}' is not a mapping. Using Defaults for it."
                )
                loaded[section] = defaults[section]

        self._config = loaded
        logger.info(f"✅ Filtering Policy loaded from {self.config_path}")

    def _default_config(self):
        """Returns the hardcoded 'Safe Mode' policy."""
        return {
            "services": {
                "filter": True,
            },
            "sanitization": {
                "allowed_tags": [],
                "allowed_attributes": [],
                "tag_mode": "allow_only_listed",
                "attribute_mode": "allow_only_listed",
                "xss_auto_clean": True,
            },
        }

    def _sanitization(self) -> dict:
        return self._config.get("sanitization") or {}

    # --- Service Toggles ---
    @property
    def filter_enabled(self) -> bool:
        """Feature flag: Enable/Disable the filtering service."""
        return (self._config.get("services") or {}).get("filter", True)

    # --- Sanitization ---
    @property
    def allowed_tags(self) -> List[str]:
        """Returns the tag list the tag mode applies to."""
        return self._sanitization().get("allowed_tags") or []

    @property
    def allowed_attributes(self) -> List[str]:
        """Returns the attribute list the attribute mode applies to."""
        return self._sanitization().get("allowed_attributes") or []

    @property
    def tag_mode(self) -> FilterMode:
        return parse_mode(self._sanitization().get("tag_mode", FilterMode.ALLOW_ONLY_LISTED))

    @property
    def attribute_mode(self) -> FilterMode:
        return parse_mode(self._sanitization().get("attribute_mode", FilterMode.ALLOW_ONLY_LISTED))

    @property
    def xss_auto_clean(self) -> bool:
        return bool(self._sanitization().get("xss_auto_clean", True))

    @property
    def sanitizer_config(self) -> SanitizerConfig:
        """Builds the engine configuration described by this policy.

        An invalid policy (unknown mode, malformed lists) is logged and
        replaced by the default configuration.
        """
        try:
            return SanitizerConfig(
                tag_allow_list=self.allowed_tags,
                attribute_allow_list=self.allowed_attributes,
                tag_mode=self.tag_mode,
                attribute_mode=self.attribute_mode,
                xss_auto_clean=self.xss_auto_clean,
            )
        except (ValueError, ValidationError) as e:
            logger.critical(f"❌ Invalid sanitization policy, using defaults: {e}")
            return SanitizerConfig()


policy = FilterPolicy()
