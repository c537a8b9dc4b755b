"""Global service registry and initialization manager.

This module holds the application's shared `InputFilter`. It reads the
global `policy` to decide whether the filter is instantiated; when the
policy disables it, the global instance remains `None`.
"""

import logging

from inputfilter.app.policy import policy
from inputfilter.engines.input_filter import InputFilter

logger = logging.getLogger("inputfilter.services")

# Populated by initialize_services() at startup.
filter_service = None


def initialize_services():
    """Bootstraps the filter engine from the active policy.

    The policy is reloaded first so that a restart picks up an edited file.
    """
    global filter_service

    logger.info("⚡ Initializing Global Services...")
    policy.reload()

    if policy.filter_enabled:
        filter_service = InputFilter(config=policy.sanitizer_config)
        logger.info("✅ InputFilter: Ready")
    else:
        filter_service = None
        logger.info("⚪ InputFilter: Disabled by Policy")
