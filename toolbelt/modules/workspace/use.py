"""`workspace use`: switch the current workspace."""

import logging

from ...conf import Config

logger = logging.getLogger(__name__)


def use_workspace(name: str, config: Config):
    """Make name the current workspace and persist it."""
    config.set_workspace(name)
    config.save()
    logger.info(f"You're now using the workspace {name} on account {config.get_account()}!")
