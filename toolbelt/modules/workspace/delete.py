"""`workspace delete`: delete one or more workspaces."""

import logging
from typing import Callable, List, Optional

from ...clients import WorkspacesClient
from ...conf import DEFAULT_WORKSPACE, Config
from ...errors import ApiError
from ..prompts import prompt_confirm
from .use import use_workspace

logger = logging.getLogger(__name__)


def delete_workspaces(client: WorkspacesClient, account: str, names: List[str]) -> List[str]:
    """
    Delete workspaces one by one.

    A failed deletion is logged and does not stop the others.

    Returns:
        Names that were deleted
    """
    deleted = []
    for name in names:
        logger.debug(f"Starting to delete workspace {name}")
        try:
            client.delete(account, name)
        except ApiError as e:
            logger.warning(f"Workspace {name} was not deleted")
            logger.error(str(e))
            continue

        logger.info(f"Workspace {name} deleted successfully")
        deleted.append(name)

    return deleted


def delete(
    names: List[str],
    config: Config,
    yes: bool = False,
    force: bool = False,
    client: Optional[WorkspacesClient] = None,
    confirm: Callable[[str, bool], bool] = prompt_confirm
) -> List[str]:
    """
    Delete workspaces after confirmation.

    Args:
        names: Workspaces to delete
        config: Toolbelt configuration
        yes: Skip the confirmation prompt
        force: Allow deleting the workspace currently in use
        client: Workspaces client (built from config if not given)
        confirm: Prompt function (message, default) -> bool

    Returns:
        Names that were deleted
    """
    workspace = config.get_workspace()
    plural = 's' if len(names) > 1 else ''
    logger.debug(f"Deleting workspace{plural}: {', '.join(names)}")

    if not force and workspace in names:
        logger.error(
            f"You are currently using the workspace {workspace}, "
            f"please change your workspace before deleting"
        )
        return []

    if not yes and not confirm(
        f"Are you sure you want to delete workspace{plural} {', '.join(names)}?", True
    ):
        return []

    client = client or WorkspacesClient(config)
    deleted = delete_workspaces(client, config.get_account(), names)

    if workspace in deleted:
        logger.warning("The workspace you were using was deleted")
        use_workspace(DEFAULT_WORKSPACE, config)

    return deleted
