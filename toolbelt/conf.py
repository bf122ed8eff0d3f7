"""Configuration for the toolbelt: current account, workspace and local paths."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_WORKSPACE = 'master'
DEFAULT_API_HOST = 'myvtex.com'

# Redirect import tunables
BATCH_SIZE = 100
MAX_RETRIES = 10
RETRY_DELAY_SECONDS = 10


class Config:
    """
    Local toolbelt configuration.

    Values are read from ``config.json`` inside the config directory and can
    be overridden through environment variables (TOOLBELT_ACCOUNT,
    TOOLBELT_WORKSPACE, TOOLBELT_TOKEN, TOOLBELT_API_HOST).
    """

    FILENAME = 'config.json'

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_dir: Directory holding config.json, checkpoints and logs
                (default: $TOOLBELT_CONFIG_DIR or ~/.toolbelt)
        """
        if config_dir is None:
            config_dir = os.getenv('TOOLBELT_CONFIG_DIR', str(Path.home() / '.toolbelt'))
        self.config_dir = config_dir
        self._data: Dict[str, Any] = self._load()

    @property
    def path(self) -> Path:
        return Path(self.config_dir) / self.FILENAME

    def _load(self) -> Dict[str, Any]:
        """Read config.json, falling back to an empty config."""
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read config file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def save(self):
        """Write the current values back to config.json."""
        Path(self.config_dir).mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(self._data, f, indent=2)
        logger.debug(f"Config saved to {self.path}")

    def get_account(self) -> Optional[str]:
        return os.getenv('TOOLBELT_ACCOUNT') or self._data.get('account')

    def get_workspace(self) -> str:
        return os.getenv('TOOLBELT_WORKSPACE') or self._data.get('workspace') or DEFAULT_WORKSPACE

    def get_token(self) -> Optional[str]:
        return os.getenv('TOOLBELT_TOKEN') or self._data.get('token')

    def get_login(self) -> Optional[str]:
        return self._data.get('login')

    def get_api_host(self) -> str:
        return os.getenv('TOOLBELT_API_HOST') or self._data.get('api_host') or DEFAULT_API_HOST

    def set_account(self, account: str):
        self._data['account'] = account

    def set_workspace(self, workspace: str):
        self._data['workspace'] = workspace

    def set_token(self, token: str):
        self._data['token'] = token

    @property
    def checkpoint_db(self) -> str:
        """Path of the checkpoint database used for resumable imports."""
        return os.getenv('TOOLBELT_CHECKPOINT_DB', str(Path(self.config_dir) / 'checkpoints.db'))

    @property
    def log_dir(self) -> str:
        return str(Path(self.config_dir) / 'logs')
