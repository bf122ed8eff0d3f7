"""Local project files to synchronize with a remote app."""

import base64
import logging
import os
from pathlib import Path
from typing import Dict, List

logger = logging.getLogger(__name__)

MANIFEST_FILE = 'manifest.json'

BUILDER_FOLDERS = {
    'admin', 'assets', 'docs', 'dotnet', 'graphql', 'messages', 'node',
    'pixel', 'react', 'render', 'store', 'styles',
}

IGNORED_NAMES = {'node_modules', '__pycache__'}


def _is_ignored(name: str) -> bool:
    return name.startswith('.') or name in IGNORED_NAMES


def list_local_files(root: str) -> List[str]:
    """
    List the files of a project that get synchronized.

    Only the manifest and files inside builder folders are kept; dot-files,
    node_modules and anything else at the top level are ignored.

    Args:
        root: Project directory

    Returns:
        POSIX paths relative to root, manifest first, the rest sorted
    """
    root_path = Path(root)
    files = []

    for folder in sorted(BUILDER_FOLDERS):
        folder_path = root_path / folder
        if not folder_path.is_dir():
            continue
        for dirpath, dirnames, filenames in os.walk(folder_path):
            dirnames[:] = [d for d in dirnames if not _is_ignored(d)]
            for filename in filenames:
                if _is_ignored(filename):
                    continue
                files.append(Path(dirpath, filename).relative_to(root_path).as_posix())

    files.sort()
    if (root_path / MANIFEST_FILE).is_file():
        files.insert(0, MANIFEST_FILE)

    logger.debug(f"Found {len(files)} files to sync in {root}")
    return files


def create_changes(root: str, batch: Dict[str, str]) -> List[Dict[str, str]]:
    """
    Turn a {path: action} batch into the changes sent to the platform.

    Args:
        root: Project directory the relative paths are resolved against
        batch: Mapping of path to 'save' or 'remove'

    Returns:
        One change per path; saves carry the base64 file content
    """
    changes = []
    for path, action in batch.items():
        if action == 'save':
            content = (Path(root) / path).read_bytes()
            changes.append({
                'path': path,
                'action': 'save',
                'content': base64.b64encode(content).decode('ascii'),
                'encoding': 'base64',
            })
        elif action == 'remove':
            changes.append({'path': path, 'action': 'remove'})
        else:
            raise ValueError(f"Unknown action {action!r} for {path}")
    return changes
