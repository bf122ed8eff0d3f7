"""Command-line entry point."""

import argparse
import sys
from typing import List, Optional

import structlog

from . import __version__
from .batch import CancellationToken
from .conf import Config
from .errors import ImportCancelled, ToolbeltError
from .files import list_local_files
from .logging import CorrelationContext, LoggerConfig
from .modules.rewriter.import_redirects import import_redirects
from .modules.workspace.delete import delete as delete_workspaces
from .modules.workspace.use import use_workspace

logger = structlog.get_logger(__name__)

EXIT_CANCELLED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='toolbelt', description='Command-line client for the storefront platform')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--verbose', action='store_true', help='Show debug output')
    parser.add_argument('--json-logs', action='store_true', help='Render log output as JSON')
    subparsers = parser.add_subparsers(dest='command', required=True)

    redirects = subparsers.add_parser('redirects', help='Manage URL redirects')
    redirects_sub = redirects.add_subparsers(dest='action', required=True)
    redirects_import = redirects_sub.add_parser('import', help='Import redirects from a CSV file')
    redirects_import.add_argument('csv_path', help='CSV with from, to, type and optional endDate columns')

    workspace = subparsers.add_parser('workspace', help='Manage workspaces')
    workspace_sub = workspace.add_subparsers(dest='action', required=True)
    workspace_delete = workspace_sub.add_parser('delete', help='Delete one or more workspaces')
    workspace_delete.add_argument('names', nargs='+', help='Workspaces to delete')
    workspace_delete.add_argument('-y', '--yes', action='store_true', help='Answer yes to confirmation prompts')
    workspace_delete.add_argument('-f', '--force', action='store_true',
                                  help='Delete even the workspace currently in use')
    workspace_use = workspace_sub.add_parser('use', help='Use a workspace')
    workspace_use.add_argument('name')

    files = subparsers.add_parser('files', help='Inspect local project files')
    files_sub = files.add_subparsers(dest='action', required=True)
    files_ls = files_sub.add_parser('ls', help='List files that would be synchronized')
    files_ls.add_argument('root', nargs='?', default='.')

    return parser


def run_command(args: argparse.Namespace, config: Config) -> int:
    if args.command == 'redirects' and args.action == 'import':
        import_redirects(args.csv_path, config, cancel_token=CancellationToken())
    elif args.command == 'workspace' and args.action == 'delete':
        delete_workspaces(args.names, config, yes=args.yes, force=args.force)
    elif args.command == 'workspace' and args.action == 'use':
        use_workspace(args.name, config)
    elif args.command == 'files' and args.action == 'ls':
        for path in list_local_files(args.root):
            print(path)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, run the command and return the exit code."""
    args = build_parser().parse_args(argv)
    config = Config()

    LoggerConfig(log_dir=config.log_dir).setup(
        level='DEBUG' if args.verbose else 'INFO',
        json_output=args.json_logs
    )

    command = ' '.join(filter(None, [args.command, getattr(args, 'action', None)]))
    with CorrelationContext(command=command, account=config.get_account(), workspace=config.get_workspace()):
        try:
            return run_command(args, config)
        except (ImportCancelled, KeyboardInterrupt) as e:
            logger.debug("command_cancelled", reason=str(e) or "interrupted")
            print('\nAborted.', file=sys.stderr)
            return EXIT_CANCELLED
        except ToolbeltError as e:
            logger.error(str(e))
            return 1


if __name__ == '__main__':
    sys.exit(main())
