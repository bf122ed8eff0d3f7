"""
Correlation context for tying log entries to a single command invocation.
"""

import uuid
from typing import Optional
import structlog


class CorrelationContext:
    """
    Context manager binding a run ID and the remote context to structured logs.

    Usage:
        with CorrelationContext(command="redirects import", account="store", workspace="dev"):
            logger.info("importing")  # Will include run_id, account and workspace
    """

    def __init__(
        self,
        run_id: Optional[str] = None,
        command: Optional[str] = None,
        account: Optional[str] = None,
        workspace: Optional[str] = None,
        **extra_context
    ):
        """
        Initialize correlation context.

        Args:
            run_id: Unique run identifier (auto-generated if not provided)
            command: Name of the command being run
            account: Current account
            workspace: Current workspace
            **extra_context: Additional context to bind
        """
        self.run_id = run_id or self._generate_run_id()
        self.command = command
        self.account = account
        self.workspace = workspace
        self.extra_context = extra_context

    def _generate_run_id(self) -> str:
        return f"run_{uuid.uuid4().hex[:12]}"

    def __enter__(self):
        context = {'run_id': self.run_id}
        for key in ('command', 'account', 'workspace'):
            value = getattr(self, key)
            if value:
                context[key] = value
        context.update(self.extra_context)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(**context)

        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        structlog.contextvars.clear_contextvars()
        return False
