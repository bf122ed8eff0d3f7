"""
Logging configuration with structured logging using structlog.

Library modules log through stdlib ``logging``; structlog's ProcessorFormatter
renders those records too, so correlation context bound with
CorrelationContext shows up on every line.
"""

import os
import logging
import logging.handlers
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
import structlog

# Keys the console hides; they stay in the log file
CONSOLE_HIDDEN_KEYS = ('timestamp', 'logger', 'run_id', 'command', 'account', 'workspace')


def render_console(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> str:
    """
    Render an event for a person at a terminal.

    Info lines are the bare message; other levels get a "level:" prefix.
    Remaining fields are appended as key=value.
    """
    level = event_dict.pop('level', method_name)
    event = str(event_dict.pop('event', ''))
    for key in CONSOLE_HIDDEN_KEYS:
        event_dict.pop(key, None)

    extras = ' '.join(f"{key}={value}" for key, value in sorted(event_dict.items()))
    text = f"{event} {extras}".strip()
    if level == 'info':
        return text
    return f"{level}: {text}"


class LoggerConfig:
    """
    Centralized logging configuration for the toolbelt.

    Features:
    - Short console output on stderr, JSON on request
    - Rotating debug-level log file in the toolbelt config directory
    - Correlation IDs on structlog and stdlib log lines alike
    """

    def __init__(self, log_dir: str = "logs"):
        """
        Initialize logger configuration.

        Args:
            log_dir: Directory for log files
        """
        self.log_dir = log_dir
        self._configured = False

    def _shared_processors(self, processors: Optional[List[Callable]]) -> List[Callable]:
        """Processors applied to both structlog events and stdlib records."""
        chain = list(processors or [])
        chain.extend([
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
        ])
        return chain

    def _formatter(self, renderer: Callable, shared: List[Callable]) -> logging.Formatter:
        return structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                renderer,
            ],
        )

    def setup(
        self,
        level: str = "INFO",
        json_output: bool = False,
        console_output: bool = True,
        file_output: bool = True,
        max_bytes: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5,
        processors: Optional[List[Callable]] = None
    ) -> Any:
        """
        Set up structured logging with structlog.

        Args:
            level: Console log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            json_output: Render console and file output as JSON
            console_output: Whether to output to stderr
            file_output: Whether to output to toolbelt.log (always DEBUG)
            max_bytes: Maximum size of log file before rotation
            backup_count: Number of backup files to keep
            processors: Additional custom processors, run first

        Returns:
            Configured structlog logger
        """
        numeric_level = getattr(logging, level.upper())
        shared = self._shared_processors(processors)

        structlog.configure(
            processors=shared + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        root_logger = logging.getLogger()
        root_logger.handlers = []
        root_logger.setLevel(numeric_level)

        if console_output:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(numeric_level)
            renderer = structlog.processors.JSONRenderer() if json_output else render_console
            console_handler.setFormatter(self._formatter(renderer, shared))
            root_logger.addHandler(console_handler)

        if file_output:
            Path(self.log_dir).mkdir(parents=True, exist_ok=True)
            log_file = os.path.join(self.log_dir, "toolbelt.log")
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count
            )
            file_handler.setLevel(logging.DEBUG)
            if json_output:
                renderer = structlog.processors.JSONRenderer()
            else:
                renderer = structlog.processors.KeyValueRenderer(
                    key_order=['timestamp', 'level', 'logger', 'event'],
                    drop_missing=True,
                )
            file_handler.setFormatter(self._formatter(renderer, shared))
            root_logger.addHandler(file_handler)
            root_logger.setLevel(logging.DEBUG)

        self._configured = True

        return structlog.get_logger()

    def reset(self):
        """Reset logging configuration."""
        structlog.reset_defaults()

        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            handler.close()
            root_logger.removeHandler(handler)

        self._configured = False
