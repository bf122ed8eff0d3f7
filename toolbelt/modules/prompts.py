"""Interactive prompts."""

from typing import Callable


def prompt_confirm(message: str, default: bool = True, input_func: Callable[[str], str] = input) -> bool:
    """
    Ask a yes/no question.

    An empty answer returns the default; anything else is re-asked until it
    is a recognizable yes or no.
    """
    suffix = '(Y/n)' if default else '(y/N)'
    while True:
        answer = input_func(f"{message} {suffix} ").strip().lower()
        if not answer:
            return default
        if answer in ('y', 'yes'):
            return True
        if answer in ('n', 'no'):
            return False
