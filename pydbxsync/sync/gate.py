"""Confirmation gates deciding whether a transfer may proceed."""

from typing import Optional, Protocol

import click


class ConfirmationGate(Protocol):
    """Yes/no decision point in front of every transfer."""

    def ask(self, prompt_text: str, default: bool) -> bool:
        """Return True if the transfer described by ``prompt_text`` may run."""
        ...


class InteractiveGate:
    """Asks on the terminal and blocks until the user answers."""

    def ask(self, prompt_text: str, default: bool) -> bool:
        return click.confirm(prompt_text, default=default)


class BatchGate:
    """Answers without user interaction.

    Returns the configured answer, or the prompt's default when none was
    configured.
    """

    def __init__(self, answer: Optional[bool] = None) -> None:
        self.answer = answer
        self.prompts: list[str] = []

    def ask(self, prompt_text: str, default: bool) -> bool:
        self.prompts.append(prompt_text)
        if self.answer is None:
            return default
        return self.answer
