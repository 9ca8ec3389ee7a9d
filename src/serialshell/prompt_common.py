# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""prompt_toolkit components for the interactive shell.

This module provides syntax highlighting, tab completion, styling, and
the InteractiveSession class used by the command-line interface.
"""

import logging
import re
from typing import TYPE_CHECKING, AsyncIterator, Callable, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.history import History, InMemoryHistory
from prompt_toolkit.lexers import Lexer
from prompt_toolkit.styles import Style

from .const import PROMPT

if TYPE_CHECKING:
    from .commands import CommandRegistry

logger = logging.getLogger(__name__)

# Answers accepted by the exit confirmation
CONFIRM_EXIT_PATTERN = re.compile(r"^y(es)?$", re.IGNORECASE)

SHELL_STYLE = Style.from_dict(
    {
        "command": "#00aa00 bold",  # Green for primary names
        "alias": "#00aa00",  # Green (not bold) for aliases
        # Prompt - port open (white) vs closed (gray)
        "prompt.connected": "#ffffff bold",
        "prompt.disconnected": "#888888",
    }
)


class ShellLexer(Lexer):
    """Syntax highlighter for shell commands."""

    def __init__(self, registry: "CommandRegistry"):
        self._registry = registry

    def lex_document(self, document):
        """Return a lexer function for the document."""
        primary = set(self._registry.list_names(primary_only=True))
        aliases = set(self._registry.list_names()) - primary

        def get_line_tokens(line_number):
            line = document.lines[line_number]
            cmd, sep, rest = line.partition(" ")
            if cmd in primary:
                tokens = [("class:command", cmd)]
            elif cmd in aliases:
                tokens = [("class:alias", cmd)]
            else:
                tokens = [("", cmd)]
            if sep:
                tokens.append(("", sep + rest))
            return tokens

        return get_line_tokens


class ShellCompleter(Completer):
    """Tab completion for command names.

    Completes the first word from every name and alias, and the argument
    of help from the same set.
    """

    def __init__(self, registry: "CommandRegistry"):
        self._registry = registry

    def _get_commands(self) -> list[tuple[str, str]]:
        """Get all command names and aliases with descriptions."""
        commands = []
        for descriptor in self._registry:
            commands.append((descriptor.name, descriptor.description))
            for alias in descriptor.aliases[1:]:
                commands.append((alias, f"Alias for {descriptor.name}"))
        return sorted(commands, key=lambda x: x[0])

    def get_completions(self, document, complete_event):
        """Generate completions for the current input."""
        text = document.text_before_cursor
        words = text.split(" ")
        word_before = words[-1]
        completed_words = words[:-1]

        if completed_words:
            # Only help takes a command name as its argument
            help_cmd = self._registry.resolve(completed_words[0])
            if (
                len(completed_words) != 1
                or help_cmd is None
                or help_cmd.name != "help"
            ):
                return

        for cmd, desc in self._get_commands():
            if cmd.startswith(word_before):
                yield Completion(
                    cmd,
                    start_position=-len(word_before),
                    display_meta=desc,
                )


class InteractiveSession:
    """Manages an interactive prompt session.

    Usage:
        session = InteractiveSession(registry, is_connected=lambda: context.ready)

        async for line in session.input_loop():
            response = await registry.dispatch(line, context)
    """

    def __init__(
        self,
        registry: "CommandRegistry",
        is_connected: Optional[Callable[[], bool]] = None,
        prompt_text: str = PROMPT,
        history: Optional[History] = None,
    ):
        """Initialize the interactive session.

        Args:
            registry: Registry used for completion and highlighting
            is_connected: Optional callback returning True while the port
                          is open; the prompt color follows it
            prompt_text: Prompt string
            history: prompt_toolkit history, in-memory when omitted
        """
        self._prompt_text = prompt_text
        self._is_connected = is_connected
        self._session = PromptSession(
            history=history if history is not None else InMemoryHistory(),
            completer=ShellCompleter(registry),
            complete_while_typing=False,
            lexer=ShellLexer(registry),
            style=SHELL_STYLE,
            auto_suggest=AutoSuggestFromHistory(),
            enable_history_search=True,
        )

    def get_prompt(self) -> FormattedText:
        """Prompt text, styled by connection status."""
        if self._is_connected is not None and self._is_connected():
            return FormattedText([("class:prompt.connected", self._prompt_text)])
        return FormattedText([("class:prompt.disconnected", self._prompt_text)])

    async def confirm_exit(self) -> bool:
        """Ask the operator to confirm leaving the shell."""
        try:
            answer = await PromptSession().prompt_async("Confirm exit: ")
        except (EOFError, KeyboardInterrupt):
            return True
        return bool(CONFIRM_EXIT_PATTERN.match(answer.strip()))

    async def prompt_async(self) -> Optional[str]:
        """Get input from the user asynchronously.

        Returns:
            The input line stripped, "" to keep going, or None to exit.
        """
        try:
            line = await self._session.prompt_async(self.get_prompt)
        except EOFError:
            return None
        except KeyboardInterrupt:
            return None if await self.confirm_exit() else ""
        return line.strip() if line else ""

    async def input_loop(self) -> AsyncIterator[str]:
        """Yield non-empty input lines until EOF or a confirmed exit."""
        while True:
            line = await self.prompt_async()
            if line is None:
                break
            if not line:
                continue
            yield line
