"""
Per-entity controller.

One generic controller parameterized by entity kind drives the modal for
that kind:

    Closed -> Open(entity) -> Executing -> Displayed -> [Explaining -> Displayed]

Every failure is rendered as text in the modal; nothing escapes to the
caller except precondition violations (ValueError).

Executions are not serialized. If a second action is fired (after a fresh
show()) before the first settles, whichever settles last owns the content.
A result that settles after hide() is dropped, even if the modal was
reopened since.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Union

from irconsole.modules.accounts import AccountContextResolver, AccountDirectory, AccountOption
from irconsole.modules.catalog import ActionMode, EntityKind, get_catalog
from irconsole.modules.errors import (
    ConfigurationError,
    ExecutionError,
    StreamTransportError,
    UnknownAction,
)
from irconsole.modules.explain import ExplanationSession, StreamingExplanationClient
from irconsole.modules.explain.client import Sink
from irconsole.modules.gateway import ExecutionGateway, ExecutionResult

logger = logging.getLogger("irconsole.controller")

NO_OUTPUT = "✓ Command completed with no output"
AI_HINT = "Hint: configure an AI provider in settings, or check that the AI service is reachable."


class ModalState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    EXECUTING = "executing"
    DISPLAYED = "displayed"
    EXPLAINING = "explaining"


class Clipboard(Protocol):
    def write_text(self, text: str) -> None:
        ...


@dataclass
class AppContext:
    """Collaborators shared by every controller, injected at construction."""

    gateway: ExecutionGateway
    explanation_client: StreamingExplanationClient
    accounts: Optional[AccountDirectory] = None
    clipboard: Optional[Clipboard] = None

    def __post_init__(self):
        if self.accounts is None:
            self.accounts = AccountDirectory(self.gateway)


@dataclass
class ExecutionContext:
    entity: Any
    title: str = ""
    selected_account: Optional[str] = None


@dataclass
class ExplanationPanel:
    visible: bool = False
    text: str = ""
    error: Optional[str] = None
    session: Optional[ExplanationSession] = field(default=None, repr=False)

    @property
    def streaming(self) -> bool:
        return self.session is not None and self.session.streaming


class EntityController:
    """Modal state machine for one entity kind."""

    def __init__(self, kind: Union[EntityKind, str], context: AppContext):
        self.kind = EntityKind(kind)
        self.catalog = get_catalog(self.kind)
        self.context = context
        self.resolver = AccountContextResolver()

        self.state = ModalState.CLOSED
        self.menu_visible = False
        self.execution: Optional[ExecutionContext] = None
        self.title = ""
        self.content = ""
        self.result: Optional[ExecutionResult] = None
        self.explanation = ExplanationPanel()
        self.account_options: List[AccountOption] = []
        self._cancel_event: Optional[asyncio.Event] = None
        self._hide_count = 0

    # ------------------------------------------------------------------
    # Menu
    # ------------------------------------------------------------------

    async def show(self, entity) -> None:
        """Open the menu for a new entity snapshot (any state -> Open)."""
        if getattr(entity, "kind", None) != self.kind.value:
            raise ValueError(f"Expected a {self.kind.value} entity, got {getattr(entity, 'kind', None)}")

        self._cancel_explanation()
        self.resolver.reset()
        self.execution = ExecutionContext(entity=entity)
        self.title = ""
        self.content = ""
        self.result = None
        self.explanation = ExplanationPanel()
        self.menu_visible = True
        self.state = ModalState.OPEN
        logger.debug(f"Opened {self.kind.value} menu for {entity!r}")

        self.account_options = await self.context.accounts.load()

    def select_account(self, username: Optional[str]) -> None:
        self.resolver.select(username)
        if self.execution is not None:
            self.execution.selected_account = self.resolver.selected

    async def select_action(self, key: str) -> Optional[ExecutionResult]:
        """
        Run an action on the open entity (Open -> Executing -> Displayed).

        The menu is hidden before the first await, so a repeated click while
        the call is in flight is ignored and only one gateway call is made.

        Returns:
            The displayed result, or None if the click was ignored or the
            action key is unknown
        """
        if not self.menu_visible or self.execution is None:
            logger.debug(f"Ignoring action '{key}' on {self.kind.value}: menu is not open")
            return None
        self.menu_visible = False

        descriptor = self.catalog.lookup(key)
        if isinstance(descriptor, UnknownAction):
            self._display("Error", f"❌ {descriptor.message}", None)
            return None

        entity = self.execution.entity
        title = descriptor.title(entity)
        self.execution.title = title
        text = descriptor.build(entity)

        if descriptor.mode is ActionMode.LOCAL:
            result = ExecutionResult(command="", output=text)
            self._display(title, text, result)
            return result

        if descriptor.mode is ActionMode.CLIPBOARD:
            output = self._copy(text)
            result = ExecutionResult(command="", output=output)
            self._display(title, output, result)
            return result

        hide_count = self._hide_count
        account = self.resolver.resolve()
        self.execution.selected_account = account
        self._display(title, _progress_message(descriptor.label, account, text), None, state=ModalState.EXECUTING)

        try:
            if account:
                outcome = await self.context.gateway.execute(text, account=account)
            else:
                outcome = await self.context.gateway.execute(text)
            output = outcome.output if outcome.output.strip() else NO_OUTPUT
            result = ExecutionResult(command=text, output=output, exit_code=outcome.exit_code)
        except ExecutionError as e:
            logger.error(f"{self.kind.value}/{key} failed: {e}")
            result = ExecutionResult(command=text, output=f"❌ Execution failed: {e}")

        if self._hide_count != hide_count:
            logger.debug(f"Discarding {self.kind.value}/{key} result: modal was closed")
            return result

        self._display(title, result.output, result)
        return result

    # ------------------------------------------------------------------
    # Explanation
    # ------------------------------------------------------------------

    @property
    def can_explain(self) -> bool:
        return self.result is not None and self.state in (ModalState.DISPLAYED, ModalState.EXPLAINING)

    async def explain(self, sink: Optional[Sink] = None) -> Optional[ExplanationSession]:
        """
        Stream an explanation of the displayed result into the panel.

        A running explanation is superseded, not merged. Configuration and
        transport failures are rendered in the panel; partial text is kept.

        Raises:
            ValueError: If there is no displayed result to explain
        """
        if not self.can_explain:
            raise ValueError("Nothing to explain: run an action first")

        self._cancel_explanation()
        cancel_event = asyncio.Event()
        self._cancel_event = cancel_event
        panel = ExplanationPanel(visible=True)
        self.explanation = panel
        self.state = ModalState.EXPLAINING

        result = self.result
        try:
            session = self.context.explanation_client.start_session(self.title, result.command, result.output)
        except ConfigurationError as e:
            logger.warning(f"Explanation not started: {e}")
            panel.error = str(e)
            panel.text = f"❌ AI explanation failed: {e}\n\n{AI_HINT}"
            self._finish_explanation(cancel_event)
            return None

        panel.session = session

        async def forward(fragment: str) -> None:
            if cancel_event.is_set():
                return
            panel.text += fragment
            if sink is not None:
                delivered = sink(fragment)
                if inspect.isawaitable(delivered):
                    await delivered

        try:
            await self.context.explanation_client.stream(session, sink=forward, cancel_event=cancel_event)
        except StreamTransportError as e:
            if not cancel_event.is_set():
                panel.error = str(e)
                panel.text += f"\n\n❌ AI explanation failed: {e}"
        finally:
            self._finish_explanation(cancel_event)
        return session

    def _finish_explanation(self, cancel_event: asyncio.Event) -> None:
        if self._cancel_event is cancel_event:
            self._cancel_event = None
            if self.state is ModalState.EXPLAINING:
                self.state = ModalState.DISPLAYED

    def _cancel_explanation(self) -> None:
        if self._cancel_event is not None:
            self._cancel_event.set()
            self._cancel_event = None

    # ------------------------------------------------------------------
    # Closing and views
    # ------------------------------------------------------------------

    def hide(self) -> None:
        """Close the modal (any state -> Closed) and stop any explanation."""
        self._cancel_explanation()
        self.state = ModalState.CLOSED
        self._hide_count += 1
        self.menu_visible = False
        self.explanation = ExplanationPanel()

    def view(self) -> Dict[str, Any]:
        execution = self.execution
        return {
            "kind": self.kind.value,
            "state": self.state.value,
            "menu_visible": self.menu_visible,
            "entity": execution.entity.model_dump() if execution else None,
            "selected_account": self.resolver.selected,
            "accounts": [option.to_dict() for option in self.account_options],
            "title": self.title,
            "content": self.content,
            "result": self.result.to_dict() if self.result else None,
            "explanation": {
                "visible": self.explanation.visible,
                "text": self.explanation.text,
                "streaming": self.explanation.streaming,
                "error": self.explanation.error,
            },
        }

    def _copy(self, value: str) -> str:
        clipboard = self.context.clipboard
        if clipboard is None:
            return value
        try:
            clipboard.write_text(value)
        except Exception as e:  # noqa: BLE001 - clipboard backends raise anything
            logger.error(f"Clipboard write failed: {e}")
            return f"❌ Copy failed: {e}\n\n{value}"
        return f"✓ Copied to clipboard: {value}"

    def _display(
        self,
        title: str,
        content: str,
        result: Optional[ExecutionResult],
        state: ModalState = ModalState.DISPLAYED,
    ) -> None:
        """Replace modal content. Showing new content resets the explanation panel."""
        self._cancel_explanation()
        self.title = title
        self.content = content
        self.result = result
        self.explanation = ExplanationPanel()
        self.state = state


def _progress_message(label: str, account: Optional[str], command: str) -> str:
    user_info = f" (account: {account})" if account else ""
    suffix = "..." if len(command) > 100 else ""
    return f"⏳ Running: {label}{user_info}...\n\nCommand: {command[:100]}{suffix}"


def build_controllers(context: AppContext) -> Dict[EntityKind, EntityController]:
    """One controller per entity kind, all sharing the same context."""
    return {kind: EntityController(kind, context) for kind in EntityKind}
