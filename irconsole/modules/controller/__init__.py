"""
Controller Module - Black Box Interface

Purpose: Drive the action menu, result modal and explanation panel per entity kind
Interface: EntityController.show(), select_account(), select_action(), explain(), hide(), view()
Hidden: State transitions, progress and error rendering, cancellation

Collaborators arrive through AppContext; there is no module-level state.
"""

from .controller import (
    AppContext,
    Clipboard,
    EntityController,
    ExecutionContext,
    ModalState,
    build_controllers,
)

__all__ = [
    "AppContext",
    "Clipboard",
    "EntityController",
    "ExecutionContext",
    "ModalState",
    "build_controllers",
]
