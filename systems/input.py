from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Set, Union


ActionType = Union["InputAction", str]


class InputAction(str, Enum):
    """
    Logical input actions the game can respond to.

    These are intentionally decoupled from any specific key so we can
    remap them later; engine.controllers.input holds the default bindings.
    """

    # Player intents (one per turn)
    MOVE = "move"            # also attacks whatever fights on the target tile
    WAIT = "wait"
    PICK_UP = "pick_up"
    USE_ITEM = "use_item"
    DROP_ITEM = "drop_item"
    DESCEND = "descend"

    # Menus / prompts
    OPEN_INVENTORY = "open_inventory"
    OPEN_DROP_MENU = "open_drop_menu"
    SHOW_CHARACTER = "show_character"
    MENU_SELECT = "menu_select"
    CONFIRM = "confirm"
    CANCEL = "cancel"

    # Meta
    SAVE = "save"
    EXIT = "exit"


@dataclass(frozen=True)
class Intent:
    """A classified input event: the action plus its direction / menu index."""
    action: InputAction
    dx: int = 0
    dy: int = 0
    index: int = -1

    @classmethod
    def move(cls, dx: int, dy: int) -> "Intent":
        return cls(InputAction.MOVE, dx=dx, dy=dy)

    @classmethod
    def use(cls, index: int) -> "Intent":
        return cls(InputAction.USE_ITEM, index=index)

    @classmethod
    def drop(cls, index: int) -> "Intent":
        return cls(InputAction.DROP_ITEM, index=index)

    @classmethod
    def select(cls, index: int) -> "Intent":
        return cls(InputAction.MENU_SELECT, index=index)


class InputManager:
    """
    Keeps the key -> action bindings in one place.

    - Maintain bindings: logical InputAction -> one or more pygame keycodes.
    - Answer which action (if any) a KEYDOWN event stands for.
    """

    def __init__(self) -> None:
        # Map from action -> set of pygame key constants
        self._bindings: Dict[InputAction, Set[int]] = {}

    def _normalise_action(self, action: ActionType) -> InputAction:
        """Accept either an InputAction or a matching string value."""
        if isinstance(action, InputAction):
            return action
        # Will raise ValueError if an unknown string is passed
        return InputAction(action)

    def bind_key(self, action: ActionType, key: int) -> None:
        """Bind a pygame key constant to the given logical action."""
        act = self._normalise_action(action)
        self._bindings.setdefault(act, set()).add(int(key))

    def action_for_key(self, key: int) -> Optional[InputAction]:
        for action, keys in self._bindings.items():
            if int(key) in keys:
                return action
        return None

