"""Dialog contract and step engine."""

import inspect
from typing import Any, Protocol

from ..bot import IBot
from ..models import Update
from .keys import format_key
from .registry import register

# A step is either the name of a method or a declarative response step:
# {"name": "...", "response": "...", "options": {...}, "jump": "...", "end": True}
Step = str | dict[str, Any]


class IDialog(Protocol):
    """What DialogManager needs from a dialog."""

    def get_dialog_key(self) -> str:
        """Session key this dialog is stored under."""
        ...

    def set_bot(self, bot: IBot | None) -> None:
        """Inject the bot client (not persisted)."""
        ...

    async def proceed(self, update: Update) -> None:
        """Run one step with the inbound update."""
        ...

    def is_end(self) -> bool:
        """Whether the dialog has finished."""
        ...

    def ttl(self) -> int | None:
        """Seconds the stored state should live, None for no expiry."""
        ...


class Dialog:
    """Base class for multi-step dialogs.

    Subclasses list their ``steps``; each call to proceed() runs one of them.
    Every subclass is registered for serialization under ``dialog_type``
    (default: ``module.QualName``).
    """

    steps: list[Step] = []
    ttl_seconds: int | None = 300
    dialog_type: str | None = None

    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        register(cls)

    def __init__(self, chat_id: int | str, user_id: int | str | None = None, bot: IBot | None = None):
        self.chat_id = chat_id
        self.user_id = user_id
        self.memory: dict[str, Any] = {}
        self.next = 0
        self._bot = bot
        self._jump_to: int | None = None

    @classmethod
    def from_update(cls, update: Update, bot: IBot | None = None) -> "Dialog":
        """Create a dialog for the sender and chat of an update."""
        message = update.get_message()
        return cls(chat_id=message.chat_id, user_id=message.from_id, bot=bot)

    # Contract

    def get_dialog_key(self) -> str:
        return format_key(self.user_id, self.chat_id)

    def set_bot(self, bot: IBot | None) -> None:
        self._bot = bot

    def ttl(self) -> int | None:
        return self.ttl_seconds

    def is_end(self) -> bool:
        return self.next >= len(self.steps)

    async def start(self, update: Update) -> None:
        """Rewind to the first step and run it."""
        self.next = 0
        await self.proceed(update)

    async def proceed(self, update: Update) -> None:
        """Run the current step, then move the cursor."""
        if self.is_end():
            return

        index = self.next
        self._jump_to = None

        await self.before_every_step(update, index)

        step = self.steps[index]
        if isinstance(step, str):
            await self._run_method_step(step, update)
        else:
            await self._run_response_step(step)

        if not self.is_end():
            self.next = self._jump_to if self._jump_to is not None else index + 1
        self._jump_to = None

        if self.is_end():
            await self.after_last_step(update)

    # Step control, for use inside steps

    def jump(self, step_name: str) -> None:
        """Make ``step_name`` the next step."""
        self._jump_to = self._step_index(step_name)

    def end(self) -> None:
        """Finish the dialog after the current step."""
        self.next = len(self.steps)

    def remember(self, key: str, value: Any) -> None:
        self.memory[key] = value

    def recall(self, key: str, default: Any = None) -> Any:
        return self.memory.get(key, default)

    @property
    def bot(self) -> IBot:
        if self._bot is None:
            raise RuntimeError(f"Dialog {self.get_dialog_key()} has no bot")
        return self._bot

    async def reply(self, text: str, **params: Any) -> dict:
        """Send a message to this dialog's chat."""
        return await self.bot.send_message(chat_id=self.chat_id, text=text, **params)

    # Hooks

    async def before_every_step(self, update: Update, step_index: int) -> None:
        """Called before each step."""

    async def after_last_step(self, update: Update) -> None:
        """Called once the dialog reaches its end."""

    # Persistence

    def to_state(self) -> dict[str, Any]:
        """Plain-data state. The bot is not part of it."""
        return {
            "chat_id": self.chat_id,
            "user_id": self.user_id,
            "next": self.next,
            "memory": self.memory,
            "ttl": self.ttl_seconds,
        }

    @classmethod
    def from_state(cls, state: dict[str, Any]) -> "Dialog":
        dialog = cls(chat_id=state["chat_id"], user_id=state["user_id"])
        dialog.next = state["next"]
        dialog.memory = dict(state["memory"])
        dialog.ttl_seconds = state.get("ttl", cls.ttl_seconds)
        return dialog

    # Internals

    @staticmethod
    def _step_name(step: Step) -> str | None:
        return step if isinstance(step, str) else step.get("name")

    def _step_index(self, step_name: str) -> int:
        for index, step in enumerate(self.steps):
            if self._step_name(step) == step_name:
                return index
        raise ValueError(f"{type(self).__qualname__} has no step {step_name!r}")

    async def _run_method_step(self, name: str, update: Update) -> None:
        method = getattr(self, name, None)
        if not callable(method):
            raise ValueError(f"{type(self).__qualname__} has no step method {name!r}")

        result = method(update)
        if inspect.isawaitable(result):
            await result

    async def _run_response_step(self, step: dict[str, Any]) -> None:
        response = step.get("response")
        if response:
            await self.reply(response, **step.get("options", {}))

        if step.get("jump"):
            self.jump(step["jump"])
        if step.get("end"):
            self.end()

    def __repr__(self) -> str:
        return f"<{type(self).__qualname__} key={self.get_dialog_key()} next={self.next}>"
