"""Sample dialog: asks for a name and an age."""

from ..models import Update
from .base import Dialog


class HelloDialog(Dialog):
    """Started by /hello."""

    dialog_type = "hello"
    steps = [
        {"name": "greet", "response": "Hi! What is your name?"},
        "ask_age",
        "summary",
    ]

    async def ask_age(self, update: Update) -> None:
        name = update.get_message().text.strip()
        if not name:
            await self.reply("Please tell me your name.")
            self.jump("ask_age")
            return

        self.remember("name", name)
        await self.reply(f"Nice to meet you, {name}! How old are you?")

    async def summary(self, update: Update) -> None:
        text = update.get_message().text.strip()
        if not text.isdecimal():
            await self.reply("Age should be a number, try again.")
            self.jump("summary")
            return

        self.remember("age", int(text))
        await self.reply(f"{self.recall('name')}, {text} years. Got it, bye!")
