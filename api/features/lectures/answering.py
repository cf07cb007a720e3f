"""Answer generator seam.

Turning lecture text into an answer is out of scope for this service; the
controller only depends on the ``AnswerGenerator`` protocol.
"""
from typing import Protocol, runtime_checkable

from api.features.conversation.models import ConversationHistory


@runtime_checkable
class AnswerGenerator(Protocol):
    async def generate(self, question: str, history: ConversationHistory) -> str:
        """Produce the assistant reply for ``question``."""
        ...


class PlaceholderAnswerGenerator:
    """Acknowledges the question without answering it."""

    def __init__(self, template: str = 'Received your question: "{question}".'):
        self.template = template

    async def generate(self, question: str, history: ConversationHistory) -> str:
        return self.template.format(question=question)
