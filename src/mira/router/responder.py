"""Conversational replies in Mira's persona."""

import logging

from ..llm.model import LanguageModel
from ..memory.models import ChatMessage, Fact, Role
from ..memory.session import SessionMemory
from .mood import Mood

logger = logging.getLogger(__name__)

CRISIS_SCRIPT = [
    "I'm really sorry you're feeling this way. You matter, and you're not alone.",
    "If you're in immediate danger, please contact local emergency services right now.",
    "Talking to someone you trust can help, a close friend or family member.",
    "If you can, consider reaching out to a professional counselor or a local helpline in your area.",
]

CHAT_FALLBACK = "Sorry, I couldn't think of a good reply right now, but I'm here with you."

PERSONA_PROMPT = """You are Mira, warm, wise, and helpful. Be empathetic and encouraging.
- If user is sad/stressed/angry, comfort briefly and, when helpful, include a short, relevant story or lesson from Mahabharata, Ramayana, Bhagavad Gita, Bible, Quran, or real life achievers. Keep it respectful and non-preachy.
- If user asks factual questions, answer clearly and simply.
- Use 2-6 sentences. Speak naturally, no markdown, no numbered lists.
- If asked to remember personal info, acknowledge and remember.
- If you are not sure about a fact, be honest and suggest how to verify.
Persona details:
{facts}"""


def format_facts(facts: list[Fact]) -> str:
    """Render known facts for the persona prompt."""
    if not facts:
        return "No stored personal facts yet."
    return "Known facts: " + "; ".join(f"{fact.key}: {fact.value}" for fact in facts)


def format_history(messages: list[ChatMessage], assistant_name: str = "Mira") -> str:
    """Render chat history as "User:"/"<assistant>:" lines."""
    lines = []
    for message in messages:
        speaker = "User" if message.role == Role.USER else assistant_name
        lines.append(f"{speaker}: {message.content}")
    return "\n".join(lines)


class ConversationalResponder:
    """Generates free-form replies grounded in memory and mood."""

    def __init__(
        self,
        llm: LanguageModel,
        memory: SessionMemory,
        chat_window: int = 12,
    ) -> None:
        """Initialize responder.

        Args:
            llm: Language model for replies
            memory: Session working set supplying facts and history
            chat_window: Number of recent messages included in the prompt
        """
        self._llm = llm
        self._memory = memory
        self._chat_window = chat_window

    def build_prompt(self, user_input: str, mood: Mood) -> str:
        """Assemble the conversation prompt."""
        persona = PERSONA_PROMPT.format(facts=format_facts(self._memory.facts))
        history = format_history(self._history_before(user_input))
        return (
            f"{persona}\n\n"
            f"Conversation so far:\n{history}\n\n"
            f"User mood (heuristic): {mood.value}\n"
            f'User: "{user_input}"\n'
            "Mira:"
        )

    def _history_before(self, user_input: str) -> list[ChatMessage]:
        """Recent chat without the message being answered.

        The controller saves the user's message before dispatch, so it is
        usually the newest entry and already appears as the final prompt line.
        """
        messages = self._memory.recent_chat(self._chat_window + 1)
        if messages and messages[-1].role == Role.USER and messages[-1].content == user_input:
            messages = messages[:-1]
        return messages[max(len(messages) - self._chat_window, 0) :]

    def respond(self, user_input: str, mood: Mood = Mood.NEUTRAL) -> str:
        """Produce a reply.

        A crisis mood returns the fixed support script without calling
        the model. Model errors or empty output return a fallback line.

        Args:
            user_input: What the user said
            mood: Detected mood

        Returns:
            Reply text
        """
        if mood == Mood.CRISIS:
            return " ".join(CRISIS_SCRIPT)

        try:
            response = self._llm.generate(self.build_prompt(user_input, mood))
        except Exception as e:
            logger.warning(f"Chat generation failed: {e}")
            return CHAT_FALLBACK

        answer = (response.text or "").strip()
        return answer or CHAT_FALLBACK


__all__ = [
    "CHAT_FALLBACK",
    "CRISIS_SCRIPT",
    "ConversationalResponder",
    "format_facts",
    "format_history",
]
