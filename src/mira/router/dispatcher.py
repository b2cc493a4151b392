"""Intent dispatch: maps a parsed intent to speech and side effects.

Every handler returns a DispatchAction. Its utterance is spoken first and
its `on_spoken` callback runs only after playback finished; the callback
may return a follow-up action, giving chains like
speech -> launch -> speech -> search.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import quote

from ..launcher.software import LaunchError
from .intent import IntentRecord
from .mood import Mood, classify
from .responder import ConversationalResponder

if TYPE_CHECKING:
    from ..launcher.browser import Navigator
    from ..launcher.software import Launcher
    from ..search import WebSearch

logger = logging.getLogger(__name__)

GREETING_REPLY = "Hello sir, I'm listening!"
INTRODUCTION = (
    "Hello, my name is Mira. I am an AI assistant created by Aditya. "
    "I'm here to help you with your tasks, whether that's running applications on your PC, "
    "opening websites, playing songs or videos, or simply being your chat partner. "
    "You can talk to me about anything, from solving problems to just having a friendly "
    "conversation."
)
UNKNOWN_REPLY = "Sorry, I didn't understand that."

# Sites opened directly for "open <target>", without a search lookup.
APP_MAP: dict[str, str] = {
    "youtube": "https://www.youtube.com",
    "google": "https://www.google.com",
    "chrome": "https://www.google.com",
    "gmail": "https://mail.google.com",
    "amazon": "https://www.amazon.in",
    "flipkart": "https://www.flipkart.com",
    "twitter": "https://x.com",
    "github": "https://github.com",
}

MOOD_PLAYLISTS: dict[str, str] = {
    "happy": "happy upbeat music playlist",
    "sad": "uplifting songs for when you're sad",
    "angry": "calming relaxing music for anger",
    "stressed": "meditation relaxing music stress relief",
    "chill": "lofi chill relax beats playlist",
    "relax": "lofi chill relax beats playlist",
}


def _encode(text: str) -> str:
    return quote(text, safe="!~*'()")


def youtube_results_url(query: str) -> str:
    """YouTube search results page for a query."""
    return f"https://www.youtube.com/results?search_query={_encode(query)}"


def google_search_url(query: str) -> str:
    """Google search results page for a query."""
    return f"https://www.google.com/search?q={_encode(query)}"


def playlist_query(mood: str) -> str:
    """YouTube query for a mood-boost playlist."""
    return MOOD_PLAYLISTS.get(mood, f"{mood} music playlist")


@dataclass
class DispatchAction:
    """Something to say, and what to do once it has been said.

    Attributes:
        intent: Intent that produced the action
        utterance: Text to speak
        on_spoken: Runs after playback; may return a follow-up action
    """

    intent: str
    utterance: str
    on_spoken: Callable[[], "DispatchAction | None"] | None = None

    def after_speech(self) -> "DispatchAction | None":
        """Run the post-speech callback.

        Failures are logged and end the chain.
        """
        if self.on_spoken is None:
            return None
        try:
            return self.on_spoken()
        except Exception as e:
            logger.warning(f"Post-speech action for {self.intent} failed: {e}")
            return None


class CommandDispatcher:
    """Routes IntentRecords to handlers through a fixed table."""

    def __init__(
        self,
        responder: ConversationalResponder,
        search: "WebSearch",
        navigator: "Navigator",
        launcher: "Launcher",
    ) -> None:
        """Initialize dispatcher.

        Args:
            responder: Conversational reply generator
            search: Top-result lookup
            navigator: URL opener
            launcher: Native application launcher
        """
        self._responder = responder
        self._search = search
        self._navigator = navigator
        self._launcher = launcher
        self._greeted = False

        self._handlers: dict[str, Callable[[IntentRecord, str, Mood], DispatchAction]] = {
            "greet": self._handle_greet,
            "introduce": self._handle_introduce,
            "search": self._handle_search,
            "play": self._handle_play,
            "open": self._handle_open,
            "mood_boost": self._handle_mood_boost,
            "open_software": self._handle_open_software,
            "chat": self._handle_chat,
            "unknown": self._handle_chat,
        }

    @property
    def greeted(self) -> bool:
        """Whether the greeting reply was already given this session."""
        return self._greeted

    def dispatch(
        self,
        record: IntentRecord | None,
        transcript: str,
        mood: Mood | None = None,
    ) -> DispatchAction | None:
        """Choose the action for a parsed turn.

        Args:
            record: Effective intent record (None falls back to chat)
            transcript: Raw transcript
            mood: Detected mood; classified from the transcript when None

        Returns:
            DispatchAction, or None when the assistant was not addressed
        """
        if mood is None:
            mood = classify(transcript)

        if record is None:
            return self._handle_chat(IntentRecord(wake=True, intent="chat"), transcript, mood)
        if not record.wake:
            return None

        if record.intent is None:
            return self._handle_chat(record, transcript, mood)

        handler = self._handlers.get(record.intent)
        if handler is None:
            logger.info(f"Unknown intent: {record.intent}")
            return DispatchAction(intent=record.intent, utterance=UNKNOWN_REPLY)

        logger.debug(f"Dispatching {record.intent} (target={record.target}, query={record.query})")
        return handler(record, transcript, mood)

    def _open_top_result(self, query: str, fallback_url: str) -> None:
        link = self._search.top_result(query)
        self._navigator.open(link or fallback_url)

    def _handle_greet(
        self, _record: IntentRecord, _transcript: str, _mood: Mood
    ) -> DispatchAction:
        if self._greeted:
            return DispatchAction(intent="greet", utterance=UNKNOWN_REPLY)
        self._greeted = True
        return DispatchAction(intent="greet", utterance=GREETING_REPLY)

    def _handle_introduce(
        self, _record: IntentRecord, _transcript: str, _mood: Mood
    ) -> DispatchAction:
        return DispatchAction(intent="introduce", utterance=INTRODUCTION)

    def _handle_search(self, record: IntentRecord, _transcript: str, _mood: Mood) -> DispatchAction:
        query = record.query or ""
        target = (record.target or "").lower()

        def on_spoken() -> None:
            if target == "youtube":
                self._navigator.open(youtube_results_url(query))
            else:
                self._open_top_result(query, google_search_url(query))

        return DispatchAction(intent="search", utterance=f"Searching {query}", on_spoken=on_spoken)

    def _handle_play(self, record: IntentRecord, _transcript: str, _mood: Mood) -> DispatchAction:
        query = record.query or ""

        def on_spoken() -> None:
            self._open_top_result(f"site:youtube.com {query}", youtube_results_url(query))

        return DispatchAction(
            intent="play",
            utterance=f"Playing {query} on YouTube",
            on_spoken=on_spoken,
        )

    def _handle_open(self, record: IntentRecord, _transcript: str, _mood: Mood) -> DispatchAction:
        query = record.query or ""
        target = (record.target or "").lower()
        label = query or target

        def on_spoken() -> None:
            if target in APP_MAP:
                self._navigator.open(APP_MAP[target])
                return
            self._open_top_result(label, google_search_url(label))

        return DispatchAction(intent="open", utterance=f"Opening {label}", on_spoken=on_spoken)

    def _handle_mood_boost(
        self, record: IntentRecord, _transcript: str, _mood: Mood
    ) -> DispatchAction:
        mood = (record.target or "").lower() or record.query or "happy"

        def on_spoken() -> None:
            self._navigator.open(youtube_results_url(playlist_query(mood)))
            tips = self._search.top_result(f"quick tips to feel {mood}")
            if not tips:
                tips = self._search.top_result(f"how to feel {mood}")
            if tips:
                self._navigator.open(tips)

        return DispatchAction(
            intent="mood_boost",
            utterance=f"Sure Sir, I'll try to help you feel {mood}. Let's play something for you.",
            on_spoken=on_spoken,
        )

    def _handle_open_software(
        self, record: IntentRecord, _transcript: str, _mood: Mood
    ) -> DispatchAction:
        name = (record.target or "").lower() or record.query or ""

        def search_instead() -> None:
            self._open_top_result(name, google_search_url(name))

        def on_spoken() -> DispatchAction:
            try:
                result = self._launcher.launch(name)
            except LaunchError as e:
                logger.warning(f"Launcher error for {name}: {e}")
                return DispatchAction(
                    intent="open_software",
                    utterance=(
                        f"There was an error trying to open {name}. Searching Google instead."
                    ),
                    on_spoken=search_instead,
                )

            if result.success:
                return DispatchAction(intent="open_software", utterance=f"Opened {name}.")

            logger.info(f"Launch failed: {result.message}")
            return DispatchAction(
                intent="open_software",
                utterance=f"Could not open {name}. Searching Google instead.",
                on_spoken=search_instead,
            )

        return DispatchAction(
            intent="open_software",
            utterance=f"Attempting to open {name}...",
            on_spoken=on_spoken,
        )

    def _handle_chat(self, record: IntentRecord, transcript: str, mood: Mood) -> DispatchAction:
        user_input = transcript or record.query or ""
        return DispatchAction(intent="chat", utterance=self._responder.respond(user_input, mood))


__all__ = [
    "APP_MAP",
    "CommandDispatcher",
    "DispatchAction",
    "GREETING_REPLY",
    "INTRODUCTION",
    "MOOD_PLAYLISTS",
    "UNKNOWN_REPLY",
    "google_search_url",
    "playlist_query",
    "youtube_results_url",
]
