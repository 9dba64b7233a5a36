from typing import List, Protocol

from models import PresenterEvent


class Presenter(Protocol):
    """Display capability a chat session writes to."""

    def show_message(self, role: str, html: str) -> None: ...

    def show_typing(self) -> None: ...

    def hide_typing(self) -> None: ...

    def reset(self) -> None: ...


class BufferedPresenter:
    """
    Records display instructions as events until they are drained.

    Used by the HTTP layer: the events produced while handling a request are
    returned to the browser, which applies them to the page.
    """

    def __init__(self):
        self._events: List[PresenterEvent] = []

    def show_message(self, role: str, html: str) -> None:
        self._events.append(PresenterEvent(kind="message", role=role, html=html))

    def show_typing(self) -> None:
        self._events.append(PresenterEvent(kind="typing"))

    def hide_typing(self) -> None:
        self._events.append(PresenterEvent(kind="typing_done"))

    def reset(self) -> None:
        self._events.append(PresenterEvent(kind="reset"))

    def drain(self) -> List[PresenterEvent]:
        events, self._events = self._events, []
        return events
