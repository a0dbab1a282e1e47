"""Per-context entry points exposed to the browser shell."""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..config import PreviewConfig, get_config
from .errors import MisuseError
from .host import BrowserHost
from .session import PreviewSession

__all__ = ["PreviewController"]

logger = logging.getLogger(__name__)

SessionFactory = Callable[[BrowserHost, PreviewConfig], PreviewSession]


class PreviewController:
    """Own one :class:`PreviewSession` per browsing context.

    Sessions never share caches or panels, so two browser windows cannot
    evict each other's previews.
    """

    def __init__(
        self,
        config: PreviewConfig | None = None,
        *,
        session_factory: SessionFactory = PreviewSession,
    ) -> None:
        self._config = config
        self._session_factory = session_factory
        self._sessions: dict[int, tuple[BrowserHost, PreviewSession]] = {}

    @property
    def config(self) -> PreviewConfig:
        return self._config or get_config()

    def session_for(self, context: BrowserHost | None) -> PreviewSession | None:
        """Return the running session for *context*, if previews are enabled."""

        if context is None:
            return None
        entry = self._sessions.get(id(context))
        return entry[1] if entry is not None else None

    def is_enabled(self, context: BrowserHost | None) -> bool:
        return self.session_for(context) is not None

    def enable(self, context: BrowserHost | None) -> PreviewSession:
        """Start previewing in *context* and return its session."""

        self._require_context(context, "enable previews")
        session = self.session_for(context)
        if session is not None:
            return session

        session = self._session_factory(context, self.config)
        self._sessions[id(context)] = (context, session)
        session.start()
        return session

    def disable(self, context: BrowserHost | None) -> None:
        """Stop previewing in *context*, closing its panel."""

        self._require_context(context, "disable previews")
        entry = self._sessions.pop(id(context), None)
        if entry is not None:
            entry[1].stop()

    def toggle(self, context: BrowserHost | None) -> bool:
        """Flip previews for *context*; return ``True`` when now enabled."""

        if self.is_enabled(context):
            self.disable(context)
            return False
        self.enable(context)
        return True

    def toggle_hex_view(self, context: BrowserHost | None) -> bool:
        """Toggle the hex view of the preview shown in *context*."""

        self._require_context(context, "toggle the hex view")
        session = self.session_for(context)
        if session is None:
            raise MisuseError("Previews are not enabled in this browser")
        return session.toggle_hex_view()

    def shutdown(self) -> None:
        """Stop every session."""

        for _context, session in list(self._sessions.values()):
            session.stop()
        self._sessions.clear()

    @staticmethod
    def _require_context(context: BrowserHost | None, action: str) -> None:
        if context is None:
            raise MisuseError(f"Cannot {action} outside a file browser")
