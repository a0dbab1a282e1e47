"""Configuration helpers for the peekview preview engine."""

from __future__ import annotations

import dataclasses
import os
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

from .utils.paths import coerce_required_path

if TYPE_CHECKING:  # pragma: no cover - used for type checking only
    from .preview.models import PanelPlacement, ViewportGeometry

__all__ = [
    "DEBOUNCE_DELAY_ENV_VAR",
    "DEFAULT_IGNORED_EXTENSIONS",
    "DEFAULT_IMAGE_EXTENSIONS",
    "DEFAULT_TRIGGER_COMMANDS",
    "EVICTION_THRESHOLD_ENV_VAR",
    "MAX_PREVIEWABLE_SIZE_ENV_VAR",
    "START_DIR_ENV_VAR",
    "PreviewConfig",
    "configure",
    "get_config",
]

DEBOUNCE_DELAY_ENV_VAR: Final[str] = "PEEKVIEW_DEBOUNCE_DELAY"
"""Environment variable overriding the preview delay in seconds."""

MAX_PREVIEWABLE_SIZE_ENV_VAR: Final[str] = "PEEKVIEW_MAX_PREVIEWABLE_SIZE"
"""Environment variable overriding the size above which files are read partially."""

EVICTION_THRESHOLD_ENV_VAR: Final[str] = "PEEKVIEW_EVICTION_THRESHOLD"
"""Environment variable overriding the cumulative size that triggers eviction."""

START_DIR_ENV_VAR: Final[str] = "PEEKVIEW_START_DIR"
"""Environment variable overriding the directory the browser opens in."""

DEFAULT_IGNORED_EXTENSIONS: Final[str] = (
    r"mkv|webm|mp4|mp3|ogg|m4a|flac|wav|gz|zst|tar|xz|rar|zip|iso|epub|pdf"
)
"""Extensions that are never previewed."""

DEFAULT_IMAGE_EXTENSIONS: Final[str] = r"png|jpe?g|gif|bmp|webp|tiff?|ico"
"""Extensions rendered as images."""

DEFAULT_TRIGGER_COMMANDS: Final[frozenset[str]] = frozenset(
    {
        "move-next",
        "move-previous",
        "mark",
        "unmark",
        "unmark-backward",
        "delete-marker",
        "goto-file",
        "open-file",
    }
)
"""Navigation commands that close the preview when landing on an ineligible entry."""

PlacementPolicy = Callable[["ViewportGeometry", "PreviewConfig"], "PanelPlacement"]


@dataclass(frozen=True, slots=True)
class PreviewConfig:
    """Runtime configuration for the preview engine.

    Extension patterns are regular expressions matched case-insensitively
    against the whole extension, without its leading dot. Sizes are in
    bytes, ``debounce_delay`` in seconds and panel dimensions in pixels.
    """

    ignored_extensions: str | None = DEFAULT_IGNORED_EXTENSIONS
    image_extensions: str = DEFAULT_IMAGE_EXTENSIONS
    max_previewable_size: int = 1_048_576
    oversized_chunk_size: int = 10_240
    debounce_delay: float = 0.7
    trigger_commands: frozenset[str] = DEFAULT_TRIGGER_COMMANDS
    placement_policy: PlacementPolicy | None = None
    eviction_size_threshold: int = 1_024_000
    split_width_threshold: int = 960
    min_panel_width: int = 320
    start_directory: Path = field(default_factory=Path.home)

    _ignored_re: re.Pattern[str] | None = field(init=False, repr=False, compare=False)
    _image_re: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for name in ("max_previewable_size", "oversized_chunk_size", "eviction_size_threshold"):
            if int(getattr(self, name)) <= 0:
                raise ValueError(f"{name} must be a positive number of bytes")
        if self.debounce_delay < 0:
            raise ValueError("debounce_delay cannot be negative")
        if self.split_width_threshold < 0 or self.min_panel_width < 0:
            raise ValueError("Panel dimensions cannot be negative")

        object.__setattr__(self, "trigger_commands", frozenset(self.trigger_commands))
        object.__setattr__(self, "start_directory", coerce_required_path(self.start_directory))
        object.__setattr__(self, "_ignored_re", _compile_extensions(self.ignored_extensions))
        image_re = _compile_extensions(self.image_extensions)
        if image_re is None:
            raise ValueError("image_extensions cannot be empty")
        object.__setattr__(self, "_image_re", image_re)

    def is_ignored_extension(self, extension: str) -> bool:
        """Return ``True`` when *extension* should never be previewed."""

        if not extension or self._ignored_re is None:
            return False
        return self._ignored_re.fullmatch(extension) is not None

    def is_image_extension(self, extension: str) -> bool:
        """Return ``True`` when *extension* names an image format."""

        if not extension:
            return False
        return self._image_re.fullmatch(extension) is not None

    def with_overrides(self, **overrides: Any) -> PreviewConfig:
        """Return a copy of this configuration with *overrides* applied."""

        return dataclasses.replace(self, **overrides)


def _compile_extensions(pattern: str | None) -> re.Pattern[str] | None:
    if pattern is None or not pattern.strip():
        return None
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        raise ValueError(f"Invalid extension pattern {pattern!r}: {exc}") from exc


_CONFIG: PreviewConfig | None = None


def get_config() -> PreviewConfig:
    """Return the cached :class:`PreviewConfig` instance."""

    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _build_config()
    return _CONFIG


def configure(**overrides: Any) -> PreviewConfig:
    """Rebuild the global configuration with optional overrides.

    ``None`` values are ignored so callers can forward optional command line
    arguments unchanged. Use :meth:`PreviewConfig.with_overrides` to clear
    ``ignored_extensions`` explicitly.
    """

    global _CONFIG
    _CONFIG = _build_config({key: value for key, value in overrides.items() if value is not None})
    return _CONFIG


def _build_config(overrides: dict[str, Any] | None = None) -> PreviewConfig:
    values: dict[str, Any] = {}

    delay = os.environ.get(DEBOUNCE_DELAY_ENV_VAR)
    if delay:
        values["debounce_delay"] = _parse_number(delay, float, DEBOUNCE_DELAY_ENV_VAR)

    max_size = os.environ.get(MAX_PREVIEWABLE_SIZE_ENV_VAR)
    if max_size:
        values["max_previewable_size"] = _parse_number(max_size, int, MAX_PREVIEWABLE_SIZE_ENV_VAR)

    threshold = os.environ.get(EVICTION_THRESHOLD_ENV_VAR)
    if threshold:
        values["eviction_size_threshold"] = _parse_number(threshold, int, EVICTION_THRESHOLD_ENV_VAR)

    start_dir = os.environ.get(START_DIR_ENV_VAR)
    if start_dir:
        values["start_directory"] = coerce_required_path(
            start_dir,
            empty_error="Start directory overrides cannot be empty",
        )

    if overrides:
        if "trigger_commands" in overrides:
            overrides["trigger_commands"] = _coerce_commands(overrides["trigger_commands"])
        values.update(overrides)

    return PreviewConfig(**values)


def _parse_number(raw: str, kind: Callable[[str], Any], source: str) -> Any:
    try:
        return kind(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{source} must be a number, got {raw!r}") from exc


def _coerce_commands(value: str | Iterable[str]) -> frozenset[str]:
    if isinstance(value, str):
        value = value.replace(",", " ").split()
    return frozenset(str(command).strip() for command in value if str(command).strip())
