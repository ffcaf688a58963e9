"""Editor telemetry on top of telelog.

The editor draws its frames straight to the terminal, so telelog never gets
the console unless ``KILO_ENGINE_LOG_CONSOLE`` is set; logs normally go to a
file or nowhere. Everything else talks to this module only:

``configure(...)`` -- rebuild the telelog config from env, overrides or a preset
``get_logger(name)`` -- cached ``telelog.Logger`` per name
``record_event(name, ...)`` -- one ``event::<name>`` line with key/value data
``span(name, ...)`` -- profile a block, optionally tracked as a component
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, MutableMapping, Optional, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "KILO_ENGINE_"
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "kilo_engine")

_TRUTHY = {"1", "true", "yes", "on"}

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None


def _env(name: str) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}")


def _env_flag(name: str) -> bool:
    return (_env(name) or "").lower() in _TRUTHY


@dataclass(frozen=True)
class TelemetrySettings:
    """Everything the editor decides about telelog output."""

    level: str = "INFO"
    log_file: Optional[str] = None
    console: bool = False
    colored: bool = True
    json: bool = False
    buffered: bool = False
    buffer_size: int = 2048

    @classmethod
    def from_env(cls) -> "TelemetrySettings":
        return cls(
            level=(_env("LOG_LEVEL") or "INFO").upper(),
            log_file=_env("LOG_FILE") or None,
            console=_env_flag("LOG_CONSOLE"),
            colored=not _env_flag("NO_COLOR"),
            json=_env_flag("LOG_JSON"),
            buffered=_env_flag("LOG_BUFFERED"),
            buffer_size=int(_env("LOG_BUFFER_SIZE") or "2048"),
        )

    def to_config(self) -> Any:
        config = tl.Config()
        config.with_min_level(self.level)
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(self.colored)
        if self.json:
            config.with_json_format(True)
        if self.log_file:
            config.with_file_output(self.log_file)
        if self.buffered:
            config.with_buffering(True)
            config.with_buffer_size(self.buffer_size)
        # Spans rely on logger.profile.
        config.with_profiling(True)
        return config


_PRESETS: Dict[str, TelemetrySettings] = {
    "development": TelemetrySettings(level="DEBUG", log_file="kilo_engine-debug.log"),
    "production": TelemetrySettings(
        level="INFO", log_file="kilo_engine.log", buffered=True
    ),
    "performance": TelemetrySettings(
        level="DEBUG",
        log_file="kilo_engine-performance.log",
        json=True,
        buffered=True,
    ),
}


def preset_settings(preset: str) -> TelemetrySettings:
    """Look up a named preset; ``KILO_ENGINE_LOG_FILE`` still picks the file."""

    try:
        settings = _PRESETS[preset.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown preset '{preset}'; expected one of {sorted(_PRESETS)}"
        ) from None
    log_file = _env("LOG_FILE")
    return replace(settings, log_file=log_file) if log_file else settings


def configure(
    *,
    config: Optional[Any] = None,
    preset: Optional[str] = None,
    level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> None:
    """Swap the active telelog configuration and drop cached loggers.

    ``config`` adopts a ready-made ``tl.Config``; ``preset`` names one of
    ``development``, ``production`` or ``performance``. The two are mutually
    exclusive. Without either, settings come from the environment, with
    ``level`` and ``log_file`` (the CLI flags) taking precedence.
    """

    global _ACTIVE_CONFIG
    if config is not None and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")

    if preset:
        config = preset_settings(preset).to_config()
    elif config is None:
        settings = TelemetrySettings.from_env()
        if level:
            settings = replace(settings, level=level.upper())
        if log_file:
            settings = replace(settings, log_file=log_file)
        config = settings.to_config()

    _ACTIVE_CONFIG = config
    _LOGGER_CACHE.clear()


def get_logger(name: Optional[str] = None) -> Any:
    global _ACTIVE_CONFIG
    if _ACTIVE_CONFIG is None:
        _ACTIVE_CONFIG = TelemetrySettings.from_env().to_config()
    logger_name = name or DEFAULT_LOGGER_NAME
    logger = _LOGGER_CACHE.get(logger_name)
    if logger is None:
        logger = tl.Logger.with_config(logger_name, _ACTIVE_CONFIG)
        _LOGGER_CACHE[logger_name] = logger
    return logger


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("latin-1")
    return str(value)


def _log(logger: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    """Log ``payload`` as telelog key/value pairs when the level supports it."""

    name = level.lower()
    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        structured(message, [(str(key), _text(value)) for key, value in payload.items()])
        return
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    _log(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    """Yielded by :func:`span`; extra metadata lands on the failure line."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def fail(self, reason: str) -> None:
        payload: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        payload["reason"] = reason
        _log(self.logger, "error", "span::fail", payload)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Run a block under ``logger.profile(name)``.

    ``component=True`` also tracks the block as a component called ``name``;
    a string picks the component name. ``metadata`` is pushed as logger
    context for the duration of the block and removed afterwards.
    """

    log = get_logger(logger_name)
    component_name = name if component is True else (component or None)
    context = {key: _text(value) for key, value in (metadata or {}).items()}
    handle = SpanHandle(
        logger=log,
        span_name=name,
        component_name=component_name,
        metadata=dict(context),
    )

    for key, value in context.items():
        log.add_context(key, value)
    try:
        with ExitStack() as stack:
            if component_name:
                stack.enter_context(log.track_component(component_name))
            stack.enter_context(log.profile(name))
            try:
                yield handle
            except Exception as exc:
                handle.fail(str(exc))
                raise
    finally:
        for key in context:
            log.remove_context(key)


configure()
logger = get_logger()

__all__ = [
    "SpanHandle",
    "TelemetrySettings",
    "configure",
    "get_logger",
    "preset_settings",
    "record_event",
    "span",
    "logger",
]
