"""Logger, notifier and error-handler implementations.

These are the default, host-less implementations of the ``ErrorLogger`` and
``Notifier`` capabilities. They take their dependencies explicitly (an output
sink, a configuration snapshot) and hold no other state.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
import json
import logging
import sys
import traceback
from typing import IO, TYPE_CHECKING, Any, Literal

from .constants import LOG_PREFIX
from .core.interfaces import ErrorLogger, Notifier, OutputSink
from .core.types import EnhancedError, ErrorRecoveryOptions
from .errors import build_error_recovery_options, sanitize_error_message

if TYPE_CHECKING:
    from .config import FrozenConfig

log = logging.getLogger(__name__)

NotificationLevel = Literal["all", "important", "silent"]

_LEVELS = {"info": logging.INFO, "warn": logging.WARNING, "error": logging.ERROR}


class StreamSink:
    """Output sink that writes each line to a text stream."""

    def __init__(self, stream: IO[str] | None = None) -> None:
        self._stream = stream

    def append_line(self, line: str) -> None:
        stream = self._stream or sys.stderr
        stream.write(line + "\n")
        stream.flush()


class OutputChannelLogger:
    """Writes timestamped, sanitized log lines to an output sink.

    Each line is mirrored into the ``pathsift`` logging hierarchy so hosts that
    only configure :mod:`logging` still see it.
    """

    def __init__(self, sink: OutputSink) -> None:
        self._sink = sink

    def _write(self, level: str, message: str) -> None:
        timestamp = datetime.now(UTC).isoformat()
        self._sink.append_line(f"[{timestamp}] [{level}] {message}")

    def log(self, message: str, level: Literal["info", "warn", "error"]) -> None:
        message = sanitize_error_message(message)
        self._write(level.upper(), message)
        log.log(_LEVELS[level], "%s %s", LOG_PREFIX, message)

    def log_error(self, error: EnhancedError) -> None:
        message = sanitize_error_message(error.message)
        self._write("ERROR", f"{error.category}: {message}")
        tb = error.original_error.__traceback__
        if tb is not None:
            stack = "".join(traceback.format_tb(tb)).rstrip()
            self._sink.append_line(f"Stack: {sanitize_error_message(stack)}")
        log.error("%s %s: %s", LOG_PREFIX, error.category, message)

    def log_warning(self, message: str, context: dict[str, Any] | None = None) -> None:
        line = sanitize_error_message(message) + _format_context(context)
        self._write("WARN", line)
        log.warning("%s %s", LOG_PREFIX, line)

    def log_info(self, message: str, context: dict[str, Any] | None = None) -> None:
        line = sanitize_error_message(message) + _format_context(context)
        self._write("INFO", line)
        log.info("%s %s", LOG_PREFIX, line)


def _format_context(context: dict[str, Any] | None) -> str:
    if not context:
        return ""
    return " " + sanitize_error_message(json.dumps(context, default=str))


class LoggingNotifier:
    """Notifier that surfaces messages through :mod:`logging`."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("pathsift.notifications")

    @staticmethod
    def _compose(message: str, details: str | None) -> str:
        text = message if not details else f"{message}\nDetails: {details}"
        return sanitize_error_message(text)

    def show_error(self, message: str, details: str | None = None) -> None:
        self._logger.error("%s %s", LOG_PREFIX, self._compose(message, details))

    def show_warning(self, message: str, details: str | None = None) -> None:
        self._logger.warning("%s %s", LOG_PREFIX, self._compose(message, details))

    def show_info(self, message: str, details: str | None = None) -> None:
        self._logger.info("%s %s", LOG_PREFIX, self._compose(message, details))

    def show_progress(self, message: str) -> None:
        self._logger.info("%s %s", LOG_PREFIX, sanitize_error_message(message))


class ErrorHandler:
    """Centralized error handling: logging, notification and recovery."""

    def __init__(
        self,
        *,
        logger: ErrorLogger,
        notifier: Notifier,
        notifications_level: NotificationLevel = "silent",
        show_parse_errors: bool = False,
    ) -> None:
        self.logger = logger
        self.notifier = notifier
        self.notifications_level = notifications_level
        self.show_parse_errors = show_parse_errors

    def should_show(self, error: EnhancedError) -> bool:
        """Whether an error is visible under the configured notification level."""
        if error.category in ("parse", "parsing") and not self.show_parse_errors:
            return error.severity == "high"
        if error.severity == "high":
            return True
        if error.severity == "medium":
            return self.notifications_level != "silent"
        return self.notifications_level == "all"

    async def handle(self, error: EnhancedError) -> None:
        """Log the error and notify the user when its severity warrants it."""
        self.logger.log_error(error)
        if not self.should_show(error):
            return
        if error.severity == "high":
            self.notifier.show_error(error.user_message, error.suggestion)
            return
        self.notifier.show_warning(error.user_message, error.suggestion)

    async def handle_with_recovery(
        self,
        error: EnhancedError,
        options: ErrorRecoveryOptions | None = None,
        operation: Callable[[], Awaitable[Any]] | None = None,
    ) -> bool:
        """Try to recover from an error.

        ``operation`` (or the policy's fallback action) is attempted up to
        ``max_retries`` times for retryable errors and once otherwise, sleeping
        ``retry_delay`` milliseconds between attempts.

        Returns:
            True if an attempt succeeded, False once the policy is exhausted.
        """
        recovery = options or build_error_recovery_options(error)
        action = operation or recovery.fallback_action

        if action is None:
            await self.handle(error)
            return False

        attempts = max(recovery.max_retries, 1) if recovery.retryable else 1
        for attempt in range(attempts):
            if attempt and recovery.retry_delay:
                await asyncio.sleep(recovery.retry_delay / 1000)
            try:
                await action()
                return True
            except Exception as e:
                log.debug(
                    "Recovery attempt %d/%d failed: %s",
                    attempt + 1,
                    attempts,
                    sanitize_error_message(str(e)),
                )

        await self.handle(error)
        return False

    def log_error(self, error: EnhancedError) -> None:
        self.logger.log_error(error)

    def notify_user(self, error: EnhancedError) -> None:
        """Notify regardless of level, choosing the channel by severity."""
        if error.severity == "high":
            self.notifier.show_error(error.user_message, error.suggestion)
        elif error.severity == "medium":
            self.notifier.show_warning(error.user_message, error.suggestion)
        else:
            self.notifier.show_info(error.user_message, error.suggestion)


def create_error_logger(sink: OutputSink | None = None) -> OutputChannelLogger:
    """Create an error logger writing to ``sink`` (stderr by default)."""
    return OutputChannelLogger(sink or StreamSink())


def create_error_notifier(logger: logging.Logger | None = None) -> LoggingNotifier:
    """Create the default logging-backed notifier."""
    return LoggingNotifier(logger)


def create_error_handler(
    *,
    logger: ErrorLogger,
    notifier: Notifier,
    notifications_level: NotificationLevel = "silent",
    show_parse_errors: bool = False,
    config: FrozenConfig | None = None,
) -> ErrorHandler:
    """Create an error handler from explicit dependencies.

    A configuration snapshot, when given, supplies the notification level and
    parse-error visibility.
    """
    if config is not None:
        notifications_level = config.notifications_level
        show_parse_errors = config.show_parse_errors
    return ErrorHandler(
        logger=logger,
        notifier=notifier,
        notifications_level=notifications_level,
        show_parse_errors=show_parse_errors,
    )
