"""Background conversion with throttling, coalescing, and stale-result suppression."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from asciify_converter import (
    AsciiArtifact,
    AsciifyError,
    ConversionConfig,
    InvalidInputError,
    PixelBuffer,
    apply_brightness_contrast,
    convert,
)

from .config import AppConfig
from .logging_setup import get_logger

logger = get_logger("controller")


@dataclass(frozen=True)
class ConversionRequest:
    config: ConversionConfig
    brightness: int = 0
    contrast: int = 0

    @classmethod
    def from_config(cls, cfg: AppConfig) -> "ConversionRequest":
        return cls(
            config=cfg.to_conversion_config(),
            brightness=cfg.adjustment.brightness,
            contrast=cfg.adjustment.contrast,
        )


@dataclass
class ConversionStatus:
    busy: bool = False
    submitted: int = 0
    completed: int = 0
    conversions: int = 0
    discarded: int = 0
    last_error: str | None = None
    last_duration_s: float = 0.0


def convert_request(buffer: PixelBuffer | None, request: ConversionRequest) -> AsciiArtifact:
    if buffer is None:
        raise InvalidInputError("No source image loaded")
    adjusted = apply_brightness_contrast(buffer, request.brightness, request.contrast)
    return convert(adjusted, request.config)


def convert_settings(buffer: PixelBuffer, cfg: AppConfig) -> AsciiArtifact:
    return convert_request(buffer, ConversionRequest.from_config(cfg))


class ConversionController:
    """Runs conversions on a worker thread.

    Requests submitted within ``min_interval_ms`` of the previous conversion
    collapse into the newest one. A result is published only if no newer
    request arrived while it was being computed; failures keep the last
    published artifact.
    """

    def __init__(self, buffer: PixelBuffer | None = None, min_interval_ms: int = 32) -> None:
        self.min_interval_s = max(0, min_interval_ms) / 1000.0

        self._cond = threading.Condition()
        self._buffer = buffer
        self._generation = 0
        self._pending: tuple[int, ConversionRequest] | None = None
        self._last_request: ConversionRequest | None = None
        self._artifact: AsciiArtifact | None = None
        self._status = ConversionStatus()
        self._listeners: list[Callable[[AsciiArtifact], None]] = []
        self._events: list[dict[str, Any]] = []
        self._last_run = float("-inf")
        self._closed = False

        self._worker = threading.Thread(target=self._run, name="asciify-converter", daemon=True)
        self._worker.start()

    @classmethod
    def from_config(cls, cfg: AppConfig, buffer: PixelBuffer | None = None) -> "ConversionController":
        return cls(buffer, min_interval_ms=cfg.controller.min_interval_ms)

    @property
    def status(self) -> ConversionStatus:
        return self._status

    @property
    def artifact(self) -> AsciiArtifact | None:
        return self._artifact

    def recent_events(self, limit: int = 200) -> list[dict[str, Any]]:
        with self._cond:
            return self._events[-limit:]

    def on_result(self, callback: Callable[[AsciiArtifact], None]) -> None:
        with self._cond:
            self._listeners.append(callback)

    def _log_event(self, event: str, **fields: Any) -> None:
        row = {"ts_utc": datetime.now(timezone.utc).isoformat(), "event": event}
        row.update(fields)
        self._events.append(row)
        if len(self._events) > 1000:
            self._events = self._events[-1000:]

    def set_source(self, buffer: PixelBuffer) -> None:
        with self._cond:
            if self._closed:
                raise RuntimeError("controller is closed")
            self._buffer = buffer
            self._log_event("source_changed", width=buffer.width, height=buffer.height)
            if self._last_request is not None:
                self._enqueue(self._last_request)

    def submit(self, request: ConversionRequest) -> int:
        with self._cond:
            if self._closed:
                raise RuntimeError("controller is closed")
            return self._enqueue(request)

    def _enqueue(self, request: ConversionRequest) -> int:
        self._generation += 1
        if self._pending is not None:
            self._log_event("coalesced", generation=self._pending[0])
        self._pending = (self._generation, request)
        self._last_request = request
        self._status.submitted = self._generation
        self._cond.notify_all()
        return self._generation

    def wait_idle(self, timeout: float | None = None) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: self._pending is None and not self._status.busy, timeout)

    def close(self, timeout: float = 2.0) -> None:
        with self._cond:
            self._closed = True
            self._pending = None
            self._cond.notify_all()
        self._worker.join(timeout)

    def _next_job(self) -> tuple[int, ConversionRequest, PixelBuffer | None] | None:
        with self._cond:
            while self._pending is None and not self._closed:
                self._cond.wait()
            wait_for = self._last_run + self.min_interval_s - time.monotonic()
            while wait_for > 0 and not self._closed:
                self._cond.wait(wait_for)
                wait_for = self._last_run + self.min_interval_s - time.monotonic()
            if self._closed or self._pending is None:
                return None

            generation, request = self._pending
            self._pending = None
            self._status.busy = True
            return generation, request, self._buffer

    def _run(self) -> None:
        while True:
            job = self._next_job()
            if job is None:
                return
            generation, request, buffer = job

            start = time.perf_counter()
            artifact: AsciiArtifact | None = None
            error: Exception | None = None
            try:
                artifact = convert_request(buffer, request)
            except Exception as exc:
                error = exc
            elapsed = time.perf_counter() - start

            listeners: list[Callable[[AsciiArtifact], None]] = []
            with self._cond:
                self._last_run = time.monotonic()
                self._status.busy = False
                self._status.conversions += 1
                self._status.last_duration_s = elapsed
                if error is not None:
                    message = str(error) or type(error).__name__
                    self._status.last_error = message
                    self._log_event("convert_error", generation=generation, error=message)
                    logger.warning(
                        "conversion failed: %s",
                        error,
                        exc_info=None if isinstance(error, AsciifyError) else error,
                        extra={"event": "convert_error", "generation": generation},
                    )
                elif generation != self._generation:
                    self._status.discarded += 1
                    self._log_event("superseded", generation=generation, latest=self._generation)
                    logger.debug(
                        "discarded stale result", extra={"event": "superseded", "generation": generation}
                    )
                else:
                    self._artifact = artifact
                    self._status.completed = generation
                    self._status.last_error = None
                    listeners = list(self._listeners)
                    self._log_event(
                        "convert_ok",
                        generation=generation,
                        rows=artifact.row_count,
                        duration_s=elapsed,
                    )
                self._cond.notify_all()

            for callback in listeners:
                try:
                    callback(artifact)
                except Exception:
                    logger.exception(
                        "result listener failed",
                        extra={"event": "listener_error", "generation": generation},
                    )
