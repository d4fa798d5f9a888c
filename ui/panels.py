"""
Right-side panels: Logs and Performance, plus the logging handler that feeds the Logs panel.
"""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, Signal
from PySide6.QtWidgets import QLabel, QPlainTextEdit, QVBoxLayout, QWidget

from pipeline.utils import FrameStats


class LogsPanel(QWidget):
    """Shows application and pipeline log messages and errors."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        self._text = QPlainTextEdit(self)
        self._text.setReadOnly(True)
        self._text.setMaximumBlockCount(2000)
        layout.addWidget(self._text)

    def append(self, message: str) -> None:
        self._text.appendPlainText(message)
        # Auto-scroll to bottom
        scrollbar = self._text.verticalScrollBar()
        scrollbar.setValue(scrollbar.maximum())

    def clear(self) -> None:
        self._text.clear()


class _LogBridge(QObject):
    message = Signal(str)


class QtLogHandler(logging.Handler):
    """Forwards log records to a LogsPanel; safe to use from worker threads."""

    def __init__(self, panel: LogsPanel, level: int = logging.INFO) -> None:
        super().__init__(level)
        self._bridge = _LogBridge()
        self._bridge.message.connect(panel.append)
        self.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s", "%H:%M:%S"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._bridge.message.emit(self.format(record))
        except Exception:  # noqa: BLE001
            self.handleError(record)


class PerformancePanel(QWidget):
    """Shows FPS, frame interval (ms), and rolling average of presented frames."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        self._fps_label = QLabel()
        self._interval_label = QLabel()
        self._rolling_label = QLabel()
        for w in (self._fps_label, self._interval_label, self._rolling_label):
            layout.addWidget(w)
        hint = QLabel("Frames are paced by inference: a slow model lowers FPS instead of dropping frames.")
        hint.setWordWrap(True)
        hint.setStyleSheet("color: #666; font-size: 11px;")
        layout.addWidget(hint)
        layout.addStretch()
        self.reset()

    def update_stats(self, stats: FrameStats) -> None:
        self._fps_label.setText(f"FPS: {stats.fps:.1f}")
        self._interval_label.setText(f"Frame interval (ms): {stats.interval_ms:.1f}")
        self._rolling_label.setText(f"Rolling avg (ms): {stats.rolling_avg_ms:.1f}")

    def reset(self) -> None:
        self._fps_label.setText("FPS: —")
        self._interval_label.setText("Frame interval (ms): —")
        self._rolling_label.setText("Rolling avg (ms): —")
