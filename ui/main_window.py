"""
Main window: left sidebar (variant menu, start/stop, loading state), center video, right tabs.
"""

from __future__ import annotations

import logging

import numpy as np
from PySide6.QtCore import Qt
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from overlay.surface import CvSurface
from perception.variants import VARIANT_INFO, Variant
from pipeline.config import AppConfig
from pipeline.controller import PipelineController
from pipeline.errors import PipelineError
from pipeline.qt_runtime import QtFrameClock, QtTaskRunner
from pipeline.utils import FrameStats
from ui.panels import LogsPanel, PerformancePanel, QtLogHandler

logger = logging.getLogger(__name__)


class VideoView(QLabel):
    """Displays composited BGR frames, scaled to fit."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setMinimumSize(640, 480)
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setStyleSheet("background-color: #1e1e1e; color: #888;")
        self.clear()

    def show_frame(self, frame_bgr: np.ndarray) -> None:
        h, w = frame_bgr.shape[:2]
        frame = np.ascontiguousarray(frame_bgr)
        qimg = QImage(frame.data, w, h, 3 * w, QImage.Format.Format_BGR888)
        self.setPixmap(QPixmap.fromImage(qimg).scaled(
            self.size(),
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        ))

    def clear(self) -> None:
        super().clear()
        self.setText("No video")


class MainWindow(QWidget):
    """Host shell: picks a variant and shows the live pipeline for it."""

    def __init__(self, config: AppConfig | None = None) -> None:
        super().__init__()
        self.setWindowTitle("Live Perception")
        self._config = config or AppConfig()

        layout = QHBoxLayout(self)
        # --- Left sidebar ---
        sidebar = QWidget()
        sidebar_layout = QVBoxLayout(sidebar)
        sidebar_layout.addWidget(QLabel("Choose a detection type to get started"))
        self._variant_list = QListWidget()
        for variant, info in VARIANT_INFO.items():
            item = QListWidgetItem(info.display_name)
            item.setToolTip(info.description)
            item.setData(Qt.ItemDataRole.UserRole, variant.value)
            self._variant_list.addItem(item)
        self._variant_list.setCurrentRow(0)
        self._variant_list.currentRowChanged.connect(self._on_variant_changed)
        sidebar_layout.addWidget(self._variant_list)
        self._start_stop_btn = QPushButton("Start")
        self._start_stop_btn.clicked.connect(self._on_start_stop)
        sidebar_layout.addWidget(self._start_stop_btn)
        self._loading_label = QLabel()
        self._loading_label.setWordWrap(True)
        sidebar_layout.addWidget(self._loading_label)
        self._status_label = QLabel()
        self._status_label.setWordWrap(True)
        self._status_label.setStyleSheet("color: #c0392b;")
        sidebar_layout.addWidget(self._status_label)
        footer = QLabel("Powered by Google MediaPipe")
        footer.setStyleSheet("color: #666; font-size: 11px;")
        sidebar_layout.addStretch()
        sidebar_layout.addWidget(footer)
        layout.addWidget(sidebar)

        # --- Center: title + video ---
        center = QWidget()
        center_layout = QVBoxLayout(center)
        self._title_label = QLabel()
        self._title_label.setStyleSheet("font-size: 18px; font-weight: bold;")
        center_layout.addWidget(self._title_label)
        self._video_view = VideoView()
        center_layout.addWidget(self._video_view, stretch=1)
        layout.addWidget(center, stretch=1)

        # --- Right: tabs (Logs, Performance) ---
        tabs = QTabWidget()
        self._logs_panel = LogsPanel()
        tabs.addTab(self._logs_panel, "Logs")
        self._performance_panel = PerformancePanel()
        tabs.addTab(self._performance_panel, "Performance")
        layout.addWidget(tabs)

        self._log_handler = QtLogHandler(self._logs_panel)
        logging.getLogger().addHandler(self._log_handler)

        self._controller = PipelineController(
            CvSurface(),
            self._video_view,
            QtFrameClock(self._config.frame_interval_ms, self),
            QtTaskRunner(self),
            config=self._config,
            on_ready=self._on_ready,
            on_error=self._on_error,
            on_loading=self._on_loading,
            on_stats=self._performance_panel.update_stats,
        )
        logger.info("Application started. Select a detection type, then Start.")
        self.resize(1200, 700)

    def _selected_variant(self) -> Variant | None:
        item = self._variant_list.currentItem()
        if item is None:
            return None
        return Variant(item.data(Qt.ItemDataRole.UserRole))

    def _has_session(self) -> bool:
        session = self._controller.session
        return session is not None and not session.closing

    def _is_active(self) -> bool:
        return self._has_session() and not self._controller.session.inert

    def _start(self, variant: Variant) -> None:
        info = VARIANT_INFO[variant]
        self._status_label.clear()
        self._title_label.setText(info.title)
        self._performance_panel.reset()
        self._controller.start(variant)
        self._start_stop_btn.setText("Stop")

    def _stop(self) -> None:
        self._controller.stop()
        self._title_label.clear()
        self._performance_panel.reset()
        self._start_stop_btn.setText("Start")

    def _on_start_stop(self) -> None:
        if self._is_active():
            self._stop()
            return
        variant = self._selected_variant()
        if variant is not None:
            self._start(variant)

    def _on_variant_changed(self, _row: int) -> None:
        # Switching while running: tear down, then start the new variant
        variant = self._selected_variant()
        if variant is not None and self._has_session():
            self._start(variant)

    def _on_loading(self, loading: bool) -> None:
        session = self._controller.session
        if loading and session is not None:
            self._loading_label.setText(VARIANT_INFO[session.variant].loading_message)
        else:
            self._loading_label.clear()

    def _on_ready(self, variant: Variant) -> None:
        logger.info("%s ready", VARIANT_INFO[variant].display_name)

    def _on_error(self, error: PipelineError) -> None:
        self._status_label.setText(f"Error: {error}")
        self._start_stop_btn.setText("Start")

    def closeEvent(self, event) -> None:
        self._controller.shutdown()
        logging.getLogger().removeHandler(self._log_handler)
        event.accept()
