"""
Console widget for displaying logs.
"""
from datetime import datetime
from queue import Empty, Queue
from typing import Set

from PySide6.QtCore import Slot
from PySide6.QtGui import QColor, QFont, QTextCharFormat, QTextCursor
from PySide6.QtWidgets import QGroupBox, QPlainTextEdit, QVBoxLayout

# Log levels hidden from the console (lower-case level names)
CONSOLE_SUPPRESSED_LEVELS: Set[str] = {"debug"}

ERROR_COLOR = QColor(248, 113, 113)
WARNING_COLOR = QColor(251, 191, 36)
SUCCESS_COLOR = QColor(52, 211, 153)


class ConsoleWidget(QGroupBox):
    def __init__(self, parent=None):
        super().__init__("Console Log", parent)

        self.suppressed_levels: Set[str] = CONSOLE_SUPPRESSED_LEVELS.copy()

        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)

        self.text_edit = QPlainTextEdit()
        self.text_edit.setReadOnly(True)
        self.text_edit.setLineWrapMode(QPlainTextEdit.LineWrapMode.WidgetWidth)
        self.text_edit.setMaximumBlockCount(1000)
        self.text_edit.setFont(QFont("Menlo, Consolas, monospace"))
        layout.addWidget(self.text_edit)

        self.format_info = QTextCharFormat()
        self.format_error = QTextCharFormat()
        self.format_error.setForeground(ERROR_COLOR)
        self.format_warning = QTextCharFormat()
        self.format_warning.setForeground(WARNING_COLOR)
        self.format_success = QTextCharFormat()
        self.format_success.setForeground(SUCCESS_COLOR)

    @Slot(str, str)
    def append_log(self, level: str, message: str):
        """Appends a log message with color coding based on level."""
        if level.lower() in self.suppressed_levels:
            return

        cursor = self.text_edit.textCursor()
        cursor.movePosition(QTextCursor.MoveOperation.End)

        fmt = self.format_info
        if level.lower() in ("error", "critical"):
            fmt = self.format_error
        elif level.lower() in ("warning", "warn"):
            fmt = self.format_warning
        elif level.lower() in ("success", "ok"):
            fmt = self.format_success

        timestamp = datetime.now().strftime("%H:%M:%S")
        cursor.insertText(f"[{timestamp}] {message}\n", fmt)
        self.text_edit.setTextCursor(cursor)
        self.text_edit.ensureCursorVisible()

    def drain(self, log_queue: Queue) -> int:
        """Append every (message, level) pair waiting in the queue."""
        count = 0
        while True:
            try:
                message, level = log_queue.get_nowait()
            except Empty:
                return count
            self.append_log(level, message)
            count += 1

    def clear(self) -> None:
        self.text_edit.clear()
