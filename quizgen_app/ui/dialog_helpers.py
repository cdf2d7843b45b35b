"""Helper functions for common dialog patterns in the desktop client."""

from __future__ import annotations

from PySide6.QtGui import QFont
from PySide6.QtWidgets import QMessageBox, QWidget


def _apply_optional_font(widget: QWidget, font_point_size: int | None) -> None:
    """Apply font size to a widget when requested."""
    if font_point_size is None or font_point_size <= 0:
        return

    font: QFont = widget.font()
    font.setPointSize(font_point_size)
    widget.setFont(font)


def _ask(parent: QWidget, title: str, message: str) -> bool:
    reply = QMessageBox.question(
        parent,
        title,
        message,
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No,
    )
    return reply == QMessageBox.Yes


def confirm_submit(parent: QWidget, unanswered_count: int) -> bool:
    """Ask before submitting; mentions unanswered questions when there are any.

    Args:
        parent: Parent widget for the dialog
        unanswered_count: Number of questions without a selected option

    Returns:
        True if user confirmed, False otherwise
    """
    if unanswered_count > 0:
        message = (
            f"You have {unanswered_count} unanswered question(s). "
            "Unanswered questions score zero. Submit anyway?"
        )
    else:
        message = "Submit your answers now?"
    return _ask(parent, "Submit Quiz", message)


def confirm_abandon_quiz(parent: QWidget) -> bool:
    """Ask before discarding a quiz that is still running.

    Returns:
        True if user confirmed, False otherwise
    """
    return _ask(
        parent,
        "Quiz in progress",
        "Leaving now discards the current quiz and its answers. Continue?",
    )


def show_error(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.critical(parent, title, message)


def show_info(
    parent: QWidget,
    title: str,
    message: str,
    *,
    font_point_size: int | None = None,
) -> None:
    """Show information dialog.

    Args:
        parent: Parent widget for the dialog
        title: Dialog title
        message: Information message
        font_point_size: Optional point size for the dialog text
    """
    msg_box = QMessageBox(parent)
    msg_box.setIcon(QMessageBox.Information)
    msg_box.setWindowTitle(title)
    msg_box.setText(message)
    msg_box.setStandardButtons(QMessageBox.Ok)
    _apply_optional_font(msg_box, font_point_size)
    if font_point_size is not None and font_point_size > 0:
        msg_box.setStyleSheet(
            f"QLabel {{ font-size: {font_point_size}pt; }}\n"
            f"QPushButton {{ font-size: {font_point_size}pt; }}"
        )
    msg_box.exec()


def show_warning(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.warning(parent, title, message)
