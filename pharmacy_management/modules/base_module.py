from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QObject, Signal

from ..utils.loggers import get_logger


class BaseModule(QObject):
    """
    Non-visual feature controller.

    Views bind to the controller's table model and listen to:
      - changed(): the underlying collection was mutated; re-read it
      - error(str): an intent was rejected; the message is user-facing
    """

    changed = Signal()
    error = Signal(str)

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.log = get_logger(f"{__package__}.{type(self).__name__}")
        self.last_error_message: Optional[str] = None
        self.last_field_errors: dict[str, str] = {}

    def refresh(self) -> None:
        raise NotImplementedError

    def _reject(self, message: str) -> None:
        self.last_error_message = message
        self.log.warning("rejected: %s", message)
        self.error.emit(message)

    def _reject_fields(self, errors: dict[str, str]) -> None:
        # First message is enough for the toast; the full dict stays on the controller
        self.last_field_errors = dict(errors)
        self._reject(next(iter(errors.values())))

    def _ok(self) -> None:
        self.last_error_message = None
        self.last_field_errors = {}
