"""
Errors raised by the todos browser.

Each error carries a technical ``message`` for the log and a ``user_message``
that is safe to put on the page. Subclasses set ``default_user_message`` so
call sites only pass the detail.
"""

from typing import Optional


class TodoViewError(Exception):
    """Base for gateway and navigation errors."""

    default_user_message = "Something went wrong with the todo list."

    def __init__(
        self,
        message: str,
        user_message: Optional[str] = None,
        recoverable: bool = True,
    ):
        self.message = message
        self.user_message = user_message or self.default_user_message
        # Recoverable errors leave the page usable; a reload may succeed.
        self.recoverable = recoverable
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, recoverable={self.recoverable})"
