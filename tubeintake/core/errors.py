from __future__ import annotations


class StructuralError(ValueError):
    """The input's shape could not be read: no usable column, or an unreadable source."""

    def __init__(self, message: str) -> None:
        self.message = str(message or "").strip() or "Unreadable input"
        super().__init__(self.message)


class ResolutionError(RuntimeError):
    pass
