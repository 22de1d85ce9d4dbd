"""
Exceptions raised by the Minesweeper field.
"""


class MinefieldError(Exception):
    """Base class for field errors."""


class InvalidConfigurationError(MinefieldError, ValueError):
    """Field dimensions, mine count or mine layout cannot form a field."""


class OutOfRangeError(MinefieldError, IndexError):
    """Coordinates fall outside the field."""

    def __init__(self, row: int, column: int, rows: int, columns: int) -> None:
        super().__init__(
            f"Position ({row}, {column}) is outside the {rows}x{columns} field"
        )
        self.row = row
        self.column = column
