"""Exceptions raised by the analytics core."""

from __future__ import annotations


class WeightdashError(Exception):
    """Base class for weightdash errors."""


class EmptyInputError(WeightdashError):
    """Raised when a computation needs at least one valid entry."""


class ImportSchemaError(WeightdashError):
    """Raised when an imported sheet lacks mandatory columns."""

    def __init__(self, missing_columns: list[str]):
        self.missing_columns = list(missing_columns)
        super().__init__(
            "Missing required columns in Weight Data sheet: "
            + ", ".join(self.missing_columns)
        )
