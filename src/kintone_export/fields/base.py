"""Base class for field type handlers."""

from abc import ABC, abstractmethod
from typing import Any

DEFAULT_DELIMITER = ","


class BaseFieldTypeHandler(ABC):
    """
    Base class for field type handlers.

    Each kintone field type implements this class to turn the raw API value
    into a typed payload and to render that payload as a display string.

    Handlers never raise on unexpected values: ``deserialize`` falls back to
    ``default()`` and ``format_display`` falls back to an empty string.

    Example:
        class MyFieldHandler(BaseFieldTypeHandler):
            field_type = "MY_TYPE"

            @classmethod
            def deserialize(cls, value: Any) -> Any:
                return str(value) if value is not None else cls.default()

            @classmethod
            def format_display(cls, value: Any, delimiter: str = DEFAULT_DELIMITER) -> str:
                return value or ""
    """

    field_type: str

    @classmethod
    @abstractmethod
    def deserialize(cls, value: Any) -> Any:
        """
        Convert an API value to its typed payload.

        Args:
            value: The ``value`` member of a ``{"type", "value"}`` field object

        Returns:
            Typed Python value
        """

    @classmethod
    @abstractmethod
    def format_display(cls, value: Any, delimiter: str = DEFAULT_DELIMITER) -> str:
        """
        Format a typed payload for display.

        Args:
            value: Typed value produced by ``deserialize``
            delimiter: Separator for multi-valued fields

        Returns:
            Display string
        """

    @classmethod
    def default(cls) -> Any:
        """Get the value used when the API value is missing or malformed."""
        return None

    @staticmethod
    def _join(values: Any, delimiter: str) -> str:
        """Join a list of strings, tolerating non-list input."""
        if not isinstance(values, list):
            return ""
        return delimiter.join(str(v) for v in values)
