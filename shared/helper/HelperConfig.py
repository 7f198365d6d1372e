"""Environment configuration for the judicial archive bridge."""

import logging
import os
from typing import Any

_TRUTHY = ("true", "1", "yes")


class HelperConfig:
    """Typed access to environment variables, plus the application logger.

    Keys are case-insensitive. An empty variable counts as unset.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def _read(self, key: str, default: Any) -> tuple[str | None, str]:
        """Return (stripped raw value or None, normalized key); raise if unset without default."""
        key = key.upper()
        raw = (os.getenv(key) or "").strip() or None
        if raw is None and default is None:
            raise ValueError(f"Environment variable '{key}' is not set.")
        return raw, key

    def get_string_val(self, key: str, default: str | None = None) -> str:
        """Read a string environment variable.

        Args:
            key (str): Environment variable name.
            default (str | None): Returned when the variable is unset.

        Returns:
            str: The value without surrounding whitespace.

        Raises:
            ValueError: If the variable is unset and no default is given.
        """
        raw, _ = self._read(key, default)
        return default if raw is None else raw

    def get_number_val(self, key: str, default: float | int | None = None) -> float | int:
        """Read an int (or a float, when the value has a decimal point).

        Raises:
            ValueError: If unset without default, or not a number.
        """
        raw, key = self._read(key, default)
        if raw is None:
            return default
        try:
            return float(raw) if "." in raw else int(raw)
        except ValueError:
            raise ValueError(f"Environment variable '{key}' is not a valid number: '{raw}'.")

    def get_bool_val(self, key: str, default: bool | None = None) -> bool:
        """Read a flag; "true", "1" and "yes" are true, anything else false."""
        raw, _ = self._read(key, default)
        return default if raw is None else raw.lower() in _TRUTHY

    def get_list_val(self, key: str, default: list[str] | None = None, separator: str = ",") -> list[str]:
        """Read a list written either "a,b" or "[a,b]". Blank elements are dropped."""
        raw, _ = self._read(key, default)
        if raw is None:
            return default
        if raw.startswith("[") and raw.endswith("]"):
            raw = raw[1:-1]
        return [element.strip() for element in raw.split(separator) if element.strip()]

    def get_logger(self) -> logging.Logger:
        return self._logger
