"""Configuration for reading and writing XML DOM documents.

A single immutable ``DomConfig`` controls the parser (declaration handling,
close-tag checking, nesting guard) and the writer (encoding, indentation,
trailing newline). Configuration is never read from the environment; it is
built in code or loaded from a JSON file.
"""

import json
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

MISMATCH_POLICIES = ("ignore", "warn", "error")

_FIELD_TYPES = {
    "encoding": str,
    "indent": str,
    "trailing_newline": bool,
    "skip_declarations": bool,
    "mismatched_close": str,
}


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class DomConfig:
    """Settings shared by the parser, the renderer and the document API.

    Thread-safe due to frozen dataclass implementation.
    """

    encoding: str = "utf-8"
    indent: str = "\t"
    trailing_newline: bool = False
    skip_declarations: bool = True
    mismatched_close: str = "warn"
    max_depth: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        for field_name, expected in _FIELD_TYPES.items():
            value = getattr(self, field_name)
            if not isinstance(value, expected):
                raise ConfigValidationError(
                    f"{field_name} must be {expected.__name__}, got {type(value).__name__}",
                    field_name,
                )
        if self.max_depth is not None and (
            isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int)
        ):
            raise ConfigValidationError(
                f"max_depth must be int or None, got {type(self.max_depth).__name__}",
                "max_depth",
            )
        if not self.encoding:
            raise ConfigValidationError("encoding cannot be empty", "encoding")
        try:
            "".encode(self.encoding)
        except LookupError as e:
            raise ConfigValidationError(
                f"unknown encoding {self.encoding!r}",
                "encoding",
                suggestions=["utf-8", "latin-1"],
            ) from e
        if self.indent.strip():
            raise ConfigValidationError(
                "indent must contain only whitespace", "indent",
                suggestions=["\\t", "two or four spaces"],
            )
        if self.mismatched_close not in MISMATCH_POLICIES:
            raise ConfigValidationError(
                f"mismatched_close must be one of {MISMATCH_POLICIES}",
                "mismatched_close",
            )
        if self.max_depth is not None and self.max_depth <= 0:
            raise ConfigValidationError("max_depth must be > 0 or None", "max_depth")

    def override(self, **kwargs: Any) -> "DomConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Keyword arguments for configuration fields to override

        Returns:
            New DomConfig instance with overrides applied
        """
        unknown = set(kwargs) - set(self.__dataclass_fields__)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {sorted(unknown)}",
                sorted(unknown)[0],
            )
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DomConfig":
        """Create configuration from dictionary, ignoring unknown keys."""
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)

    @classmethod
    def from_json(cls, json_str: str) -> "DomConfig":
        """Create configuration from JSON string."""
        data = json.loads(json_str)
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "DomConfig":
        """Load configuration from a JSON file."""
        path = Path(config_path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read configuration file {path}: {e}") from e
        try:
            return cls.from_json(text)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid JSON in {path}: {e}") from e

    # Preset factory methods
    @classmethod
    def default(cls) -> "DomConfig":
        """Tab indentation, tolerant close-tag checking."""
        return cls()

    @classmethod
    def strict(cls) -> "DomConfig":
        """Reject declarations, mismatched close names and very deep nesting."""
        return cls(skip_declarations=False, mismatched_close="error", max_depth=512)

    @classmethod
    def with_spaces(cls, width: int = 2) -> "DomConfig":
        """Indent rendered output with ``width`` spaces instead of tabs."""
        if width < 0:
            raise ConfigValidationError("width must be >= 0", "indent")
        return cls(indent=" " * width)
