"""Data models for the placeholder mapping system."""

from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MappingTable(BaseModel):
    """Resolved placeholder -> replacement associations for one run (read-only)."""

    model_config = ConfigDict(frozen=True)

    entries: Mapping[str, str] = Field(default_factory=dict, validate_default=True)  # "_typeKey_" -> "int"
    keys: tuple[str, ...] = ()  # Literal-case tokens, caller order
    capitalized: Mapping[str, str] = Field(default_factory=dict, validate_default=True)  # "_typeKey_" -> "_TypeKey_"

    @field_validator("entries", "capitalized", mode="after")
    @classmethod
    def freeze_mapping(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    def lookup(self, token: str) -> str | None:
        """Return the replacement for an exact token spelling, if any."""
        return self.entries.get(token)

    def __contains__(self, token: str) -> bool:
        return token in self.entries

    def __len__(self) -> int:
        return len(self.entries)


class ReplacementRecord(BaseModel):
    """Replacements actually applied while processing one file."""

    replacements: dict[str, str] = Field(default_factory=dict)

    def record(self, token: str, value: str) -> None:
        self.replacements[token] = value

    def get(self, token: str) -> str | None:
        return self.replacements.get(token)

    def __contains__(self, token: str) -> bool:
        return token in self.replacements

    def __len__(self) -> int:
        return len(self.replacements)


class GensmithError(Exception):
    """Base class for every fatal gensmith error."""

    pass


class ConfigError(GensmithError):
    """Exception raised for a malformed key=value pair or setting."""

    pass


class UnknownPlaceholderError(GensmithError):
    """Exception raised when a placeholder has no mapping."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"no mapping for {token!r}")
