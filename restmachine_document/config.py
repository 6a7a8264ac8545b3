"""
Configuration for RestMachine Document.

Holds the process-wide defaults and the per-table options. Document classes
capture the configuration in effect when they are defined (or the one passed
explicitly with ``config=``), so later calls to ``configure()`` only affect
classes defined afterwards.
"""

from datetime import timezone, tzinfo
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field as PydanticField, field_validator


class DocumentConfig(BaseModel):
    """
    Global defaults for document classes.

    Attributes:
        timestamps: Declare and maintain ``created_at``/``updated_at`` by default
        time_zone: IANA zone name used for automatic timestamps
        inheritance_field: Default name of the single-table-inheritance field

    Example:
        >>> config = DocumentConfig(timestamps=False)
        >>> class Event(Document, config=config):
        ...     name = Field()
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    timestamps: bool = True
    time_zone: str = "UTC"
    inheritance_field: str = "type"

    @field_validator("time_zone")
    @classmethod
    def _check_time_zone(cls, value: str) -> str:
        if value != "UTC":
            try:
                ZoneInfo(value)
            except (ZoneInfoNotFoundError, ValueError) as e:
                raise ValueError(f"Unknown time zone: {value!r}") from e
        return value

    @property
    def tzinfo(self) -> tzinfo:
        """Time zone object for ``time_zone``."""
        if self.time_zone == "UTC":
            return timezone.utc
        return ZoneInfo(self.time_zone)


class ExpiresOptions(BaseModel):
    """Expiration settings: ``field`` is set to ``now + after`` seconds."""

    model_config = ConfigDict(frozen=True)

    field: str
    after: int = PydanticField(gt=0)


class TableOptions(BaseModel):
    """
    Options for a document's table.

    Attributes:
        name: Table name (defaults to the pluralized root class name)
        key: Name of the hash (primary) key field
        timestamps: Explicit per-table override of ``DocumentConfig.timestamps``
        expires: Expiration settings
        inheritance_field: Name of the single-table-inheritance field

    Unknown options are kept so that backends can read them.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    name: Optional[str] = None
    key: Optional[str] = None
    timestamps: Optional[bool] = None
    expires: Optional[ExpiresOptions] = None
    inheritance_field: Optional[str] = None


_config = DocumentConfig()


def get_config() -> DocumentConfig:
    """Return the current global configuration."""
    return _config


def configure(**options: Any) -> DocumentConfig:
    """
    Update the global configuration.

    Only document classes defined after this call see the new values.

    Args:
        **options: DocumentConfig fields to change

    Returns:
        The new configuration

    Example:
        >>> configure(timestamps=False, time_zone="Europe/Berlin")
    """
    global _config
    _config = DocumentConfig.model_validate({**_config.model_dump(), **options})
    return _config


def reset_config() -> DocumentConfig:
    """Restore the default configuration."""
    global _config
    _config = DocumentConfig()
    return _config
