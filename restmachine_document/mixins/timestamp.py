"""
TimestampMixin for automatic created_at and updated_at tracking.

The fields themselves are declared by the document schema when timestamps
are enabled; these hooks fill them in.
"""

from datetime import datetime
from typing import Any

from restmachine_document.models.hooks import before_create, before_save

CREATED_AT = "created_at"
UPDATED_AT = "updated_at"
TIMESTAMP_FIELDS = (CREATED_AT, UPDATED_AT)


class TimestampMixin:
    """
    Mixin that maintains created_at and updated_at.

    - created_at: set once, when the record is created, unless already set
    - updated_at: set on every save, unless it was written explicitly since
      the last save or the save was made with ``touch=False``

    Example:
        >>> user = User.create(id="1", name="Alice")
        >>> user.created_at is not None
        True
        >>> user.save(touch=False)  # updated_at unchanged
    """

    def _current_time(self) -> datetime:
        return datetime.now(type(self).config.tzinfo)  # type: ignore[attr-defined]

    @before_create
    def set_created_at(self: Any) -> None:
        """Set created_at if timestamps are enabled and it is unset."""
        if type(self).timestamps_enabled() and self.read_attribute(CREATED_AT) is None:
            self.write_attribute(CREATED_AT, self._current_time())

    @before_save
    def set_updated_at(self: Any) -> None:
        """Set updated_at unless it was already changed or touching is disabled."""
        # _touch_record is False only while saving with touch=False
        if (
            type(self).timestamps_enabled()
            and not self.attribute_changed(UPDATED_AT)
            and self._touch_record is not False
        ):
            self.write_attribute(UPDATED_AT, self._current_time())
