"""
ExpirationMixin for automatic expiration timestamps.

Uses the table's ``expires`` option: ``{"field": name, "after": seconds}``.
The field receives an epoch-seconds integer, the format DynamoDB TTL
attributes use.
"""

import time
from collections.abc import Sized
from typing import Any

from restmachine_document.models.hooks import before_save


def is_blank(value: Any) -> bool:
    """True for None, whitespace-only strings, and empty collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Sized):
        return len(value) == 0
    return False


class ExpirationMixin:
    """
    Mixin that fills in an expiration field.

    Example:
        >>> class Session(Document, table={"expires": {"field": "expire_at", "after": 3600}}):
        ...     expire_at = Field("integer")
        >>> session = Session.create(id="s1")
        >>> session.expire_at - int(time.time()) <= 3600
        True
    """

    @before_save
    def set_expires_field(self: Any) -> None:
        """Set the expiration field to now + ``after`` if it is blank."""
        options = type(self).table_options.expires
        if options is None:
            return

        if is_blank(self.read_attribute(options.field)):
            self.write_attribute(options.field, int(time.time()) + options.after)
