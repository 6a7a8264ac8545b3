"""
Hook decorators for the document lifecycle.

Mixins and document classes mark methods with these decorators; the marks
are collected when a document class is defined.
"""

from typing import Any, Callable, TypeVar

F = TypeVar('F', bound=Callable[..., Any])

HOOK_KINDS = ('before_create', 'before_save', 'after_save')


def before_create(func: F) -> F:
    """
    Decorator to mark a method as a before_create hook.

    Called before a new record is first written to the backend, after the
    before_save hooks.

    Example:
        >>> class TimestampMixin:
        ...     @before_create
        ...     def set_created_at(self):
        ...         ...
    """
    setattr(func, '_hook_kind', 'before_create')  # type: ignore[attr-defined]
    return func


def before_save(func: F) -> F:
    """
    Decorator to mark a method as a before_save hook.

    Called before every write to the backend.

    Example:
        >>> class ExpirationMixin:
        ...     @before_save
        ...     def set_expires_field(self):
        ...         ...
    """
    setattr(func, '_hook_kind', 'before_save')  # type: ignore[attr-defined]
    return func


def after_save(func: F) -> F:
    """
    Decorator to mark a method as an after_save hook.

    Called after the record has been written. Changes made here are not
    persisted unless the document is saved again.
    """
    setattr(func, '_hook_kind', 'after_save')  # type: ignore[attr-defined]
    return func


def collect_hooks(cls: type) -> dict[str, list[Callable[[Any], None]]]:
    """
    Collect marked hooks of a class and its bases.

    Bases come first, then each class in definition order. A method
    overridden in a subclass replaces the base's hook in place; an override
    without the mark removes it.

    Returns:
        Mapping of hook kind to hook functions
    """
    found: dict[str, Callable[[Any], None]] = {}
    for klass in reversed(cls.__mro__):
        for attr_name, attr in vars(klass).items():
            if attr_name.startswith('__'):
                continue
            if callable(attr) and getattr(attr, '_hook_kind', None) in HOOK_KINDS:
                found[attr_name] = attr
            elif attr_name in found:
                del found[attr_name]

    hooks: dict[str, list[Callable[[Any], None]]] = {kind: [] for kind in HOOK_KINDS}
    for hook in found.values():
        hooks[hook._hook_kind].append(hook)  # type: ignore[attr-defined]
    return hooks
