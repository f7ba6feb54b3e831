"""Single-owner wrapper around an opaque native value.

A :class:`Handle` owns zero or one value returned by a foreign library and
releases it exactly once: when :meth:`Handle.close` is called explicitly,
when a ``with`` block around it exits, or when its value is replaced
through :meth:`Handle.set`. What "empty" means and how a value is released
is supplied by a :class:`HandleTraits` policy, so every native resource
kind shares one implementation of the ownership rules.

Ownership moves, it is never duplicated: :meth:`Handle.move`,
:meth:`Handle.detach` and :meth:`Handle.swap` are the only ways a value
leaves a handle, and copying or pickling a handle is rejected.
"""

from __future__ import annotations

import ctypes
import logging
import warnings
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class HandleTraits(Generic[T]):
    """Policy describing one kind of native value.

    Subclasses override :meth:`close` and, for non-pointer values,
    ``type`` and :meth:`invalid`.
    """

    type: Any = ctypes.c_void_p

    def invalid(self) -> T | None:
        """Sentinel meaning "no value owned"."""
        return None

    def close(self, value: T) -> None:
        """Release ``value`` back to the foreign library."""
        raise NotImplementedError


class Handle(Generic[T]):
    """Owns at most one native value described by ``traits``.

    Args:
        traits: Policy supplying the sentinel and the release action.
        value: Already-acquired value to take ownership of. Defaults to the
            sentinel, producing an empty handle.
    """

    def __init__(self, traits: HandleTraits[T], value: T | None = None) -> None:
        self._traits = traits
        self._value = traits.type(traits.invalid() if value is None else value)

    @property
    def traits(self) -> HandleTraits[T]:
        return self._traits

    def __bool__(self) -> bool:
        return self._value.value != self._traits.invalid()

    def __repr__(self) -> str:
        state = f"value={self._value.value!r}" if self else "empty"
        return f"<{type(self).__name__} {type(self._traits).__name__} {state}>"

    def get(self) -> T | None:
        """Return the owned value without giving up ownership."""
        return self._value.value

    def set(self) -> Any:
        """Release the current value and return an output slot for a new one.

        The returned ctypes pointer is meant to be passed straight to a
        foreign function that writes a new value into it.
        """
        self.close()
        return ctypes.pointer(self._value)

    def close(self) -> None:
        """Release the owned value, if any. Safe to call repeatedly."""
        if not self:
            return
        value = self._value.value
        # Clear first so a failing release action can never run twice.
        self._value.value = self._traits.invalid()
        self._traits.close(value)

    def detach(self) -> T | None:
        """Give up ownership and return the raw value; the handle becomes empty."""
        value = self._value.value
        self._value.value = self._traits.invalid()
        return value

    def move(self) -> Handle[T]:
        """Transfer ownership into a new handle; this one becomes empty."""
        return type(self)(self._traits, self.detach())

    def swap(self, other: Handle[T]) -> None:
        """Exchange owned values with ``other``."""
        if other._traits is not self._traits:
            msg = f"Cannot swap handles with different traits: {self._traits!r} and {other._traits!r}"
            raise TypeError(msg)
        mine = self._value.value
        self._value.value = other._value.value
        other._value.value = mine

    def __enter__(self) -> Handle[T]:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __copy__(self) -> Handle[T]:
        msg = f"{type(self).__name__} cannot be copied; use move()"
        raise TypeError(msg)

    def __deepcopy__(self, memo: dict[int, Any]) -> Handle[T]:
        return self.__copy__()

    def __reduce__(self) -> Any:
        msg = f"{type(self).__name__} cannot be pickled"
        raise TypeError(msg)

    def __del__(self) -> None:
        # Only reachable if the owner forgot close(); mirrors io's behavior.
        value = getattr(self, "_value", None)
        if value is None or not self:
            return
        warnings.warn(f"unclosed {self!r}", ResourceWarning, stacklevel=2)
        logger.warning("Releasing unclosed %r during garbage collection", self)
        self.close()
