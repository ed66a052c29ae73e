# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Generic, TypeVar, cast, final

from memocell.error import InvalidOperationError
from memocell.logging import log

T_co = TypeVar("T_co", covariant=True)


@final
class Lazy(Generic[T_co]):
    """
    Holds a value that is constructed by ``factory`` on first retrieval.

    ``factory`` is called at most once successfully, no matter how many threads
    call :meth:`retrieve` concurrently. Threads are synchronized on a lock owned
    by the instance while ``factory`` runs. If ``factory`` raises, nothing is
    stored and the next retrieval calls it again.

    ``None`` is a regular value: a factory returning ``None`` is not called
    again.
    """

    _factory: Callable[[], T_co] | None
    _factory_name: str
    _value: T_co | None
    _constructed: bool
    _lock: threading.Lock
    _constructing_thread: int | None

    def __init__(self, factory: Callable[[], T_co]) -> None:
        if not callable(factory):
            raise TypeError(
                f"`factory` must be callable, but is of type `{type(factory)}` instead."
            )

        self._factory = factory
        self._factory_name = _get_name(factory)
        self._value = None
        self._constructed = False
        self._lock = threading.Lock()
        self._constructing_thread = None

    def retrieve(self) -> T_co:
        """
        :raises InvalidOperationError: if called by ``factory`` itself.
        """
        # Set only while `_lock` is held.
        if self._constructing_thread == threading.get_ident():
            raise InvalidOperationError(
                f"`{self._factory_name}` cannot retrieve the value it is constructing."
            )

        with self._lock:
            if not self._constructed:
                self._construct()

            return cast(T_co, self._value)

    def _construct(self) -> None:
        factory = cast(Callable[[], T_co], self._factory)

        self._constructing_thread = threading.get_ident()

        try:
            value = factory()
        except Exception as ex:
            log.debug(
                "`{}` failed. The value is not stored.", self._factory_name, exc=ex
            )

            raise
        finally:
            self._constructing_thread = None

        self._value = value

        self._constructed = True

        # The factory is never called again; release what it references.
        self._factory = None

        log.debug("Value of `{}` constructed.", self._factory_name)

    def __call__(self) -> T_co:
        return self.retrieve()

    @property
    def is_constructed(self) -> bool:
        return self._constructed

    def __repr__(self) -> str:
        state = "constructed" if self._constructed else "not constructed"

        return f"Lazy({self._factory_name}, {state})"


def _get_name(factory: Callable[..., object]) -> str:
    name = getattr(factory, "__qualname__", None)
    if name is None:
        return repr(factory)

    return str(name)
