# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from memocell.utils.lazy import Lazy

T = TypeVar("T")


def constant(value: T) -> T:
    """
    Returns ``value`` unchanged.

    Binding a module-level name to a call instead of a literal marks it as a
    computed value, e.g. ``DEFAULT_TIMEOUT = constant(30)``.
    """
    return value


def lazy(factory: Callable[[], T]) -> Lazy[T]:
    """
    Returns a :class:`Lazy` calling ``factory`` at most once successfully.

    The returned object is itself a zero-argument callable, so it can be used
    as a lazy field::

        _config = lazy(load_config)

        def get_timeout() -> int:
            return _config()["timeout"]
    """
    return Lazy(factory)
