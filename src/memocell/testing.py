# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""Assertions for the ``__eq__``/``__hash__`` contract of value classes."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, final

from typing_extensions import Self


@dataclass(frozen=True)
class _Argument:
    original: Any
    changed: Any
    expect_equality: bool


@final
class EqualsAndHashArguments:
    """
    Declares constructor arguments for :func:`assert_equals_and_hash`.

    Each argument has an original and a changed value. ``expect_equality``
    tells whether an object built with the changed value should still be equal
    to the one built with the original value.
    """

    def __init__(self) -> None:
        self._arguments: list[_Argument] = []

    def add(
        self, original: Any, changed: Any, *, expect_equality: bool = False
    ) -> Self:
        self._arguments.append(_Argument(original, changed, expect_equality))

        return self

    def __len__(self) -> int:
        return len(self._arguments)

    @property
    def original(self) -> list[Any]:
        return [a.original for a in self._arguments]

    def changed_at(self, index: int) -> list[Any]:
        """Returns the original arguments with the one at ``index`` changed."""
        args = self.original

        args[index] = self._arguments[index].changed

        return args

    def expects_equality_at(self, index: int) -> bool:
        return self._arguments[index].expect_equality


def assert_equals_and_hash(
    constructor: Callable[[Sequence[Any]], object], arguments: EqualsAndHashArguments
) -> None:
    """
    Asserts that objects built by ``constructor`` implement ``__eq__`` and
    ``__hash__`` as declared by ``arguments``.

    ``constructor`` is called with the original arguments twice and once per
    argument with that argument changed. Besides, the object is compared to
    ``None``, to ``True`` and to itself.

    :raises ValueError: if ``arguments`` is empty.
    :raises AssertionError: if the contract is violated.
    """
    if len(arguments) == 0:
        raise ValueError("`arguments` must declare at least one argument.")

    obj = constructor(arguments.original)

    hash_code = hash(obj)

    _check(obj != None, "equals None")  # noqa: E711
    _check(obj != True, "equals True")  # noqa: E712
    _check(obj == obj, "equals self")

    same_obj = constructor(arguments.original)

    _check(obj == same_obj, "equals original arguments")
    _check(hash_code == hash(same_obj), "hash original arguments")

    for index in range(len(arguments)):
        new_obj = constructor(arguments.changed_at(index))

        nr = index + 1

        if arguments.expects_equality_at(index):
            _check(obj == new_obj, f"equals changed argument {nr}")
            _check(hash_code == hash(new_obj), f"hash changed argument {nr}")
        else:
            _check(obj != new_obj, f"not equals changed argument {nr}")
            _check(hash_code != hash(new_obj), f"hash changed argument {nr}")


def assert_equals_and_hash_for_class(
    kls: type[Any], arguments: EqualsAndHashArguments
) -> None:
    """
    Same as :func:`assert_equals_and_hash`, but constructs instances by calling
    ``kls`` with the arguments as positional arguments.
    """
    assert_equals_and_hash(lambda args: kls(*args), arguments)


def _check(condition: object, message: str) -> None:
    # Raised explicitly; `assert` statements are stripped under `python -O`.
    if not condition:
        raise AssertionError(message)
