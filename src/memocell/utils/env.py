# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from typing import final, overload

from typing_extensions import override

from memocell.error import FormatError


class Environment(ABC):
    @overload
    def maybe_get(self, name: str) -> str | None: ...

    @overload
    def maybe_get(self, name: str, default: str) -> str: ...

    @abstractmethod
    def maybe_get(self, name: str, default: str | None = None) -> str | None: ...


class EnvironmentVariableError(Exception):
    def __init__(self, var_name: str, message: str) -> None:
        super().__init__(message)

        self.var_name = var_name


@final
class StandardEnvironment(Environment):
    @overload
    def maybe_get(self, name: str) -> str | None: ...

    @overload
    def maybe_get(self, name: str, default: str) -> str: ...

    @override
    def maybe_get(self, name: str, default: str | None = None) -> str | None:
        return os.environ.get(name, default)


@final
class InProcEnvironment(Environment):
    """Holds variables in a dictionary; leaves ``os.environ`` untouched."""

    def __init__(self, variables: dict[str, str] | None = None) -> None:
        self._variables = {} if variables is None else dict(variables)

    @overload
    def maybe_get(self, name: str) -> str | None: ...

    @overload
    def maybe_get(self, name: str, default: str) -> str: ...

    @override
    def maybe_get(self, name: str, default: str | None = None) -> str | None:
        return self._variables.get(name, default)


LOG_LEVEL_VAR = "MEMOCELL_LOG_LEVEL"


def get_log_level(env: Environment) -> int:
    """
    :raises EnvironmentVariableError:
    """
    try:
        level = _maybe_get_log_level(env, LOG_LEVEL_VAR)
    except FormatError as ex:
        raise EnvironmentVariableError(
            LOG_LEVEL_VAR, f"`{LOG_LEVEL_VAR}` environment variable is invalid."
        ) from ex

    if level is None:
        return logging.INFO

    return level


def _maybe_get_log_level(env: Environment, var_name: str) -> int | None:
    s = env.maybe_get(var_name)
    if s is None:
        return None

    s = s.strip().upper()
    if not s:
        return None

    level = logging.getLevelName(s)
    if not isinstance(level, int):
        raise FormatError(
            f"Expected to be a logging level name, but is '{s}' instead."
        )

    return level
