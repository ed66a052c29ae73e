# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

from pytest import Session

from memocell.logging import configure_logging


def pytest_sessionstart(session: Session) -> None:
    configure_logging(no_rich=True)
