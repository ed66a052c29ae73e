# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

from memocell.finals import constant as constant
from memocell.finals import lazy as lazy
from memocell.utils.lazy import Lazy as Lazy

__version__ = "0.1.0"
