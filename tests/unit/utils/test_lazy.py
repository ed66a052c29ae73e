# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

import gc
import logging
import threading
import time
import weakref
from concurrent.futures import ThreadPoolExecutor

import pytest

from memocell.error import InvalidOperationError
from memocell.utils.lazy import Lazy


class Counter:
    def __init__(self) -> None:
        self.count = 0

    def __call__(self) -> int:
        value = self.count

        self.count += 1

        return value


class TestLazy:
    def test_retrieve_works(self) -> None:
        counter = Counter()

        value = Lazy(counter)

        assert not value.is_constructed

        assert value.retrieve() == 0

        assert value.is_constructed

        assert counter.count == 1

    def test_retrieve_returns_first_value_when_called_again(self) -> None:
        counter = Counter()

        value = Lazy(counter)

        for _ in range(5):
            assert value.retrieve() == 0

        assert counter.count == 1

    def test_retrieve_returns_first_value_when_called_from_another_thread(
        self,
    ) -> None:
        counter = Counter()

        value = Lazy(counter)

        assert value.retrieve() == 0

        results: list[int] = []

        thread = threading.Thread(target=lambda: results.append(value.retrieve()))

        thread.start()
        thread.join()

        assert results == [0]

        assert counter.count == 1

    def test_call_works(self) -> None:
        counter = Counter()

        value = Lazy(counter)

        assert value() == 0
        assert value() == 0

        assert counter.count == 1

    def test_retrieve_releases_factory(self) -> None:
        counter = Counter()

        counter_ref = weakref.ref(counter)

        value = Lazy(counter)

        del counter

        gc.collect()

        assert counter_ref() is not None

        assert value.retrieve() == 0

        gc.collect()

        assert counter_ref() is None

        assert value.retrieve() == 0

    def test_retrieve_works_when_factory_returns_none(self) -> None:
        calls = []

        def factory() -> None:
            calls.append(1)

        value = Lazy(factory)

        assert value.retrieve() is None
        assert value.retrieve() is None

        assert value.is_constructed

        assert len(calls) == 1

    def test_retrieve_works_when_called_concurrently(self) -> None:
        num_threads = 100

        lock = threading.Lock()

        calls = 0

        def factory() -> str:
            nonlocal calls

            with lock:
                calls += 1

            time.sleep(0.05)

            return "X"

        value = Lazy(factory)

        barrier = threading.Barrier(num_threads)

        def retrieve() -> str:
            barrier.wait()

            return value.retrieve()

        with ThreadPoolExecutor(max_workers=num_threads) as executor:
            futures = [executor.submit(retrieve) for _ in range(num_threads)]

            results = [f.result() for f in futures]

        assert results == ["X"] * num_threads

        assert calls == 1

    def test_retrieve_returns_same_object_when_called_concurrently(self) -> None:
        num_threads = 16

        counter = Counter()

        def factory() -> list[int]:
            time.sleep(0.01)

            return [counter()]

        value = Lazy(factory)

        with ThreadPoolExecutor(max_workers=num_threads) as executor:
            futures = [executor.submit(value.retrieve) for _ in range(num_threads)]

            results = [f.result() for f in futures]

        assert all(r is results[0] for r in results)

        assert results[0] == [0]

        assert counter.count == 1

    def test_retrieve_retries_when_factory_fails(self) -> None:
        attempts = 0

        def factory() -> str:
            nonlocal attempts

            attempts += 1

            if attempts == 1:
                raise RuntimeError("foo")

            return "bar"

        value = Lazy(factory)

        with pytest.raises(RuntimeError, match=r"^foo$"):
            value.retrieve()

        assert not value.is_constructed

        assert value.retrieve() == "bar"
        assert value.retrieve() == "bar"

        assert attempts == 2

    def test_retrieve_raises_same_error_when_factory_fails(self) -> None:
        error = ValueError("foo")

        def factory() -> str:
            raise error

        value = Lazy(factory)

        with pytest.raises(ValueError) as ex_info:
            value.retrieve()

        assert ex_info.value is error

    def test_retrieve_logs_when_factory_fails(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.DEBUG, logger="memocell")

        def failing_factory() -> str:
            raise RuntimeError("foo")

        value = Lazy(failing_factory)

        with pytest.raises(RuntimeError):
            value.retrieve()

        messages = [r.getMessage() for r in caplog.records]

        assert any("failing_factory" in m and "not stored" in m for m in messages)

    def test_retrieve_raises_error_when_called_by_factory(self) -> None:
        value: Lazy[int]

        def factory() -> int:
            return value.retrieve() + 1

        value = Lazy(factory)

        with pytest.raises(
            InvalidOperationError,
            match=r"cannot retrieve the value it is constructing\.$",
        ):
            value.retrieve()

        assert not value.is_constructed

    def test_init_raises_error_when_factory_is_not_callable(self) -> None:
        with pytest.raises(TypeError, match=r"^`factory` must be callable"):
            Lazy("foo")  # type: ignore[arg-type]

    def test_repr_does_not_construct_value(self) -> None:
        counter = Counter()

        value = Lazy(counter)

        assert repr(value).endswith(", not constructed)")

        assert counter.count == 0

        value.retrieve()

        assert repr(value).endswith(", constructed)")
