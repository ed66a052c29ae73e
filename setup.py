# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

from setuptools import find_namespace_packages, setup

version = "0.1.0"

setup(
    name="memocell",
    version=version,
    description="Compute-once, thread-safe value cells and small helpers",
    long_description_content_type="text/plain",
    license="MIT",
    keywords=["lazy", "memoization", "threading"],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Libraries",
    ],
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src"),
    package_data={"memocell": ["py.typed"]},
    zip_safe=False,
    python_requires=">=3.10",
    install_requires=[
        "rich>=13.7",
        "typing_extensions~=4.12",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
    },
)
