#!/usr/bin/env python3
"""
GCache Setup Script
===================
Allows installation of the gcache package.

Usage:
    pip install -e .           # Development install
    pip install -e ".[test]"   # Development install with test dependencies
    pip install .              # Regular install
"""

from setuptools import setup, find_packages

setup(
    name="gcache",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    entry_points={
        "console_scripts": [
            "gcache-server=gcache.server:main",
            "gcache-cli=gcache.client:main",
        ],
    },
)
