#!/usr/bin/env python

import os
import re

from setuptools import setup, find_packages


def find_version(*segments):
    root = os.path.abspath(os.path.dirname(__file__))
    abspath = os.path.join(root, *segments)
    with open(abspath, "r") as file:
        content = file.read()
    match = re.search(r"^__version__ = ['\"]([^'\"]+)['\"]", content, re.MULTILINE)
    if match:
        return match.group(1)
    raise RuntimeError("Unable to find version string!")


setup(
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    description="A utility that can be used to list, measure, and prune the content of a docker registry.",
    entry_points="""
        [console_scripts]
        dri=docker_registry_inspect.scripts.dri:cli
    """,
    extras_require={
        "dev": [
            "black",
            "pylint",
            "pytest",
            "pytest-asyncio",
            "twine",
            "wheel",
        ]
    },
    include_package_data=True,
    install_requires=[
        "aiohttp",
        "click",
    ],
    keywords="docker docker-registry registry-v2 manifest layers size",
    license="Apache License 2.0",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    name="docker_registry_inspect",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    tests_require=[
        "pytest",
        "pytest-asyncio",
    ],
    test_suite="tests",
    version=find_version("docker_registry_inspect", "__init__.py"),
)
