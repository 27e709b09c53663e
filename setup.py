#!/usr/bin/env python
"""Azure CLI Extension: az ts built-in — built-in aware template spec completion."""

from setuptools import find_packages, setup

VERSION = "0.1.0b1"
CLASSIFIERS = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "License :: OSI Approved :: MIT License",
]

DEPENDENCIES = [
    "knack>=0.11.0",
    "pyyaml>=6.0",
    "requests>=2.28.0",
    "rich>=13.0.0",
]

TEST_DEPENDENCIES = [
    "pytest>=7.0",
    "azure-cli-core",
    "azure-cli-testsdk",
]

setup(
    name="templatespecs",
    version=VERSION,
    description="Azure CLI extension for listing and completing built-in template specs",
    long_description="Adds built-in template spec listings and deadline-bounded argument completion "
    "for template spec names and versions.",
    license="MIT",
    author="Microsoft Corporation",
    author_email="azpycli@microsoft.com",
    url="https://github.com/Azure/azure-cli-extensions",
    classifiers=CLASSIFIERS,
    python_requires=">=3.10",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=DEPENDENCIES,
    extras_require={"test": TEST_DEPENDENCIES},
    entry_points={
        "azure.cli.extensions": [
            "templatespecs=azext_templatespecs",
        ]
    },
)
