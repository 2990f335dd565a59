#!/usr/bin/env python3
"""Setup script for pyafk."""

from setuptools import setup, find_packages
import os

# Read README file
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Read version from __init__.py
def get_version():
    version_file = os.path.join("pyafk", "__init__.py")
    with open(version_file, "r") as f:
        for line in f:
            if line.startswith("__version__"):
                return line.split('"')[1]
    return "0.1.0"

setup(
    name="pyafk",
    version=get_version(),
    author="pyafk Contributors",
    author_email="",
    description="Keep an idle bot session alive in a multi-user world",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["pyafk", "pyafk.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Framework :: AsyncIO",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Games/Entertainment",
        "Topic :: System :: Networking",
    ],
    python_requires=">=3.8",
    install_requires=[
        "aiohttp>=3.8",
    ],
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-cov",
            "flake8",
            "black",
            "mypy",
        ],
    },
    entry_points={
        "console_scripts": [
            "pyafk=pyafk.cli:main",
        ],
    },
    include_package_data=True,
    package_data={
        "pyafk": ["py.typed"],
    },
    keywords="bot afk idle auto-reconnect asyncio",
    zip_safe=False,
)
