#!/usr/bin/env python3
"""
Setup script for httprecorder
Record/replay transport for httpx
"""

from pathlib import Path
from setuptools import setup, find_packages

# Read version from package
version = "0.1.0"

install_requires = [
    "httpx>=0.24",
    "PyYAML>=6.0",
    "fastjsonschema>=2.20",
    "portalocker>=2.8",
]

extras_require = {
    "dev": [
        "pytest>=7.0.0",
        "black>=22.0.0",
        "mypy>=0.950",
        "types-PyYAML",
    ],
}

setup(
    name="httprecorder",
    version=version,
    description="Record HTTP traffic once, replay it offline in tests",
    long_description=open("README.md").read() if Path("README.md").exists() else "",
    long_description_content_type="text/markdown",
    python_requires=">=3.8",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=install_requires,
    extras_require=extras_require,
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Software Development :: Testing",
        "Topic :: Internet :: WWW/HTTP",
    ],
)
