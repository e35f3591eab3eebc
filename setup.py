"""
pip-installable setup for fieldgrad.

Installs the pure-Python package from ``python/``.

Usage:
    pip install -e .
    pip install -e ".[test]"
    python setup.py bdist_wheel
"""

import re
from pathlib import Path

from setuptools import setup, find_packages


def read_version():
    init = Path(__file__).parent / "python" / "fieldgrad" / "__init__.py"
    match = re.search(r'^__version__ = "([^"]+)"', init.read_text(), re.MULTILINE)
    return match.group(1)


setup(
    name="fieldgrad",
    version=read_version(),
    description="Reverse-mode automatic differentiation over scalar fields",
    package_dir={"": "python"},
    packages=find_packages("python"),
    python_requires=">=3.9",
    install_requires=["numpy"],
    extras_require={"test": ["pytest"]},
)
