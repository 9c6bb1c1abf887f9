"""
Setup script for tiny-bloom.
"""

from setuptools import setup, find_packages

setup(
    name="tiny-bloom",
    version="0.1.0",
    packages=find_packages(include=["tiny_bloom", "tiny_bloom.*"]),
    package_data={"tiny_bloom": ["py.typed"]},
    python_requires=">=3.9",
    extras_require={"test": ["pytest>=7.0.0"]},
)
