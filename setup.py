"""
Setup script for simple-hll.
"""

from setuptools import setup, find_packages

setup(
    name="simple-hll",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    package_data={"simple_hll": ["py.typed"]},
    python_requires=">=3.9",
)
