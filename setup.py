# setup.py
from setuptools import setup, find_packages

setup(
    name="natspec-docs",              # the *distribution* name on PyPI
    version="1.0.0",
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.9",
    install_requires=[],              # standard library only
    extras_require={
        "test": ["pytest"],
    },
    include_package_data=True,        # so we can bundle the JSON schemas
    package_data={
        "natspec_docs.schemas": ["*.json"],
    },
    description="Markdown documentation pages from Solidity natspec metadata",
    author="Your Name",
    license="Creative Commons Attribution-NonCommercial-ShareAlike 4.0 International License",
)
