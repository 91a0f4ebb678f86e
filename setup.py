# setup.py
from setuptools import setup, find_packages

setup(
    name="configguard",               # the *distribution* name on PyPI
    version="0.1.0",
    packages=find_packages(include=["configguard", "configguard.*"]),
    python_requires=">=3.9",
    install_requires=["PyYAML>=6.0"], # YAML documents and schemas
    extras_require={
        "test": ["pytest"],           # the suite is plain unittest; pytest is an optional runner
    },
    include_package_data=True,        # so we can bundle the example schema
    package_data={
        "configguard.schemas": ["*.yaml", "*.json"],
    },
    entry_points={
        "console_scripts": ["configguard = configguard.cli:main"],
    },
    description="Validate YAML/JSON configuration files against a declarative schema",
    author="Your Name",
    license="Creative Commons Attribution-NonCommercial-ShareAlike 4.0 International License",
)
