# setup.py
from setuptools import setup, find_packages

setup(
    name="yaml-schema-validator",      # the *distribution* name on PyPI
    version="1.0.0",
    packages=find_packages(include=["yaml_schema_validator", "yaml_schema_validator.*"]),
    python_requires=">=3.9",
    install_requires=[
        "jsonschema>=4.18",
        "PyYAML>=6.0",
        "requests>=2.28",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "yaml-schema-validator = yaml_schema_validator.cli:main",
        ],
    },
    description="Validate YAML/JSON configuration files against JSON Schemas and report in text, JSON, YAML, JUnit or SARIF",
    license="Creative Commons Attribution-NonCommercial-ShareAlike 4.0 International License",
)
