"""
DTOSchema - Declarative DTO validation
Install: pip install -e .
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="dtoschema",
    version="0.1.0",
    author="Diegoproggramer",
    author_email="",
    description="Validate decoded JSON / YAML data against named, recursive DTO schemas",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/Diegoproggramer/dtoschema",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.8",
    install_requires=[
        "pydantic>=2.0.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=23.0",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "dtoschema=dtoschema.cli:cli_main",
        ],
    },
    keywords="validation, schema, dto, json, yaml, python",
    project_urls={
        "Bug Reports": "https://github.com/Diegoproggramer/dtoschema/issues",
        "Source": "https://github.com/Diegoproggramer/dtoschema",
    },
)
