from setuptools import setup, find_packages
import os

# Import version from ConfigDeck/__init__.py
import re
with open(os.path.join('ConfigDeck', '__init__.py'), 'r') as f:
    version = re.search(r"__version__\s*=\s*'(.*)'", f.read()).group(1)

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="ConfigDeck",
    version=version,
    author="Manan Ramnani",
    author_email="email@cryptek.dev",
    description="Dynamic application configuration for Flask, overridable at runtime from a database, file or memory",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Framework :: Flask",
    ],
    packages=find_packages(include=["ConfigDeck", "ConfigDeck.*"]),
    python_requires=">=3.8",
    install_requires=[
        "flask>=2.2.0",
        "click>=8.0.0",
        "pyyaml>=6.0",
        "psycopg2-binary>=2.9.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "configdeck=ConfigDeck.__main__:main",
        ],
    },
)
