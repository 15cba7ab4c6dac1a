"""tempograph setup - earliest arrival over an evolving temporal graph."""
from setuptools import setup, find_packages

setup(
    name="tempograph",
    version="0.1.0",
    description="tempograph: earliest arrival times over an evolving temporal graph",
    packages=find_packages(include=["tempograph", "tempograph.*", "tempograph_cli"]),
    python_requires=">=3.10",
    install_requires=[
        "click>=8.0",
        "networkx>=3.0",
        "blake3>=0.3",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "tempo=tempograph_cli.main:cli",
        ],
    },
)
