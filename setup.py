from setuptools import setup, find_packages

setup(
    name="importguard",
    version="0.1.0",
    description="Remove unused import directives without losing protected ones, and move directives into their namespace",
    packages=find_packages(include=["importguard", "importguard.*"]),
    python_requires=">=3.11",
    install_requires=[
        "click>=8.0",
        "pydantic>=2.0",
        "tomli>=2.0",
        "tomli-w>=1.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "importguard=importguard.cli:cli",
        ],
    },
)
