"""Setup script for the batstat package."""

from setuptools import find_packages, setup

setup(
    name="batstat",
    version="0.1.0",
    description="Battery telemetry logger for Linux power_supply devices",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pyyaml",
        "python-dotenv",
        "rich",
    ],
    extras_require={
        "dev": [
            "pytest",
            "black",
            "isort",
            "mypy",
        ],
    },
    entry_points={
        "console_scripts": [
            "batstatd=batstat.collector:main",
            "batstat-show=batstat.display:main",
        ],
    },
)
