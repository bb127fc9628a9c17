"""Setup script for the pawaPay sandbox tester."""
from pathlib import Path

from setuptools import setup, find_packages

HERE = Path(__file__).parent

setup(
    name="pawapay-sandbox-tester",
    version="1.0.0",
    description="Manual test harness and dashboard API for the pawaPay sandbox",
    python_requires=">=3.10",
    packages=find_packages(include=["api", "config", "core", "database", "integrations", "monitoring"]),
    install_requires=[
        line.strip()
        for line in (HERE / "requirements.txt").read_text().splitlines()
        if line.strip() and not line.startswith("#")
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.23.0",
        ],
        "dev": [
            "black>=23.0.0",
            "isort>=5.12.0",
            "flake8>=6.0.0",
            "mypy>=1.4.0",
            "pytest-cov>=4.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pawapay-sandbox=api.main:run",
        ]
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Framework :: FastAPI",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
