"""
Setup script for ascent-quiz.

Ascent is a terminal-based adaptive quiz. It serves two roles:

1. Placement - A short self-assessment picks the starting level
2. Leveled practice - Questions are retried until answered correctly,
   and each cleared level unlocks the next one up to mastery

The 'ascent' command is the entry point.
"""

from setuptools import find_packages, setup

setup(
    name="ascent-quiz",
    version="1.0.0",
    description="Terminal-based adaptive leveled quiz with retry-until-mastery",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Ascent Learning",
    packages=find_packages(include=["src", "src.*"]),
    py_modules=["config"],
    package_data={"src.content": ["data/*.json"]},
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "ascent=src.cli.ascent_cli:run",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning quiz adaptive mastery cli education",
)
