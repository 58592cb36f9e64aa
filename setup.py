"""
Setup script for rote.

rote is a terminal flashcard drill tool backed by plain CSV decks.
Review intervals come from the FSRS memory model:

1. Memory Model - stability/difficulty updates and due dates
2. Session Scheduler - due filtering, shuffled review queues, grading
3. Cloze Parser - [bracketed] spans hidden on the front of a card

The 'rote' command is the entry point.
"""

from setuptools import find_packages, setup

setup(
    name="rote",
    version="0.3.0",
    description="Spaced-repetition flashcard drills over CSV decks, scheduled with FSRS",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["rote", "rote.*"]),
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
            "rote=rote.delivery.cli:main",
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
    keywords="learning spaced-repetition fsrs flashcards cloze cli",
)
