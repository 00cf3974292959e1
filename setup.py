"""
Setup script for study-planner.

Study Planner turns an exam curriculum and a weekly time budget into a
day-by-day study calendar:

1. Planning Engine - Curriculum flattening and capacity-bound allocation
2. Spaced Reviews - Review sessions chained on goal completion
3. Terminal CLI - Local plan, routine and calendar management

The 'planner' command is the entry point.
"""

from setuptools import find_namespace_packages, setup

setup(
    name="study-planner",
    version="1.0.0",
    description="Exam study calendar generator with spaced-repetition reviews",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_namespace_packages(include=["src", "src.*"]),
    py_modules=["config"],
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
            "planner=src.planner.cli:main",
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
    ],
    keywords="study-plan scheduling spaced-repetition cli education",
)
