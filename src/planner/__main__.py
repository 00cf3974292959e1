"""
Entry point for running the planner as a module.

Usage:
    python -m src.planner generate
    python -m src.planner today
    python -m src.planner --help
"""
from .cli import main

if __name__ == "__main__":
    main()
