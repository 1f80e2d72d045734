"""
Entry point for running the engine as a module.

Usage:
    python -m schedule_engine show cls-1
    python -m schedule_engine validate schedule.json
"""

from schedule_engine.cli import main

if __name__ == "__main__":
    main()
