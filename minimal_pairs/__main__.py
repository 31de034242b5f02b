"""
Entry point for running Minimal Pairs as a module.

Usage:
    python -m minimal_pairs study
    python -m minimal_pairs stats
    python -m minimal_pairs --help
"""
from .cli import main

if __name__ == "__main__":
    main()
