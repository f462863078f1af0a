"""
Entry point for running the package as a module.

Usage:
    python -m grn_influence --config configs/run.yaml
"""

from .cli import main

if __name__ == "__main__":
    main()
