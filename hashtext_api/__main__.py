"""
Entry point for running HashText as a module.

Usage:
    python -m hashtext_api
"""

from hashtext_api.cli import main

if __name__ == "__main__":
    main()
