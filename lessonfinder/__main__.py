"""
Convenience entry point for running lessonfinder as a module.

Usage: python -m lessonfinder [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
