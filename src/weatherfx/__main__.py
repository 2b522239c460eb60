"""
CLI entry point for running weatherfx as a module.

Usage: python -m weatherfx [OPTIONS] COMMAND [ARGS]...
"""

from weatherfx.cli.main import cli

if __name__ == "__main__":
    cli()
