"""
Entry point for running tempograph as a module.

Usage:
    python -m tempograph [command] [options]

Example:
    python -m tempograph run data/ 0 100 1
    python -m tempograph graph status data/ 50
"""

from tempograph_cli.main import cli

if __name__ == "__main__":
    cli()
