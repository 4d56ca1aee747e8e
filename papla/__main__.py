"""Entry point for running the tools as a module.

This allows the CLI to be run using:
    python -m papla papla_list_voices
"""

from papla.cli import run

if __name__ == '__main__':
    run()
