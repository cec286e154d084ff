"""Entry point for running loosegit as a module.

This module allows loosegit to be run as a Python module using the -m flag:
    python -m loosegit
"""

from . import cli

if __name__ == "__main__":
    cli._main()
