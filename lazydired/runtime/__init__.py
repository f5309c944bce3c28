"""Runtime orchestration package.

Contains the terminal controller, key decoding, screen composition,
persisted config, and the interactive session wiring.
"""

from .app import DiredApp, run_dired

__all__ = ["DiredApp", "run_dired"]
