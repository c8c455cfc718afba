"""
Command Line Interface Package

Click commands for every diagnostic operation.
"""

from .main import main

__all__ = ["main"]
