"""
UI package for the Formation Board.

This package contains the Flask web server that front ends talk to.
"""
from .web_app import create_app, run_web_app, WebAppState

__all__ = ["create_app", "run_web_app", "WebAppState"]
