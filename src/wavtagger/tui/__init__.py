"""
wavtagger TUI - Textual front end for the tagging session.

The session logic lives in wavtagger.session, this package only renders
its state and turns key presses into commands.
"""

from .tagger_tui import TaggerApp

__all__ = ['TaggerApp']
