"""
Jotter: local-first note-taking widget.

A small note pad that provides:
- Durable local storage (SQLite, one versioned database)
- Sorted note list, newest or oldest first
- Draft auto-save and a login flag for the widget
"""

__version__ = "0.1.0"
