"""
Hawkward - Local Persistence Service

A single-user local companion server for a personal finance dashboard.
It keeps the whole application state in one JSON document, protects it
with backups, and shuts itself down when the browser tab goes away.
"""

__version__ = "1.0.0"
__author__ = "Hawkward Team"
