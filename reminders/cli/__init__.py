"""
FILE: reminders/cli/__init__.py
PURPOSE: Command-line interface
"""
