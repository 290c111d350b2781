"""
Reminders - a personal activity and reminder manager.
"""

__version__ = "0.1.0"
