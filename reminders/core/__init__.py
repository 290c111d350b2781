"""
FILE: reminders/core/__init__.py
PURPOSE: Activity model, derived-state engine, persistence and store
"""
