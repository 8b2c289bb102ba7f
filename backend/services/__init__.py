"""
Services for the snake engine: storage, scoring, notifications, scheduling
and diagnostics.
"""
