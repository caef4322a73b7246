"""
windowplanner - fit pending tasks into the free time blocks of a calendar.
"""

__version__ = "0.1.0"
