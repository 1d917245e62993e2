"""
lessonfinder - Weekly lesson availability for travelling coaches.
"""

__version__ = "0.1.0"
