"""
Poll a URL on a fixed interval and report every attempt until it has
answered HTTP 200 often enough.
"""

__version__ = "1.0.0"
