"""
mprisctl - control client for MPRIS2 media players on the session bus
"""

__version__ = "0.3.0"
