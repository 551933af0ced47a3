"""
Premier League finishing position simulator.
"""

__version__ = "1.0.0"
