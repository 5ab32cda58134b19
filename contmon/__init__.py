"""
contmon - container monitoring daemon HTTP surface
"""

__version__ = "0.3.0"
