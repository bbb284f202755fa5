"""
Command-line client for OTA device management services.
"""

__version__ = "0.3.0"
