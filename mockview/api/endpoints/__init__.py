"""
API endpoint modules for MockView
"""

from mockview.api.endpoints import health, interview

__all__ = ["health", "interview"]
