"""
MockView - Adaptive Mock Interview Engine

Builds a competency plan, asks questions one at a time, scores each
answer and adaptively decides whether to probe deeper, move on, or end.
"""

__version__ = "0.1.0"
__author__ = "MockView Team"
