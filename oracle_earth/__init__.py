"""
Oracle Earth
Global intelligence dashboard: time machine, crisis feed, what-if simulator
and LLM-backed analysis services
"""

__version__ = "0.1.0"
