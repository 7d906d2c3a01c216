"""
School billing: payment eligibility and discount resolution engine.
"""

__version__ = "0.1.0"
