"""
Bargain Bites - budget meal planning with consolidated grocery lists.
"""

__version__ = "0.1.0"
