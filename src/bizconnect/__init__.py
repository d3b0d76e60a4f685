"""
KTU BizConnect quick sales
Time-boxed auction listings for the student marketplace
"""

__version__ = "1.0.0"
