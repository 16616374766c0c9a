"""
Token Ledger

A single-asset token ledger with balance transfers and an interest-bearing
deposit facility funded from a capped interest pool. All arithmetic uses
integers, never floating point.
"""

__version__ = "1.0.0"
