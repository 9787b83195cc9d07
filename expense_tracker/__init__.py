"""
Expense Tracker - Source Package

A single-user, local-first income and expense tracker.

DESIGN PRINCIPLES:
1. One flat list of transactions is the only source of truth
2. Every view is derived fresh from a snapshot of that list
3. Reject bad input at the command boundary, never propagate NaN
4. Persist a full snapshot after every command, never from views
5. Storage layer is swappable
"""

__version__ = "1.2.0"
__author__ = "Expense Tracker Team"
