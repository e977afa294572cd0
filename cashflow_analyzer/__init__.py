"""
Cash-Flow Analyzer - Source Package

Turns a free-text description of a month's income and spending into
structured records, then aggregates them into account balances, a
categorised monthly report and plain-text exports for a small business
owner who also runs a household.

DESIGN PRINCIPLES:
1. The LLM only extracts; every number is computed by pure code
2. Fail early, fail visibly
3. No silent corrections
4. Every step must be auditable
5. A failed request never overwrites the last good report
"""

__version__ = "1.0.0"
__author__ = "Cash-Flow Analyzer Team"
