"""
Core app - Shared abstractions and utilities.

Provides the result types every service returns to its router:
- Failure: an expected, user-facing failure (status + short message)
- ListResult: a list payload that degrades to empty on backend errors
"""
