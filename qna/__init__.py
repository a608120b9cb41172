"""
Backend package for the audit Q&A community.

This package provides a FastAPI application over a record store
abstraction, plus the list-view controller used by the question list.
"""
