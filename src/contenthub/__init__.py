"""Content Hub — backend for a curated sermon/worship/book/movie library.

Accounts with JWT sessions, admin-managed categories and resources,
paginated listings, full-text search, and featured picks.
"""

__version__ = "0.1.0"
