"""
services/ — Business logic and database access.

Functions take a SQLAlchemy Session and return plain dicts. Business-rule
failures come back as {"error": ..., "status": ...} for routers to raise.
"""
