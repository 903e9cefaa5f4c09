"""Bookstore API: a REST CRUD service for books."""

__version__ = "0.1.0"
