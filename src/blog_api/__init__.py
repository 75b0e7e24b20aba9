"""
Blog Posts API - CRUD service for blog posts backed by a document store
"""

__version__ = "1.0.0"
