"""
Todo API package.

A FastAPI service exposing list/create/replace/delete over a single `todos`
table reached through a SQLAlchemy connection pool.
"""
