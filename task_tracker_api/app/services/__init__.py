"""
Service layer.

Each service encapsulates the data access and integrity rules of one
domain.  API handlers call services and never touch the database
directly.
"""
