"""
GroupFinder API Package

Backend for the GroupFinder directory: users submit Facebook groups,
vote on them, review them and earn reputation, while admins moderate
submissions through a verification workflow.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy engine, session factory and declarative base
- main.py: FastAPI application factory and exception handlers
- dependencies.py: Dependency injection (db session, pagination, auth)
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Business logic (vote tallies, ratings, verification, reputation)
- utils/: Helper functions
"""

__version__ = "0.1.0"
