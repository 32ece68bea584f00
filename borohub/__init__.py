"""
BoroHub Media API Package

This package contains the backend of the BoroHub social media service.
The package is organized as follows:

- config.py: Application configuration and environment settings
- database.py: Async database engine and session management
- dependencies.py: FastAPI dependency injection functions (session member, admin)
- errors.py: Error type and the JSON error envelope handlers
- limiter.py: Rate limiting configuration
- main.py: FastAPI application factory and middleware
- models.py: SQLAlchemy ORM database models
- schemas.py: Pydantic request bodies

Subpackages:
- routes/: API route handlers (auth, member, content, comment, chat)
- services/: Business logic (auth, members, relationships, cascade,
  content, comments, chat, media, audit)
- utils/: Response serializers and input validators
"""
