"""
API Routes Package

This package contains FastAPI route handlers for the application.
Each module defines routes for a specific feature area:

- auth.py: Account creation, login, refresh, logout, session lookup
- members.py: Profiles, search, pictures, follow/restrict graph, deletion
- content.py: Posts and post likes
- comments.py: Comments, replies and their likes
- chat.py: Chats and chat entries

Routes are registered in main.py using FastAPI's router system,
which allows for modular organization and shared route prefixes.
"""
