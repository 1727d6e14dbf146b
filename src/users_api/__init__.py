"""Users REST API.

CRUD over a single User resource, served by FastAPI and persisted through
SQLModel.
"""

__version__ = "0.1.0"
