"""
PhotoShare Backend - Pydantic Request/Response Schemas
========================================================

Schemas are separate from SQLAlchemy models: the API contract (snake_case
JSON) changes independently of the table layout, and internal columns such
as `password_hash` or storage keys never leave the server.
"""
