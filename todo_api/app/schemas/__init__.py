"""
Pydantic schema definitions for API payloads.

Schemas are separated from the stored documents to decouple the API
representation (``_id``, ``completedAt``) from persistence columns.
"""
