"""
Service layer abstraction.

Each service wraps the shared ``Database`` handle and encapsulates the
store operations for one document type, so that API handlers never
issue SQL themselves.
"""
