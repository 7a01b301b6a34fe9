"""
High-level use cases for the memberhub API.

Each service module orchestrates SQLRepository calls to implement the business
rules (issue a code, toggle a like, build notifications, etc.).

Routers (FastAPI endpoints) call these services instead of opening database
sessions directly, and translate ServiceError subclasses into JSON envelopes.
"""
