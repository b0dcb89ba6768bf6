"""
Identity boundary: credential hashing (Argon2) and JWT authentication.

Turns a bearer token into a verified CallerContext before any use case runs.
"""
