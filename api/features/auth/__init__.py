"""Auth feature package: password credential hashing.

Session management and account storage live outside this service; callers
persist the returned ``Credential`` themselves.
"""
