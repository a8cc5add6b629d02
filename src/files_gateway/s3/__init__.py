"""
S3 access layer for the Files Gateway.

One function per object-store call; every function takes the shared client
explicitly.
"""
