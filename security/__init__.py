"""
security/ - Security Layer
==========================
Password hashing plus the manager whitelist and rate limiting applied
to every bot command.
"""
