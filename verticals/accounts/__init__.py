"""Accounts vertical — registration, login and the resolved caller identity.

- User model with bcrypt password hash
- Registration/login rules (pure functions)
- Router for /register, /login, /me, /logout
"""
