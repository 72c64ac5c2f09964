"""Pydantic schemas for account requests.

Instances are built by verticals.accounts.rules from already-validated
values, so the field constraints here restate the rules rather than drive
the error messages.
"""

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str
