"""
AyurCare Backend — Auth & Profile Schemas
==========================================

What:  Request/response models for sign-up, sign-in and the profile.
How:   Length limits mirror the storefront's sign-up form: name ≤ 100,
       e-mail ≤ 255, phone ≤ 20, address ≤ 500, password 6–100.
"""

import uuid
from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, EmailStr, Field, StringConstraints

# Profile text is trimmed; passwords are kept byte for byte
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
Phone = Annotated[str, StringConstraints(strip_whitespace=True, max_length=20)]
Address = Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)]


class SignUpRequest(BaseModel):
    name: Name = Field(description="Display name")
    email: EmailStr = Field(max_length=255)
    phone: Phone = ""
    address: Address = ""
    password: str = Field(
        min_length=6,
        max_length=100,
        description="Password must be at least 6 characters",
    )


class SignInRequest(BaseModel):
    email: EmailStr = Field(max_length=255)
    password: str = Field(min_length=1, max_length=100)


class ProfileResponse(BaseModel):
    """The signed-in user's profile as shown on the checkout screen."""
    id: uuid.UUID
    email: str
    name: str
    phone: str
    address: str
    is_admin: bool = Field(description="True when the user holds the admin role")
    created_at: datetime

    model_config = {"from_attributes": True}


class ProfileUpdate(BaseModel):
    """Partial profile update; omitted fields are left unchanged."""
    name: Optional[Name] = None
    phone: Optional[Phone] = None
    address: Optional[Address] = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Token lifetime in seconds")
    user: ProfileResponse
