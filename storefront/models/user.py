from typing import Optional
from datetime import datetime, timezone
from enum import Enum
from sqlmodel import Field, SQLModel

class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"  # Catalog owner: may advance or cancel any order

class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    # Basic Info
    name: Optional[str] = None
    email: str = Field(unique=True, index=True)
    password_hash: str

    # Account Status
    role: Role = Field(default=Role.USER)
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class UserRead(SQLModel):
    id: int
    name: Optional[str] = None
    email: str
    role: Role
    is_active: bool
