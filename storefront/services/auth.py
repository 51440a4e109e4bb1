import logging
from typing import Optional
from sqlmodel import Session, select
from fastapi import HTTPException

from storefront.core.security import create_access_token, get_password_hash, verify_password
from storefront.models.user import Role, User

logger = logging.getLogger("storefront.auth")

class AuthService:
    def __init__(self, session: Session):
        self.session = session

    def get_user_by_email(self, email: str) -> Optional[User]:
        # Use ilike for case-insensitive lookup
        return self.session.exec(select(User).where(User.email == email)).first() or \
               self.session.exec(select(User).where(User.email.ilike(email))).first()

    def register_user(self, email: str, password: str, name: str = None, role: Role = Role.USER) -> User:
        if self.get_user_by_email(email):
            raise HTTPException(status_code=400, detail="Email already registered")

        user = User(
            email=email,
            name=name,
            password_hash=get_password_hash(password),
            role=role,
            is_active=True,
        )
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        logger.info("Registered user %s with role %s", user.id, user.role.value)
        return user

    def authenticate_user(self, email: str, password: str) -> tuple[Optional[User], Optional[str]]:
        user = self.get_user_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            return None, "Incorrect email or password"
        if not user.is_active:
            return None, "Account is inactive"
        return user, None

    def issue_token(self, user: User) -> str:
        return create_access_token(data={"sub": user.email, "role": user.role.value})
