from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.activity import ActivityAction, ActivityService
from src.core.auth.jwt import create_access_token, create_refresh_token, decode_token
from src.core.auth.models import Profile, ProfileStatus, User, UserRole
from src.core.auth.password import hash_password, verify_password
from src.core.exceptions import AuthenticationError, DuplicateError, NotFoundError


class AuthService:
    """Service for authentication operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.activity = ActivityService(session)

    async def get_user_by_email(self, email: str) -> User | None:
        """Get user by email."""
        stmt = select(User).where(User.email == email.lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_user_by_id(self, user_id: int) -> User | None:
        """Get user by ID."""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_profile(self, user_id: int) -> Profile | None:
        """Get the role profile of a user (same primary key)."""
        stmt = select(Profile).where(Profile.id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create_account(
        self,
        email: str,
        password: str,
        role: UserRole,
        full_name: str | None = None,
        student_id: int | None = None,
        teacher_id: int | None = None,
        created_by_id: int | None = None,
    ) -> Profile:
        """Create a login and its profile."""
        email = email.lower()
        existing = await self.get_user_by_email(email)
        if existing:
            raise DuplicateError("User", "email", email)

        user = User(
            email=email,
            password_hash=hash_password(password),
            is_active=True,
        )
        self.session.add(user)
        await self.session.flush()

        profile = Profile(
            id=user.id,
            email=email,
            full_name=full_name or email.split("@")[0],
            role=role.value,
            status=ProfileStatus.ACTIVE.value,
            student_id=student_id,
            teacher_id=teacher_id,
        )
        self.session.add(profile)
        await self.session.flush()
        await self.session.refresh(profile)

        await self.activity.log(
            action=ActivityAction.CREATE if created_by_id else ActivityAction.REGISTER,
            module="roles",
            user_id=created_by_id or user.id,
            description=f"Account {email} created with role {role.value}",
            details={"profile_id": profile.id, "role": role.value},
        )

        return profile

    async def register(self, email: str, password: str) -> Profile:
        """Self sign-up: new accounts are santri until an admin changes the role."""
        return await self.create_account(email=email, password=password, role=UserRole.SANTRI)

    async def authenticate(
        self, email: str, password: str, ip_address: str | None = None
    ) -> tuple[Profile, str, str]:
        """
        Authenticate user and return tokens.

        Returns:
            Tuple of (profile, access_token, refresh_token)

        Raises:
            AuthenticationError: If credentials are invalid
        """
        user = await self.get_user_by_email(email)

        if not user or not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid email or password")

        if not user.is_active:
            raise AuthenticationError("User account is deactivated")

        profile = await self.get_profile(user.id)
        if not profile:
            raise AuthenticationError("User has no profile")

        user.last_login_at = datetime.now(timezone.utc)
        await self.session.flush()

        access_token = create_access_token(user.id, profile.role)
        refresh_token = create_refresh_token(user.id)

        await self.activity.log(
            action=ActivityAction.LOGIN,
            user_id=user.id,
            description=f"{user.email} logged in",
            ip_address=ip_address,
        )

        return profile, access_token, refresh_token

    async def refresh_tokens(self, refresh_token: str) -> tuple[str, str]:
        """
        Refresh access token using refresh token.

        Returns:
            Tuple of (new_access_token, new_refresh_token)

        Raises:
            AuthenticationError: If refresh token is invalid
        """
        payload = decode_token(refresh_token, token_type="refresh")

        user_id = int(payload["sub"])
        user = await self.get_user_by_id(user_id)

        if not user:
            raise AuthenticationError("User not found")

        if not user.is_active:
            raise AuthenticationError("User account is deactivated")

        profile = await self.get_profile(user_id)
        if not profile:
            raise AuthenticationError("User has no profile")

        return create_access_token(user.id, profile.role), create_refresh_token(user.id)

    async def update_own_profile(self, profile_id: int, full_name: str) -> Profile:
        """Change the display name of the signed-in user."""
        profile = await self.get_profile(profile_id)
        if not profile:
            raise NotFoundError("Profile", profile_id)

        old_name = profile.full_name
        profile.full_name = full_name
        await self.session.flush()

        await self.activity.log(
            action=ActivityAction.UPDATE,
            module="my-profile",
            user_id=profile_id,
            description="Profile name changed",
            details={"old": old_name, "new": full_name},
        )
        await self.session.refresh(profile)
        return profile
