from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.dependencies import CurrentProfile, get_optional_session, require_module
from src.core.auth.models import Profile
from src.core.auth.schemas import (
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    ProfileUpdate,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    ViewResponse,
)
from src.core.auth.service import AuthService
from src.core.auth.views import AuthSession, select_view, view_modules
from src.core.database import get_db
from src.shared.schemas import SuccessResponse

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=SuccessResponse[ProfileResponse],
    status_code=status.HTTP_201_CREATED,
)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    """Create an account. New accounts get the santri role."""
    profile = await AuthService(db).register(email=data.email, password=data.password)
    return SuccessResponse(
        data=ProfileResponse.model_validate(profile),
        message="Registration successful",
    )


@router.post("/login", response_model=SuccessResponse[LoginResponse])
async def login(
    request: Request,
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Authenticate user and return tokens."""
    auth_service = AuthService(db)

    ip_address = request.client.host if request.client else None

    profile, access_token, refresh_token = await auth_service.authenticate(
        email=data.email,
        password=data.password,
        ip_address=ip_address,
    )

    return SuccessResponse(
        data=LoginResponse(
            profile=ProfileResponse.model_validate(profile),
            access_token=access_token,
            refresh_token=refresh_token,
        ),
        message="Login successful",
    )


@router.post("/refresh", response_model=SuccessResponse[TokenResponse])
async def refresh_tokens(
    data: RefreshRequest,
    db: AsyncSession = Depends(get_db),
):
    """Refresh access token using refresh token."""
    access_token, refresh_token = await AuthService(db).refresh_tokens(data.refresh_token)

    return SuccessResponse(
        data=TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
        ),
        message="Tokens refreshed",
    )


@router.get("/me", response_model=SuccessResponse[ProfileResponse])
async def get_current_profile_info(current_profile: CurrentProfile):
    """Get current authenticated user's profile."""
    return SuccessResponse(
        data=ProfileResponse.model_validate(current_profile),
        message="Profile retrieved",
    )


@router.patch("/me", response_model=SuccessResponse[ProfileResponse])
async def update_current_profile(
    data: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = Depends(require_module("my-profile")),
):
    """Update own display name."""
    profile = await AuthService(db).update_own_profile(current_profile.id, data.full_name)
    return SuccessResponse(
        data=ProfileResponse.model_validate(profile),
        message="Profile updated",
    )


@router.get("/view", response_model=SuccessResponse[ViewResponse])
async def get_view(
    session: AuthSession | None = Depends(get_optional_session),
    db: AsyncSession = Depends(get_db),
):
    """
    Resolve which dashboard the caller should see.

    Works without a token: an anonymous or expired caller gets `logged_out`.
    """
    profile = await AuthService(db).get_profile(session.user_id) if session else None
    view = select_view(session, profile)
    return SuccessResponse(
        data=ViewResponse(
            kind=view.kind,
            role=view.role.value if view.role else None,
            profile_id=getattr(view, "profile_id", None),
            student_id=getattr(view, "student_id", None),
            teacher_id=getattr(view, "teacher_id", None),
            modules=view_modules(view),
        ),
    )
