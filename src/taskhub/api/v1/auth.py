"""Authentication endpoints."""

from fastapi import APIRouter, HTTPException, status

from src.taskhub.api.dependencies import AuthServiceDep, CurrentUser
from src.taskhub.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserRead
from src.taskhub.services.auth_service import EmailAlreadyRegisteredError

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create a user account and return an access token.",
    responses={
        201: {"description": "User created"},
        409: {"description": "Email already registered"},
    },
)
async def register(request: RegisterRequest, auth_service: AuthServiceDep) -> TokenResponse:
    try:
        user, access_token = await auth_service.register(
            email=request.email,
            password=request.password,
            first_name=request.first_name,
            last_name=request.last_name,
        )
    except EmailAlreadyRegisteredError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e

    return TokenResponse(access_token=access_token, user=UserRead.model_validate(user))


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login",
    description="Verify credentials and return an access token.",
    responses={401: {"description": "Invalid credentials"}},
)
async def login(request: LoginRequest, auth_service: AuthServiceDep) -> TokenResponse:
    result = await auth_service.authenticate(request.email, request.password)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user, access_token = result
    return TokenResponse(access_token=access_token, user=UserRead.model_validate(user))


@router.get(
    "/me",
    response_model=UserRead,
    summary="Current user",
    responses={401: {"description": "Not authenticated"}},
)
async def me(current_user: CurrentUser) -> UserRead:
    return UserRead.model_validate(current_user)
