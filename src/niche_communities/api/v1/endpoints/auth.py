"""Authentication endpoints: signup, login and logout."""

from fastapi import APIRouter, Response, status

from niche_communities.core.security import create_access_token
from niche_communities.schemas.auth import LoginRequest, SignupRequest, TokenResponse
from niche_communities.schemas.user import PrivateUserResponse
from niche_communities.services import auth as auth_service

from ..dependencies import AuthContextDep, SessionDep

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(user) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(user.id),
        user=PrivateUserResponse.model_validate(user),
    )


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def signup(payload: SignupRequest, db: SessionDep) -> TokenResponse:
    """Create an account and sign it in."""
    user = auth_service.create_account(
        db,
        email=payload.email,
        password=payload.password,
        display_name=payload.display_name,
    )
    return _token_response(user)


@router.post("/login", response_model=TokenResponse)
async def login(payload: LoginRequest, db: SessionDep) -> TokenResponse:
    """Exchange e-mail and password for an access token."""
    user = auth_service.authenticate(db, email=payload.email, password=payload.password)
    return _token_response(user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def logout(auth: AuthContextDep, db: SessionDep) -> Response:
    """Revoke the token used for this request."""
    auth_service.sign_out(db, user_id=auth.user.id, jti=auth.jti)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
