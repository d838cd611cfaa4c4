from fastapi import APIRouter, Depends, Response, status

from crowdfund.core.dependencies import TOKEN_COOKIE, get_auth_service, get_current_identity
from crowdfund.models.user import User
from crowdfund.schemas.user import Identity, UserLogin, UserPublic, UserRegister
from crowdfund.services.auth_service import AuthService

router = APIRouter()


def serialize_user(db_user: User) -> UserPublic:
    # Return without the password hash
    return UserPublic(
        id=db_user.id,
        first_name=db_user.first_name,
        last_name=db_user.last_name,
        email=db_user.email,
        avatar=db_user.avatar,
    )


@router.post("/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def register_user(user: UserRegister, auth: AuthService = Depends(get_auth_service)):
    """Public endpoint to create an account"""
    return serialize_user(auth.register(user))


@router.post("/login", response_model=UserPublic)
def login_user(
    credentials: UserLogin,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
):
    """Verify credentials and set the session cookie"""
    token, db_user = auth.login(credentials.email, credentials.password)
    response.set_cookie(TOKEN_COOKIE, token, httponly=True, samesite="lax")
    return serialize_user(db_user)


@router.post("/logout", response_model=bool)
def logout_user(response: Response):
    response.delete_cookie(TOKEN_COOKIE, httponly=True, samesite="lax")
    return True


@router.get("/profile", response_model=UserPublic)
def get_profile(
    identity: Identity = Depends(get_current_identity),
    auth: AuthService = Depends(get_auth_service),
):
    """Public fields of the logged-in user - requires authentication"""
    return serialize_user(auth.get_profile(identity))
