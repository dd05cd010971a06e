from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import get_current_user, get_user_service
from storefront.domain.errors import ValidationError
from storefront.domain.schemas import RegisterIn, UserOut
from storefront.services.user_service import UserService

router = APIRouter(tags=["users"])


@router.post("/register", response_model=UserOut, status_code=201)
def register(payload: RegisterIn, service: UserService = Depends(get_user_service)):
    """
    Creates a user. The returned id is the token for the x-user-id header.
    """
    try:
        return service.register(payload.email, payload.name, payload.password)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)


@router.get("/users/me", response_model=UserOut)
def read_me(user: dict = Depends(get_current_user)):
    return user
