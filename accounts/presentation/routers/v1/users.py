from typing import Annotated, Callable

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from fastapi.responses import RedirectResponse

from accounts.application.create_user import UserDraft, create_user
from accounts.application.login_user import login_user
from accounts.application.lookup_user import get_user_by_email, get_user_by_id
from accounts.application.update_user import ProfilePatch, update_user
from accounts.application.verify_email import verify_email
from accounts.domain.errors import (
    CertificationCodeMismatch,
    UserAlreadyExists,
    UserNotFound,
)
from accounts.domain.ports.unit_of_work import UnitOfWorkPort
from accounts.presentation.dependencies import (
    get_certification_base_url,
    get_clock,
    get_uow,
    get_verified_redirect_url,
)
from accounts.schemas.requests import UserCreateIn, UserUpdateIn
from accounts.schemas.responses import MyProfileOut, UserOut

router = APIRouter(prefix="/users", tags=["Users"])

CallerEmail = Annotated[str, Header(alias="X-User-Email", min_length=3)]


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="user not found")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=UserOut)
async def post_create_user(
    body: UserCreateIn,
    uow: Annotated[UnitOfWorkPort, Depends(get_uow)],
    certification_base_url: Annotated[str, Depends(get_certification_base_url)],
):
    try:
        user = await create_user(
            uow=uow,
            draft=UserDraft(email=body.email, nickname=body.nickname, address=body.address),
            certification_base_url=certification_base_url,
        )
    except UserAlreadyExists:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="email already registered"
        )
    return UserOut.model_validate(user)


# /me routes are declared before /{user_id} so "me" is not parsed as an id
@router.get("/me", response_model=MyProfileOut)
async def get_my_profile(
    email: CallerEmail,
    uow: Annotated[UnitOfWorkPort, Depends(get_uow)],
    clock: Annotated[Callable[[], int], Depends(get_clock)],
):
    try:
        user = await get_user_by_email(uow, email)
        await login_user(uow, user.id, now_millis=clock)
        user = await get_user_by_id(uow, user.id)
    except UserNotFound:
        raise _not_found()
    return MyProfileOut.model_validate(user)


@router.put("/me", response_model=MyProfileOut)
async def put_my_profile(
    email: CallerEmail,
    body: UserUpdateIn,
    uow: Annotated[UnitOfWorkPort, Depends(get_uow)],
):
    try:
        user = await get_user_by_email(uow, email)
        user = await update_user(
            uow, user.id, ProfilePatch(address=body.address, nickname=body.nickname)
        )
    except UserNotFound:
        raise _not_found()
    return MyProfileOut.model_validate(user)


@router.get("/{user_id}", response_model=UserOut)
async def get_user(
    user_id: int,
    uow: Annotated[UnitOfWorkPort, Depends(get_uow)],
):
    try:
        user = await get_user_by_id(uow, user_id)
    except UserNotFound:
        raise _not_found()
    return UserOut.model_validate(user)


@router.get("/{user_id}/verify", status_code=status.HTTP_302_FOUND)
async def get_verify_email(
    user_id: int,
    certification_code: Annotated[str, Query(min_length=1)],
    uow: Annotated[UnitOfWorkPort, Depends(get_uow)],
    redirect_url: Annotated[str, Depends(get_verified_redirect_url)],
):
    try:
        await verify_email(uow, user_id, certification_code)
    except UserNotFound:
        raise _not_found()
    except CertificationCodeMismatch:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="certification code mismatch"
        )
    return RedirectResponse(redirect_url, status_code=status.HTTP_302_FOUND)
