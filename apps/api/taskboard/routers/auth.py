from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.config import settings
from taskboard.deps import client_ip, get_caller_id, get_db
from taskboard.models import User
from taskboard.rate_limit import login_throttle
from taskboard.schemas import AuthOut, LoginIn, MessageOut, SignupIn, UserOut
from taskboard.security import TOKEN_TYPE, create_access_token
from taskboard.users.service import authenticate, delete_account, get_user, signup

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_out(u: User) -> AuthOut:
  return AuthOut(
    accessToken=create_access_token(u.id),
    tokenType=TOKEN_TYPE,
    userId=u.id,
    username=u.username,
    email=u.email,
  )


def _throttle_or_429(request: Request) -> None:
  verdict = login_throttle.attempt(client_ip(request), limit=int(settings.rate_limit_login_per_minute))
  if verdict.allowed:
    return
  raise HTTPException(
    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
    detail="Too many login attempts, retry later",
    headers={"Retry-After": str(verdict.retry_after)},
  )


@router.post("/signup", response_model=AuthOut, status_code=status.HTTP_201_CREATED)
async def signup_user(payload: SignupIn, db: AsyncSession = Depends(get_db)) -> AuthOut:
  u = await signup(db, username=payload.username, email=payload.email, password=payload.password)
  return _auth_out(u)


@router.post("/login", response_model=AuthOut)
async def login(payload: LoginIn, request: Request, db: AsyncSession = Depends(get_db)) -> AuthOut:
  _throttle_or_429(request)
  u = await authenticate(db, username_or_email=payload.usernameOrEmail, password=payload.password)
  return _auth_out(u)


@router.post("/logout", response_model=MessageOut)
async def logout() -> MessageOut:
  # tokens are stateless; the client forgets its token
  return MessageOut(message="Logged out. Discard the access token on the client.")


@router.get("/me", response_model=UserOut)
async def me(caller_id: int = Depends(get_caller_id), db: AsyncSession = Depends(get_db)) -> UserOut:
  u = await get_user(db, caller_id)
  return UserOut(id=u.id, username=u.username, email=u.email)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_me(caller_id: int = Depends(get_caller_id), db: AsyncSession = Depends(get_db)) -> Response:
  await delete_account(db, caller_id)
  return Response(status_code=status.HTTP_204_NO_CONTENT)
