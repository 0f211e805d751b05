from fastapi import APIRouter, Depends, HTTPException, Request

from auth import SessionContext
from dependencies import get_session_context
from models import LoginIn, SessionOut

router = APIRouter()


@router.post("/auth/login", response_model=SessionOut)
def login_api(body: LoginIn, request: Request):
    ctx = request.app.state.sessions.login(body.username, body.password)
    if ctx is None:
        raise HTTPException(status_code=401, detail="invalid username or password")
    return SessionOut(token=ctx.token, username=ctx.username, role=ctx.role)


@router.post("/auth/logout", status_code=204)
def logout_api(request: Request, ctx: SessionContext = Depends(get_session_context)):
    request.app.state.sessions.logout(ctx.token)
    return None


@router.get("/auth/me", response_model=SessionOut)
def me_api(ctx: SessionContext = Depends(get_session_context)):
    return SessionOut(token=ctx.token, username=ctx.username, role=ctx.role)
