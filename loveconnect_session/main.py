import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import Depends, FastAPI, Request
from pydantic import BaseModel

from .config import settings
from .errors import SessionNotActiveError
from .session import SessionManager

logging.basicConfig(level=settings.LOG_LEVEL)


class LoginIn(BaseModel):
    email: str
    pin: str


class SignupIn(BaseModel):
    name: str
    email: str
    pin: str


def get_manager(request: Request) -> SessionManager:
    manager = getattr(request.app.state, "session", None)
    if manager is None:
        raise SessionNotActiveError("session manager is only available while the app is running")
    return manager


def create_app(manager_factory: Optional[Callable[[], SessionManager]] = None) -> FastAPI:
    factory = manager_factory or SessionManager.from_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with factory() as manager:
            app.state.session = manager
            try:
                yield
            finally:
                app.state.session = None

    app = FastAPI(title="LoveConnect Session", lifespan=lifespan)

    @app.get("/session")
    async def session_state(manager: SessionManager = Depends(get_manager)):
        return manager.state.to_public()

    @app.get("/session/snapshot")
    async def session_snapshot(manager: SessionManager = Depends(get_manager)):
        identity = await manager.cached_identity()
        return {"identity": identity.to_public() if identity else None}

    @app.post("/session/refresh")
    async def session_refresh(manager: SessionManager = Depends(get_manager)):
        await manager.refresh()
        return manager.state.to_public()

    @app.post("/login")
    async def login(inp: LoginIn, manager: SessionManager = Depends(get_manager)):
        return {"success": await manager.login(inp.email, inp.pin)}

    @app.post("/signup")
    async def signup(inp: SignupIn, manager: SessionManager = Depends(get_manager)):
        return {"success": await manager.signup(inp.name, inp.email, inp.pin)}

    @app.post("/logout")
    async def logout(manager: SessionManager = Depends(get_manager)):
        await manager.logout()
        return {"success": True}

    return app


app = create_app()
