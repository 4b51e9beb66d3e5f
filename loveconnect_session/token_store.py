from __future__ import annotations

from typing import Optional, Protocol

import httpx


class TokenStore(Protocol):
    def get_token(self) -> Optional[str]: ...


class CookieTokenStore:
    """Reads the bearer token the remote authority keeps in the cookie jar.

    The jar is written by httpx when a response carries Set-Cookie; this class
    never writes it, apart from ``seed`` at start-up.
    """

    def __init__(self, cookies: httpx.Cookies, name: str = "loveconnect"):
        self.cookies = cookies
        self.name = name

    def get_token(self) -> Optional[str]:
        # один и тот же cookie может прийти для разных доменов, берём последний
        values = [c.value for c in self.cookies.jar if c.name == self.name]
        if not values or not values[-1]:
            return None
        return values[-1]

    def seed(self, token: str, domain: str = "") -> None:
        self.cookies.set(self.name, token, domain=domain)
