from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer

from walletauth.app import App
from walletauth.core.modules.ratelimit.service import client_key

SESSION_COOKIE = "sessionToken"

# Security schemes
bearer_scheme = HTTPBearer(auto_error=False)
cookie_scheme = APIKeyCookie(name=SESSION_COOKIE, auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_session_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
    token_cookie: Annotated[str | None, Depends(cookie_scheme)] = None,
) -> str | None:
    """Get the session token from the session cookie, falling back to an Authorization Bearer header."""
    if token_cookie:
        return token_cookie
    if credentials and credentials.credentials:
        return credentials.credentials
    return None


async def enforce_rate_limit(request: Request, app: Annotated[App, Depends(get_app)]) -> None:
    """Charge the request to its client before any validation or cryptography runs."""
    host = request.client.host if request.client else None
    app.check_rate_limit(client_key(request.headers, host))


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
SessionTokenDep = Annotated[str | None, Depends(get_session_token)]
RateLimited = Depends(enforce_rate_limit)
