"""Authentication router for the YouTube OAuth consent flow."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import RedirectResponse, Response

from app.dependencies import get_auth_service, get_youtube_service
from app.errors import AuthFailed, OperationResult, ProviderError
from app.logger import auth_logger
from app.responses import render
from app.services.auth_service import AuthService
from app.services.youtube_service import YouTubeService
from app.session import SessionHandle, get_session

router = APIRouter()


@router.get("/login")
def youtube_login(
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    session: Annotated[SessionHandle, Depends(get_session)],
) -> Response:
    """Redirect the browser to Google's consent screen."""
    auth_url = auth_service.get_youtube_authorization_url(session)
    return session.attach(RedirectResponse(url=auth_url, status_code=status.HTTP_302_FOUND))


@router.get("/Index/oauth")
def youtube_callback(
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    session: Annotated[SessionHandle, Depends(get_session)],
    code: str | None = Query(None),
    state: str | None = Query(None),
    error: str | None = Query(None),
) -> Response:
    """
    Handle YouTube OAuth callback.

    Exchanges the authorization code, stores the token in the session and
    sends the browser back to the home page. A declined consent comes back
    without a code and goes straight home.
    """
    if not code:
        auth_logger.info(f"OAuth consent not granted: {error}")
        return session.attach(RedirectResponse(url="/", status_code=status.HTTP_302_FOUND))

    if not auth_service.state_matches(session, state):
        result = OperationResult.failure(AuthFailed("OAuth state mismatch."))
        return render(result, session, auth_service.settings)

    try:
        auth_service.exchange_youtube_code_for_tokens(session, code)
    except Exception as e:
        auth_logger.error(f"Authentication failed: {e}")
        result = OperationResult.failure(ProviderError(f"Authentication failed: {e}"))
        return render(result, session, auth_service.settings)

    return session.attach(RedirectResponse(url="/", status_code=status.HTTP_302_FOUND))


@router.get("/logout")
def logout(
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    session: Annotated[SessionHandle, Depends(get_session)],
) -> Response:
    """Forget the session's OAuth token and go home."""
    auth_service.logout(session)
    return session.attach(RedirectResponse(url="/", status_code=status.HTTP_302_FOUND))


@router.get("/check-login")
def check_login(
    service: Annotated[YouTubeService, Depends(get_youtube_service)],
) -> Response:
    """Report whether the session holds a usable OAuth token."""
    return render(service.check_login(), service.session, service.settings)
