"""Sign-in and sign-out routes."""

import logging

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from ...clients.base import StoreError
from ..dependencies import get_client, get_settings, render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    return render(request, "login.html", {"email": "", "error": None})


@router.post("/login")
async def login(request: Request, email: str = Form(""), password: str = Form("")):
    """Sign in and store the session token in a cookie.

    Whether the account may use the portal is decided on the next page
    load, so a non-admin ends up back here.
    """
    settings = get_settings(request)
    try:
        session = await get_client(request).auth.sign_in(email.strip(), password)
    except StoreError as e:
        logger.info(f"Sign-in failed for {email}: {e}")
        return render(
            request, "login.html", {"email": email, "error": e.message}, status_code=400
        )

    response = RedirectResponse(url="/", status_code=302)
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        session.access_token,
        max_age=settings.SESSION_TTL_HOURS * 3600,
        httponly=True,
        samesite="lax",
    )
    return response


@router.post("/logout")
async def logout(request: Request):
    """End the session and clear the cookie."""
    settings = get_settings(request)
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        try:
            await get_client(request).auth.sign_out(token)
        except StoreError as e:
            logger.warning(f"Sign-out failed: {e}")

    response = RedirectResponse(url="/login", status_code=302)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response
