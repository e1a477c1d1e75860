import uuid
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from fastapi import Request, Response

from config import Settings

VISITOR_COOKIE_NAME = "visitor-id"


@dataclass
class VisitorCookie:
    value: str
    max_age: int
    secure: bool
    path: str = "/"
    name: str = VISITOR_COOKIE_NAME

    @property
    def samesite(self) -> str:
        # Browsers drop SameSite=None cookies that are not also Secure
        return "none" if self.secure else "lax"

    def apply(self, response: Response):
        response.set_cookie(
            key=self.name,
            value=self.value,
            max_age=self.max_age,
            path=self.path,
            secure=self.secure,
            httponly=True,
            samesite=self.samesite,
        )


def get_visitor_cookie(request: Request) -> Optional[str]:
    """Return the visitor id sent by the browser, or None.

    An empty value counts as no cookie at all.
    """
    value = request.cookies.get(VISITOR_COOKIE_NAME)
    if not value:
        return None
    return value


def create_visitor_cookie(settings: Settings) -> VisitorCookie:
    return VisitorCookie(
        value=str(uuid.uuid4()),
        max_age=int(timedelta(days=settings.cookie_max_age_days).total_seconds()),
        secure=settings.cookie_secure,
    )
