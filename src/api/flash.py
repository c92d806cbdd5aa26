"""Flash messages: shown once on the next rendered page, then dropped.

Messages live in the signed session cookie (SessionMiddleware), so they
survive the redirect that follows a successful form post.
"""

from fastapi import Request

_SESSION_KEY = "_flashes"

DEBUG = "debug"
SUCCESS = "success"
INFO = "info"


def flash(request: Request, message: str, level: str = INFO) -> None:
    """Queue a message for the next page."""
    pending = list(request.session.get(_SESSION_KEY) or [])
    pending.append([level, message])
    request.session[_SESSION_KEY] = pending


def pop_flashes(request: Request) -> list[tuple[str, str]]:
    """Return and clear the queued (level, message) pairs."""
    pending = request.session.pop(_SESSION_KEY, None) or []
    return [(str(level), str(message)) for level, message in pending]
