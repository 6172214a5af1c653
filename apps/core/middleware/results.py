"""
Outcomes of the tenant context middleware steps.

The context functions return one of these instead of building responses, so
they can be called and asserted on without a request. The middleware turns
``RedirectTo`` into an HTTP redirect with an optional flash message.
"""
from dataclasses import dataclass
from typing import Optional, Union

from django.contrib import messages
from django.http import HttpResponseRedirect

NOTICE_LEVELS = {
    'success': messages.SUCCESS,
    'error': messages.ERROR,
    'warning': messages.WARNING,
}


@dataclass(frozen=True)
class Notice:
    level: str
    message: str

    def __post_init__(self):
        if self.level not in NOTICE_LEVELS:
            raise ValueError(f"Unknown notice level: {self.level!r}")


@dataclass(frozen=True)
class Continue:
    pass


@dataclass(frozen=True)
class RedirectTo:
    path: str
    notice: Optional[Notice] = None


ContextResult = Union[Continue, RedirectTo]


def to_response(request, result: RedirectTo) -> HttpResponseRedirect:
    if result.notice is not None:
        messages.add_message(
            request,
            NOTICE_LEVELS[result.notice.level],
            result.notice.message,
            fail_silently=True,
        )
    return HttpResponseRedirect(result.path)
