"""Build page objects bound to a browser session."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, TypeVar

from ..exceptions import PageInstantiationError

if TYPE_CHECKING:
    from ..driver_factory import BrowserSession

logger = logging.getLogger("gymguard.pom")

TPage = TypeVar("TPage")


def init_page(session: BrowserSession, factory: Callable[[BrowserSession], TPage]) -> TPage:
    """Construct a page with *factory* and check it is bound to *session*.

    *factory* is anything callable with the session as its only argument;
    a page class whose constructor takes the session qualifies.

    Raises
    ------
    PageInstantiationError
        When *factory* raises, or returns a page bound to another session.
    """
    page_name = getattr(factory, "__qualname__", None) or repr(factory)
    try:
        page = factory(session)
    except Exception as exc:
        raise PageInstantiationError(page_name, exc) from exc

    bound = getattr(page, "session", session)
    if bound is not session:
        raise PageInstantiationError(
            page_name, ValueError("page is bound to a different browser session")
        )
    logger.debug("Initialized page %s", page_name)
    return page
