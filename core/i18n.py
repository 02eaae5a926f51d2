"""
Message translation with gettext; msgids are the English texts.

Catalogs live under ``locales/<lang>/LC_MESSAGES/messages.mo``. A missing
catalog or msgid falls back to the msgid itself.
"""
from __future__ import annotations

import gettext
from contextvars import ContextVar
from pathlib import Path

import structlog

_current_locale: ContextVar[str] = ContextVar("current_locale", default="en")
_translators: dict[str, gettext.NullTranslations] = {}
_logger = structlog.get_logger(__name__)

LOCALE_DIR = Path(__file__).resolve().parent.parent / "locales"


def set_locale(locale: str) -> None:
    """Set current request locale (fallback to 'en')."""
    _current_locale.set(locale or "en")


def get_locale() -> str:
    """Get current request locale (default 'en')."""
    return _current_locale.get()


def _get_translator(locale: str) -> gettext.NullTranslations:
    tr = _translators.get(locale)
    if tr is not None:
        return tr
    tr = gettext.translation(
        domain="messages",
        localedir=str(LOCALE_DIR),
        languages=[locale],
        fallback=True,
    )
    _translators[locale] = tr
    return tr


def t(msgid: str, **params) -> str:
    """Translate msgid using current locale and format with params."""
    text = _get_translator(get_locale()).gettext(msgid)
    if not params:
        return text
    try:
        return text.format(**params)
    except (KeyError, IndexError, ValueError) as exc:
        _logger.warning("i18n_format_failed", msgid=msgid, params=list(params.keys()), error=str(exc))
        return text
