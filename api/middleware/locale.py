from __future__ import annotations

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from core.i18n import set_locale


def _pick_from_accept_language(al: str) -> str:
    """Return the highest weighted tag of an Accept-Language header.

    Examples:
      'fr-CA,fr;q=0.9,en-US;q=0.8,en;q=0.7' -> 'fr-CA'
    """
    items = []
    for part in al.split(','):
        p = part.strip()
        if not p:
            continue
        seg = p.split(';', 1)
        lang = seg[0].strip()
        q = 1.0
        if len(seg) == 2 and seg[1].strip().startswith('q='):
            try:
                q = float(seg[1].strip()[2:])
            except ValueError:
                q = 1.0
        items.append((lang, q))
    if not items:
        return 'en'
    # stable sort keeps header order for ties
    items.sort(key=lambda x: x[1], reverse=True)
    return items[0][0]


def _normalize(lang: str) -> str:
    """Map a browser tag to a gettext locale name (fr-CA -> fr_CA)."""
    tag = (lang or 'en').strip()
    if tag.lower() in {'en', 'en-us', 'en-gb'}:
        return 'en'
    return tag.replace('-', '_')


class LocaleMiddleware(BaseHTTPMiddleware):
    """Resolve the request locale and store it in context.

    Priority: ?lang=xx > X-Lang > Accept-Language > default 'en'.
    """

    async def dispatch(self, request: Request, call_next):
        lang = request.query_params.get("lang") or request.headers.get("X-Lang")
        if not lang:
            al = request.headers.get("Accept-Language", "")
            lang = _pick_from_accept_language(al) if al else "en"
        set_locale(_normalize(lang))
        request.state.locale = lang
        return await call_next(request)
