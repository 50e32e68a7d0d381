"""Conversion between aiohttp cookie jars and JSON-safe cookie records."""
import time
from email.utils import formatdate
from http.cookies import SimpleCookie
from typing import Any, Dict, Iterable, List, Optional

import aiohttp
from yarl import URL

COOKIE_ATTRIBUTES = ('domain', 'path')
COOKIE_FLAGS = ('secure', 'httponly')


# aiohttp has no public accessor for expiry deadlines or host-only
# markers; older releases key them by (domain, name) instead of
# (domain, path, name).
def _jar_expiry(jar: aiohttp.CookieJar, domain: str, path: str, name: str) -> Optional[float]:
    expirations = getattr(jar, '_expirations', {})
    expiry = expirations.get((domain, path, name))
    if expiry is None:
        expiry = expirations.get((domain, name))
    return expiry


def _jar_host_only(jar: aiohttp.CookieJar, domain: str, path: str, name: str) -> bool:
    host_only = getattr(jar, '_host_only_cookies', ())
    return (domain, path, name) in host_only or (domain, name) in host_only


def export_cookies(jar: aiohttp.CookieJar) -> List[Dict[str, Any]]:
    """
    Snapshot every live cookie in the jar.

    Expiry is stored as an absolute timestamp (expires_at) so restoring a
    session never extends a cookie's lifetime.

    Returns:
        List of dicts with name, value, domain, path, secure, httponly,
        host_only and expires_at keys
    """
    cookies = []
    for morsel in jar:
        record: Dict[str, Any] = {'name': morsel.key, 'value': morsel.value}
        for attr in COOKIE_ATTRIBUTES:
            record[attr] = morsel[attr] or ''
        for flag in COOKIE_FLAGS:
            record[flag] = bool(morsel[flag])
        record['host_only'] = _jar_host_only(jar, record['domain'], record['path'], morsel.key)
        record['expires_at'] = _jar_expiry(jar, record['domain'], record['path'], morsel.key)
        cookies.append(record)
    return cookies


def import_cookies(
    jar: aiohttp.CookieJar,
    cookies: Iterable[Dict[str, Any]],
    now: Optional[float] = None
) -> int:
    """
    Load cookie records produced by export_cookies() into a jar.

    Records without a name or domain are skipped since the jar cannot scope
    them, and so are records whose expires_at has passed. Host-only cookies
    stay host-only.

    Args:
        jar: Destination jar
        cookies: Records from export_cookies()
        now: Current time (defaults to time.time())

    Returns:
        Number of records handed to the jar
    """
    now = time.time() if now is None else now
    loaded = 0
    for record in cookies:
        domain = (record.get('domain') or '').lstrip('.')
        if not record.get('name') or not domain:
            continue
        expires_at = record.get('expires_at')
        if expires_at is not None and expires_at <= now:
            continue

        simple = SimpleCookie()
        simple[record['name']] = record.get('value', '')
        morsel = simple[record['name']]
        if not record.get('host_only'):
            morsel['domain'] = domain
        if record.get('path'):
            morsel['path'] = record['path']
        if expires_at is not None:
            morsel['expires'] = formatdate(expires_at, usegmt=True)
        elif record.get('expires'):
            morsel['expires'] = record['expires']
        for flag in COOKIE_FLAGS:
            if record.get(flag):
                morsel[flag] = True

        jar.update_cookies(simple, response_url=URL(f"https://{domain}/"))
        loaded += 1
    return loaded
