"""HTTP client for the Yahoo Finance API with cookie and crumb session handling."""

from __future__ import annotations

import re
from typing import Any, Optional
from urllib.parse import urljoin

import requests

_BASE_URL = "https://query1.finance.yahoo.com"
_FINANCE_URL = "https://finance.yahoo.com/"
_CRUMB_URL = "https://query2.finance.yahoo.com/v1/test/getcrumb"
_CONSENT_URL = "https://consent.yahoo.com/v2/collectConsent?sessionId="

_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/113.0.0.0 Safari/537.36"
)
_UA_BRANDS = '"Google Chrome";v="113", "Chromium";v="113", "Not-A.Brand";v="24"'
_UA_PLATFORM = '"Windows"'

_API_HEADERS = {
    "authority": "query1.finance.yahoo.com",
    "accept": "*/*",
    "accept-language": "en-US,en;q=0.9,ja;q=0.8",
    "origin": "https://finance.yahoo.com",
    "sec-ch-ua": _UA_BRANDS,
    "sec-ch-ua-mobile": "?0",
    "sec-ch-ua-platform": _UA_PLATFORM,
    "sec-fetch-dest": "empty",
    "sec-fetch-mode": "cors",
    "sec-fetch-site": "same-site",
    "user-agent": _USER_AGENT,
}

_DEFAULT_PARAMS = {
    "formatted": "true",
    "lang": "en-US",
    "region": "US",
    "corsDomain": "finance.yahoo.com",
}

_DOCUMENT_HEADERS = {
    "authority": "finance.yahoo.com",
    "accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,"
        "image/webp,image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.7"
    ),
    "accept-language": "en-US,en;q=0.9",
    "sec-ch-ua": _UA_BRANDS,
    "sec-ch-ua-mobile": "?0",
    "sec-ch-ua-platform": _UA_PLATFORM,
    "sec-fetch-dest": "document",
    "sec-fetch-mode": "navigate",
    "sec-fetch-site": "none",
    "sec-fetch-user": "?1",
    "upgrade-insecure-requests": "1",
    "user-agent": _USER_AGENT,
}

_CRUMB_HEADERS = {
    "authority": "query2.finance.yahoo.com",
    "accept": "*/*",
    "accept-language": "en-US,en;q=0.9,ja;q=0.8",
    "content-type": "text/plain",
    "origin": "https://finance.yahoo.com",
    "sec-ch-ua": _UA_BRANDS,
    "sec-ch-ua-mobile": "?0",
    "sec-ch-ua-platform": _UA_PLATFORM,
    "sec-fetch-dest": "empty",
    "sec-fetch-mode": "cors",
    "sec-fetch-site": "same-site",
    "user-agent": _USER_AGENT,
}

_RE_GCRUMB = re.compile(r"gcrumb=(?:([A-Za-z0-9_]*))")
_RE_CONSENT_SESSION = re.compile(r"sessionId=(?:([A-Za-z0-9_-]*))")


class SessionRefreshError(Exception):
    """Raised when a Yahoo session cookie or crumb cannot be obtained."""


def _follow(
    session: requests.Session, method: str, url: str, max_requests: int, **kwargs: Any
) -> list[requests.Response]:
    """Issue a request, following at most ``max_requests - 1`` redirects.

    Returns every response in the chain, the last one being the final response.
    """
    chain: list[requests.Response] = []
    while True:
        response = session.request(method, url, allow_redirects=False, **kwargs)
        chain.append(response)
        if not response.is_redirect or len(chain) >= max_requests:
            return chain
        url = urljoin(response.url, response.headers["Location"])
        if response.status_code not in (307, 308):
            method = "GET"
            kwargs.pop("data", None)


def _set_cookie_headers(response: requests.Response) -> list[str]:
    raw_headers = getattr(getattr(response, "raw", None), "headers", None)
    if raw_headers is not None and hasattr(raw_headers, "getlist"):
        return list(raw_headers.getlist("Set-Cookie"))
    value = response.headers.get("Set-Cookie")
    return [value] if value else []


def _response_cookies(response: requests.Response) -> dict[str, str]:
    """Cookies set by this one response, parsed from its Set-Cookie headers."""
    cookies: dict[str, str] = {}
    for header in _set_cookie_headers(response):
        pair = header.split(";", 1)[0]
        name, sep, value = pair.partition("=")
        name = name.strip()
        if name and sep:
            cookies[name] = value.strip()
    return cookies


def _is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300


def _is_eu_consent_redirect(response: requests.Response) -> bool:
    return (
        "guce.yahoo.com" in response.headers.get("Location", "")
        and 300 <= response.status_code < 400
    )


class YahooClient:
    """Client for the quote API that refreshes its session when a request fails."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        session_refresh: Optional[requests.Session] = None,
        base_url: str = _BASE_URL,
    ) -> None:
        self.session = session if session is not None else requests.Session()
        self.session_refresh = (
            session_refresh if session_refresh is not None else requests.Session()
        )
        self.base_url = base_url
        self.session.headers.update(_API_HEADERS)
        self.params: dict[str, str] = dict(_DEFAULT_PARAMS)

    def _request(self, path: str, params: Optional[dict[str, str]]) -> requests.Response:
        merged = {**self.params, **(params or {})}
        return self.session.get(self.base_url + path, params=merged, allow_redirects=False)

    def get(self, path: str, params: Optional[dict[str, str]] = None) -> requests.Response:
        """GET a path of the API; on an error response refresh the session and retry once."""
        response = self._request(path, params)
        if response.status_code >= 400:
            self.refresh_session()
            response = self._request(path, params)
        return response

    def refresh_session(self) -> None:
        """Obtain a fresh session cookie and crumb and apply them to the API session."""
        cookies = self._get_cookie()
        crumb = self._get_crumb(cookies)
        self.session.cookies.update(cookies)
        self.params["crumb"] = crumb

    def _get_cookie(self) -> dict[str, str]:
        try:
            chain = _follow(
                self.session_refresh, "GET", _FINANCE_URL, 1, headers=_DOCUMENT_HEADERS
            )
        except requests.RequestException as exc:
            raise SessionRefreshError(f"error requesting a cookie: {exc}") from exc

        response = chain[-1]
        if _is_eu_consent_redirect(response):
            return self._get_cookie_eu()

        cookies = _response_cookies(response)
        if "A3" not in cookies:
            raise SessionRefreshError(
                "unexpected response from Yahoo API: A3 session cookie missing from response"
            )
        return cookies

    def _get_cookie_eu(self) -> dict[str, str]:
        try:
            chain = _follow(
                self.session_refresh, "GET", _FINANCE_URL, 3, headers=_DOCUMENT_HEADERS
            )
        except requests.RequestException as exc:
            raise SessionRefreshError(
                f"error attempting to get Yahoo API session id: {exc}"
            ) from exc

        final = chain[-1]
        if not _is_success(final):
            raise SessionRefreshError(
                "unexpected response from Yahoo API: non-2xx response code: "
                f"{final.status_code}"
            )

        session_match = _RE_CONSENT_SESSION.search(final.url or "")
        if session_match is None:
            raise SessionRefreshError(
                f"error unable to extract session id from redirected request URL: {final.url}"
            )
        session_id = session_match.group(1)

        gcrumb_match = _RE_GCRUMB.search(chain[-2].url or "") if len(chain) >= 2 else None
        if gcrumb_match is None:
            raise SessionRefreshError(
                "error unable to extract CSRF token from Location header: "
                f"'{final.headers.get('Location', '')}'"
            )
        gcrumb = gcrumb_match.group(1)

        gucs_cookies = _response_cookies(chain[-3]) if len(chain) >= 3 else {}
        if not gucs_cookies:
            raise SessionRefreshError("no cookies set by finance.yahoo.com")

        consent_headers = {
            "origin": "https://consent.yahoo.com",
            "host": "consent.yahoo.com",
            "content-type": "application/x-www-form-urlencoded",
            "accept": (
                "text/html,application/xhtml+xml,application/xml;q=0.9,"
                "image/avif,image/webp,*/*;q=0.8"
            ),
            "accept-language": "en-US,en;q=0.5",
            "accept-encoding": "gzip, deflate, br",
            "dnt": "1",
            "sec-ch-ua": _UA_BRANDS,
            "sec-ch-ua-mobile": "?0",
            "sec-ch-ua-platform": _UA_PLATFORM,
            "sec-fetch-dest": "document",
            "sec-fetch-mode": "navigate",
            "sec-fetch-site": "same-origin",
            "sec-fetch-user": "?1",
            "referer": _CONSENT_URL + session_id,
            "user-agent": _USER_AGENT,
        }
        form = {
            "csrfToken": gcrumb,
            "sessionId": session_id,
            "namespace": "yahoo",
            "agree": "agree",
        }
        try:
            consent_chain = _follow(
                self.session_refresh,
                "POST",
                _CONSENT_URL + session_id,
                2,
                headers=consent_headers,
                cookies=gucs_cookies,
                data=form,
            )
        except requests.RequestException as exc:
            raise SessionRefreshError(
                f"error attempting to agree to EU consent request: {exc}"
            ) from exc

        consent = consent_chain[-1]
        cookies = _response_cookies(consent)
        if "A3" not in cookies:
            raise SessionRefreshError(
                "unexpected response from Yahoo API: A3 session cookie missing from "
                f"response after agreeing to EU consent request: {consent.status_code}"
            )
        return cookies

    def _get_crumb(self, cookies: dict[str, str]) -> str:
        try:
            response = self.session_refresh.get(
                _CRUMB_URL, headers=_CRUMB_HEADERS, cookies=cookies
            )
        except requests.RequestException as exc:
            raise SessionRefreshError(f"error requesting a crumb: {exc}") from exc

        if not _is_success(response):
            raise SessionRefreshError(
                "unexpected response from Yahoo API when attempting to retrieve crumb: "
                f"non-2xx response code: {response.status_code}"
            )
        return response.text