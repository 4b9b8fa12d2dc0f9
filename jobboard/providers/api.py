# jobboard/providers/api.py
import logging

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from .base import IdentityProvider, ListingBackend, SearchQuery
from ..config import settings
from ..errors import InvalidInput, JobBoardError, NotFound, TransientError, Unauthorized
from ..schemas import JobIn, JobOut, Principal, ResultPage

log = logging.getLogger(__name__)


def _detail(r: httpx.Response) -> str:
    try:
        body = r.json()
    except ValueError:
        return r.text or r.reason_phrase
    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"])
    return str(body)


def _parse(r: httpx.Response, model):
    # a 2xx body that is not the expected JSON usually comes from a proxy
    try:
        return model.model_validate(r.json())
    except ValueError as e:
        raise TransientError(f"unexpected response from {r.request.url.path}: {e}") from e


def _raise_for_status(r: httpx.Response) -> None:
    if r.is_success:
        return
    msg = _detail(r)
    if r.status_code in (401, 403):
        raise Unauthorized(msg)
    if r.status_code == 404:
        raise NotFound(msg)
    if r.status_code in (400, 422):
        raise InvalidInput(msg)
    if r.status_code >= 500 or r.status_code == 429:
        raise TransientError(msg)
    raise JobBoardError(msg)


class ApiClient(ListingBackend, IdentityProvider):
    """Talks to the job board HTTP API.

    A fresh httpx client is opened for every call, so instances hold only
    configuration and are safe to share.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        credentials: dict | None = None,
        timeout: float | None = None,
        retry_attempts: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.API_BASE_URL
        self.credentials = dict(credentials or {})
        self.timeout = settings.QUERY_TIMEOUT if timeout is None else timeout
        self.retry_attempts = retry_attempts or settings.QUERY_RETRY_ATTEMPTS
        self._transport = transport

    async def _send(self, method: str, path: str, **kw) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=self.credentials,
            transport=self._transport,
        ) as client:
            try:
                r = await client.request(method, path, **kw)
            except httpx.TimeoutException as e:
                raise TransientError(f"{method} {path} timed out") from e
            except httpx.TransportError as e:
                raise TransientError(f"{method} {path} failed: {e}") from e
            except httpx.HTTPError as e:
                raise JobBoardError(f"{method} {path} failed: {e}") from e
        _raise_for_status(r)
        return r

    async def _request(self, method: str, path: str, **kw) -> httpx.Response:
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(TransientError),
            wait=wait_exponential(min=1, max=8),
            stop=stop_after_attempt(self.retry_attempts),
            reraise=True,
        ):
            with attempt:
                return await self._send(method, path, **kw)

    async def search(self, query: SearchQuery) -> ResultPage:
        params = {
            "q": query.get("term") or "",
            "job_type": query.get("job_type") or "",
            "country": query.get("country") or "",
            "state": query.get("state") or "",
            "page": query.get("page_number", 1),
            "page_size": query.get("page_size", settings.PAGE_SIZE),
        }
        # the server scopes "mine" to the authenticated principal, never to
        # an id taken from the request
        if query.get("owner_id"):
            params["mine"] = "true"
        r = await self._request("GET", "/api/jobs", params=params)
        return _parse(r, ResultPage)

    async def get(self, listing_id: str) -> JobOut:
        r = await self._request("GET", f"/api/jobs/{listing_id}")
        return _parse(r, JobOut)

    async def create(self, data: JobIn) -> JobOut:
        r = await self._request("POST", "/api/jobs", json=data.model_dump())
        return _parse(r, JobOut)

    async def update(self, listing_id: str, data: JobIn) -> JobOut:
        r = await self._request("PUT", f"/api/jobs/{listing_id}", json=data.model_dump())
        return _parse(r, JobOut)

    async def delete(self, listing_id: str) -> None:
        await self._request("DELETE", f"/api/jobs/{listing_id}")
        log.info("deleted listing %s", listing_id)

    async def current_principal(self) -> str | None:
        r = await self._request("GET", "/api/me")
        return _parse(r, Principal).principal_id
