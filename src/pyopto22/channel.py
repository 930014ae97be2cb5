"""RemoteChannel: JSON GET/POST against the controller's REST interface over requests."""

import logging
from typing import Any

import requests

from .error_log import ErrorLog
from .errors import RemoteError
from .types import RequestLog

logger = logging.getLogger(__name__)


class RemoteChannel:
    """
    Thin transport over a requests.Session with basic auth.

    Every request is counted in the RequestLog; any non-2xx response or
    connection failure raises RemoteError (recorded to the ErrorLog when one is
    configured). Nothing is retried.
    """

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        *,
        scheme: str = "http",
        port: int | None = None,
        timeout: float = 10.0,
        verify: bool = True,
        request_log: RequestLog | None = None,
        error_log: ErrorLog | None = None,
    ) -> None:
        netloc = host if port is None else f"{host}:{port}"
        self._base_url = f"{scheme}://{netloc}"
        self._timeout = timeout
        self._verify = verify
        self._request_log = request_log if request_log is not None else RequestLog()
        self._error_log = error_log
        self._session = requests.Session()
        self._session.auth = (username, password)
        self._session.headers.update({"Accept": "application/json"})

    def url_for(self, path: str) -> str:
        return f"{self._base_url}{path}"

    def get_json(self, path: str) -> Any:
        """GET path and return the decoded JSON body."""
        response = self._request("GET", path)
        try:
            return response.json()
        except ValueError as e:
            raise self.invalid_response(path, status=response.status_code, cause=e) from e

    def invalid_response(self, path: str, *, status: int | None = None, cause: BaseException | None = None) -> RemoteError:
        """Build (and record) the RemoteError for a GET body that cannot be used."""
        return self._fail("GET", path, status=status, cause=cause, error_type="Invalid Response")

    def post_json(self, path: str, payload: Any) -> None:
        """POST payload as JSON to path."""
        self._request("POST", path, json=payload)

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = self.url_for(path)
        self._request_log.record(method, url)
        logger.debug("%s %s", method, url)
        try:
            response = self._session.request(method, url, timeout=self._timeout, verify=self._verify, **kwargs)
        except (requests.ConnectionError, requests.Timeout) as e:
            raise self._fail(method, path, cause=e) from e
        except requests.RequestException as e:
            raise self._fail(method, path, cause=e, error_type="Request Error") from e
        if not 200 <= response.status_code < 300:
            raise self._fail(method, path, status=response.status_code)
        return response

    def _fail(
        self,
        method: str,
        path: str,
        *,
        status: int | None = None,
        cause: BaseException | None = None,
        error_type: str | None = None,
    ) -> RemoteError:
        error = RemoteError(
            method, self.url_for(path), path=path, status=status, cause=cause, error_type=error_type
        )
        logger.warning("%s", error)
        if self._error_log is not None:
            try:
                self._error_log.record(error)
            except OSError as e:
                logger.warning("Error writing to error log %s: %s", self._error_log.path, e)
        return error

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def request_log(self) -> RequestLog:
        return self._request_log
