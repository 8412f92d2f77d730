from json import JSONDecodeError

import orjson
import requests

from smartsheet_api import PROJECT_ROOT
from smartsheet_api.apis.api_util import ValidatedResponse
from smartsheet_api.apis.exception import (
    HttpCodeError,
    InvalidHttpMethodError,
    ResourceNotFoundError,
)
from smartsheet_api.apis.logging_session import LoggingSession
from smartsheet_api.models.trace_settings import TraceSettings

DEFAULT_HOST = "https://api.smartsheet.com/2.0"


class ApiClient:
    """
    Generic API Client for the Smartsheet API
    """

    def __init__(
        self,
        access_token: str | None = None,
        trace_settings: TraceSettings | None = None,
        host: str = DEFAULT_HOST,
    ):
        """
        Args:
            access_token (str | None, optional): API access token, not including the
                'Bearer ' prefix (that's added to the request header). Defaults to None.
            trace_settings (TraceSettings | None, optional): what to log about each
                exchange. Defaults to None, in which case the SMARTSHEET_TRACE_*
                environment variables are read.
            host (str, optional): API base url. Defaults to DEFAULT_HOST.
        """

        self.default_headers = orjson.loads(
            (PROJECT_ROOT / "default_headers.json").read_bytes()
        )
        self.trace_settings = (
            trace_settings if trace_settings is not None else TraceSettings.from_env()
        )
        if self.trace_settings.enabled:
            self.session = LoggingSession(self.trace_settings)
        else:
            self.session = requests.Session()
        self.session.headers.update(self.default_headers)

        self.access_token = access_token
        if access_token:
            self.update_access_token(access_token)

        self.configuration = {"host": host}

    def update_access_token(self, access_token: str):
        self.access_token = access_token
        self.default_headers.update({"Authorization": "Bearer " + self.access_token})
        self.session.headers.update({"Authorization": "Bearer " + self.access_token})

    def call_api(
        self,
        resource_path: str,
        method: str,
        headers: dict = None,
        params: dict = None,
        body: dict = None,
        ok_error_codes: list[int] = None,
    ) -> ValidatedResponse:
        """Calls API on the provided path

        Args:
            resource_path (str): Specific Smartsheet API path endpoint, e.g. "/sheets".
            method (str): HTTP request method
            headers (dict, optional): extra request headers. Defaults to None, in
                which case only the ones in `default_headers.json` are used.
            params (dict, optional): endpoint query parameters. Defaults to None.
            body (dict, optional): JSON payload to send if request is POST/PUT. Defaults
                to None.
            ok_error_codes (list[int], optional): Smartsheet `errorCode`s that will be
                handled by calling code and which shouldn't raise. Defaults to None.

        Returns:
            ValidatedResponse
        """

        headers = dict(headers or {})

        if body:  # POST or PUT
            headers.update({"Content-Type": "application/json; charset=utf-8"})
        url = self.configuration["host"] + resource_path

        if method not in ["POST", "PUT", "GET", "DELETE"]:
            raise InvalidHttpMethodError(method)

        response = self.session.request(
            method=method, url=url, headers=headers, params=params, json=body
        )
        validated_response = self._validate_response(response, ok_error_codes)
        return validated_response

    @staticmethod
    def _validate_response(
        response: requests.Response, ok_error_codes: list[int] = None
    ) -> ValidatedResponse:
        """
        Validate and build a new validated response.
        """
        headers = response.headers
        try:
            body = response.json()
        except JSONDecodeError:
            body = {}

        built_response = ValidatedResponse(response.status_code, headers, body)
        error_code = body.get("errorCode") if isinstance(body, dict) else None

        if 200 <= response.status_code < 300 or (
            ok_error_codes and error_code in ok_error_codes
        ):
            return built_response

        elif response.status_code == 404:
            raise ResourceNotFoundError(
                body.get("message") if isinstance(body, dict) else None
            )

        else:
            raise HttpCodeError(response=response)
