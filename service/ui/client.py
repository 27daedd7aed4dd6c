######################################################################
# Copyright 2016, 2024 John J. Rofrano. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
######################################################################

"""
Offers Service client

Thin wrapper around a requests Session that speaks the /offers REST
contract. Every remote failure (connection error, non-2xx status,
malformed body) is raised as a single OffersServiceError.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit

import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from service.common import status
from service.ui.state import Offer

logger = logging.getLogger("flask.app")

# Base url the in-process transport answers on
LOCAL_URL = "http://offers.local"


class OffersServiceError(Exception):
    """
    Raised when a call to the Offers Service fails for any reason.

    Args:
        message (str): short explanation of the failure
        status_code (int | None): HTTP status when the service answered
        details (Any | None): response body when one was returned
    """

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details

    def __str__(self):
        text = super().__str__()
        if self.details is not None:
            return f"{text}: {self.details}"
        return text


class OffersClient:
    """Client for the Offers Service /offers collection"""

    def __init__(self, base_url: str, timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def __repr__(self):
        return f"<OffersClient {self.base_url}>"

    @classmethod
    def in_process(cls, app) -> "OffersClient":
        """Client that serves /offers from ``app`` without opening a socket"""
        session = requests.Session()
        session.mount(LOCAL_URL + "/", WSGIAdapter(app))
        return cls(LOCAL_URL, session=session)

    ##################################################
    # PUBLIC API
    ##################################################

    def list_offers(self) -> List[Offer]:
        """Returns every Offer in service order"""
        data = self._request("GET", "/offers")
        if not isinstance(data, list):
            raise OffersServiceError("Expected a list of offers", details=data)
        return [self._to_offer(item) for item in data]

    def create_offer(self, fields: Dict[str, str]) -> Offer:
        """Creates an Offer and returns it with its service-assigned id"""
        return self._to_offer(self._request("POST", "/offers", json=fields))

    def update_offer(self, offer_id: str, fields: Dict[str, str]) -> Offer:
        """Replaces the content of an Offer and returns the stored version"""
        return self._to_offer(self._request("PUT", f"/offers/{offer_id}", json=fields))

    def delete_offer(self, offer_id: str) -> None:
        """Deletes an Offer"""
        self._request("DELETE", f"/offers/{offer_id}")

    ##################################################
    # HELPERS
    ##################################################

    def _request(self, method: str, path: str, json: Optional[dict] = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            resp = self.session.request(method, url, json=json, timeout=self.timeout)
        except requests.RequestException as error:
            raise OffersServiceError(f"{method} {url} failed: {error}") from error

        if not resp.ok:
            raise OffersServiceError(
                f"{method} {url} returned {resp.status_code}",
                status_code=resp.status_code,
                details=_body_of(resp),
            )

        if resp.status_code == status.HTTP_204_NO_CONTENT or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as error:
            raise OffersServiceError(
                f"{method} {url} returned a malformed body",
                status_code=resp.status_code,
                details=resp.text[:500],
            ) from error

    @staticmethod
    def _to_offer(data: Any) -> Offer:
        try:
            return Offer.from_dict(data)
        except (KeyError, TypeError) as error:
            raise OffersServiceError("Malformed offer record", details=data) from error


def _body_of(resp: requests.Response) -> Any:
    """Best-effort decode of an error response body"""
    try:
        return resp.json()
    except ValueError:
        return resp.text[:500] or None


class WSGIAdapter(BaseAdapter):
    """
    requests transport that hands each request to a Flask app in-process

    Used when the admin page manages the app's own /offers collection, so a
    page request never waits on another request to the same worker.
    """

    def __init__(self, app):
        super().__init__()
        self.app = app

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        # pylint: disable=too-many-arguments, too-many-positional-arguments, unused-argument
        parts = urlsplit(request.url)
        path = f"{parts.path}?{parts.query}" if parts.query else parts.path
        result = self.app.test_client().open(
            path,
            method=request.method,
            data=request.body,
            headers=dict(request.headers),
        )

        resp = requests.Response()
        resp.status_code = result.status_code
        resp.reason = result.status.partition(" ")[2]
        resp.headers = CaseInsensitiveDict(result.headers)
        resp.encoding = result.mimetype_params.get("charset", "utf-8")
        resp._content = result.get_data()  # pylint: disable=protected-access
        resp.url = request.url
        resp.request = request
        resp.connection = self
        return resp

    def close(self):
        """Nothing to release"""
