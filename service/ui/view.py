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
Offers admin view

OfferAdminView keeps the list of offers shown on the admin page, the
draft being typed into the form and the form mode, and synchronizes
every change with the Offers Service.

Local state is only touched after the service confirms a change, so a
failed call leaves the collection, the draft and the mode exactly as they
were. Failures are logged and returned as a failed Outcome; they never
escape as exceptions.
"""

import logging
import threading
from typing import Callable, List, Optional, Tuple

from service.ui.client import OffersClient, OffersServiceError
from service.ui.state import Composing, Draft, Editing, Mode, Offer, Outcome

logger = logging.getLogger("flask.app")

Listener = Callable[["OfferAdminView"], None]


def _stay():
    """Default navigation: nowhere to go"""


class OfferAdminView:
    """Admin view over the Offers Service"""

    def __init__(
        self,
        client: OffersClient,
        navigate: Callable[[], None] = _stay,
        draft: Optional[Draft] = None,
        mode: Optional[Mode] = None,
    ):
        self._client = client
        self._navigate = navigate
        self._lock = threading.Lock()
        self._listeners: List[Listener] = []
        self._offers: List[Offer] = []
        self._draft = draft.copy() if draft is not None else Draft()
        self._mode: Mode = mode if mode is not None else Composing()
        self.loaded = False

    def __repr__(self):
        return f"<OfferAdminView offers={len(self._offers)} mode={self._mode}>"

    ##################################################
    # READ ACCESS
    ##################################################

    @property
    def offers(self) -> Tuple[Offer, ...]:
        return tuple(self._offers)

    @property
    def draft(self) -> Draft:
        return self._draft.copy()

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def is_editing(self) -> bool:
        return isinstance(self._mode, Editing)

    @property
    def editing_id(self) -> Optional[str]:
        return self._mode.target_id if isinstance(self._mode, Editing) else None

    @property
    def form_heading(self) -> str:
        return "Edit Offer" if self.is_editing else "Add New Offer"

    @property
    def submit_label(self) -> str:
        return "Update Offer" if self.is_editing else "Add Offer"

    def find(self, offer_id) -> Optional[Offer]:
        """Returns the Offer with the given id from the local collection"""
        offer_id = str(offer_id)
        for offer in self._offers:
            if offer.id == offer_id:
                return offer
        return None

    ##################################################
    # OBSERVERS
    ##################################################

    def subscribe(self, listener: Listener) -> None:
        """Calls ``listener(view)`` after every state change"""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    ##################################################
    # OPERATIONS
    ##################################################

    def load(self) -> Outcome:
        """Replaces the local collection with the service's offers"""
        logger.info("Loading offers from %s", self._client.base_url)
        try:
            offers = self._client.list_offers()
        except OffersServiceError as error:
            logger.error("Error fetching offers: %s", error)
            with self._lock:
                self.loaded = True
            self._notify()
            return Outcome.failure(error)

        with self._lock:
            self._offers = list(offers)
            self.loaded = True
        logger.info("Loaded %d offers", len(offers))
        self._notify()
        return Outcome.success(self.offers)

    def edit_field(self, name: str, value: str) -> None:
        """Updates one field of the draft; raises KeyError for unknown fields"""
        with self._lock:
            self._draft.set(name, value)
        self._notify()

    def begin_edit(self, offer: Offer) -> None:
        """Copies an offer into the draft and targets it for update"""
        logger.info("Editing offer [%s]", offer.id)
        with self._lock:
            self._draft = Draft.of(offer)
            self._mode = Editing(offer.id)
        self._notify()

    def submit(self) -> Outcome:
        """Creates a new offer or updates the one being edited"""
        with self._lock:
            mode = self._mode
            payload = self._draft.to_payload()
        if isinstance(mode, Editing):
            return self._update(mode.target_id, payload)
        return self._create(payload)

    def delete(self, offer_id) -> Outcome:
        """Deletes an offer and drops it from the local collection"""
        offer_id = str(offer_id)
        logger.info("Deleting offer [%s]", offer_id)
        try:
            self._client.delete_offer(offer_id)
        except OffersServiceError as error:
            logger.error("Error deleting offer: %s", error)
            return Outcome.failure(error)

        with self._lock:
            self._offers = [offer for offer in self._offers if offer.id != offer_id]
        self._notify()
        return Outcome.success(offer_id)

    def navigate_home(self) -> None:
        """Hands control back to the default route"""
        logger.info("Leaving the offers admin page")
        self._navigate()

    ##################################################
    # HELPERS
    ##################################################

    def _create(self, payload) -> Outcome:
        logger.info("Adding offer %s", payload.get("title"))
        try:
            created = self._client.create_offer(payload)
        except OffersServiceError as error:
            logger.error("Error adding offer: %s", error)
            return Outcome.failure(error)

        with self._lock:
            self._offers.append(created)
            self._draft = Draft()
        self._notify()
        return Outcome.success(created)

    def _update(self, target_id: str, payload) -> Outcome:
        logger.info("Updating offer [%s]", target_id)
        try:
            updated = self._client.update_offer(target_id, payload)
        except OffersServiceError as error:
            logger.error("Error updating offer: %s", error)
            return Outcome.failure(error)

        with self._lock:
            self._offers = [updated if offer.id == target_id else offer for offer in self._offers]
            self._mode = Composing()
            self._draft = Draft()
        self._notify()
        return Outcome.success(updated)
