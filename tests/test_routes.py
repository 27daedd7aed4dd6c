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
Offer API Service Test Suite
"""

import logging
from unittest import TestCase
from unittest.mock import patch

from wsgi import app
from service.common import status
from service.models import DatabaseError, Offer, db
from tests.factories import OfferFactory

BASE_URL = "/offers"


def make_payload(**overrides) -> dict:
    """Build a valid offer JSON payload"""
    base = {
        "img": "https://example.com/spring.png",
        "title": "Spring Sale",
        "code": "SPRING10",
        "description": "10% off everything",
    }
    base.update(overrides)
    return base


######################################################################
#  H A P P Y   P A T H S
######################################################################
class TestOfferService(TestCase):
    """REST API Server Tests"""

    @classmethod
    def setUpClass(cls):
        """Run once before all tests"""
        app.config["TESTING"] = True
        app.config["DEBUG"] = False
        app.logger.setLevel(logging.CRITICAL)
        cls.ctx = app.app_context()
        cls.ctx.push()

    @classmethod
    def tearDownClass(cls):
        """Run once after all tests"""
        db.session.close()
        cls.ctx.pop()

    def setUp(self):
        """Runs before each test"""
        self.client = app.test_client()
        db.session.query(Offer).delete()
        db.session.commit()

    def tearDown(self):
        """Runs after each test"""
        db.session.remove()

    def _create_offers(self, count):
        """Factory method to create offers in bulk"""
        offers = []
        for _ in range(count):
            test_offer = OfferFactory()
            resp = self.client.post(BASE_URL, json=test_offer.serialize())
            self.assertEqual(resp.status_code, status.HTTP_201_CREATED, "Could not create test offer")
            test_offer.id = resp.get_json()["id"]
            offers.append(test_offer)
        return offers

    # ---------- Home ----------
    def test_index(self):
        """It should call the home page"""
        resp = self.client.get("/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        data = resp.get_json()
        self.assertEqual(data["name"], "Offers Service")
        self.assertIn("offers", data["paths"])

    def test_health(self):
        """It should report healthy"""
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.get_json(), {"status": "OK"})

    # ---------- Create ----------
    def test_create_offer(self):
        """It should Create a new Offer"""
        payload = make_payload()
        resp = self.client.post(BASE_URL, json=payload)
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)

        location = resp.headers.get("Location", None)
        self.assertIsNotNone(location)

        body = resp.get_json()
        self.assertIsNotNone(body["id"])
        for field in ("img", "title", "code", "description"):
            self.assertEqual(body[field], payload[field])

        follow = self.client.get(location)
        self.assertEqual(follow.status_code, status.HTTP_200_OK)
        self.assertEqual(follow.get_json(), body)

    def test_create_offer_ignores_client_id(self):
        """It should assign its own id even if the body carries one"""
        resp = self.client.post(BASE_URL, json=make_payload(id=4242))
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertNotEqual(resp.get_json()["id"], 4242)

    # ---------- Read / List ----------
    def test_get_offer(self):
        """It should Get a single Offer"""
        test_offer = self._create_offers(1)[0]
        resp = self.client.get(f"{BASE_URL}/{test_offer.id}")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.get_json()["title"], test_offer.title)

    def test_get_offer_not_found(self):
        """It should not Get an Offer that is not found"""
        resp = self.client.get(f"{BASE_URL}/0")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        data = resp.get_json()
        self.assertEqual(data["error"], "Not Found")
        self.assertIn("was not found", data["message"])

    def test_list_offers(self):
        """It should Get a list of Offers in creation order"""
        offers = self._create_offers(5)
        resp = self.client.get(BASE_URL)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        data = resp.get_json()
        self.assertEqual([o["id"] for o in data], [o.id for o in offers])

    def test_list_offers_empty(self):
        """It should return an empty list when there are no Offers"""
        resp = self.client.get(BASE_URL)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.get_json(), [])

    def test_query_by_code(self):
        """It should filter Offers by ?code=..."""
        self.client.post(BASE_URL, json=make_payload(code="ONLYME"))
        self.client.post(BASE_URL, json=make_payload(code="OTHER"))
        resp = self.client.get(f"{BASE_URL}?code=ONLYME")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        data = resp.get_json()
        self.assertEqual(len(data), 1)
        self.assertEqual(data[0]["code"], "ONLYME")

    def test_query_by_title(self):
        """It should filter Offers by ?title=..."""
        self.client.post(BASE_URL, json=make_payload(title="Summer"))
        self.client.post(BASE_URL, json=make_payload(title="Winter"))
        resp = self.client.get(f"{BASE_URL}?title=Winter")
        data = resp.get_json()
        self.assertEqual(len(data), 1)
        self.assertEqual(data[0]["title"], "Winter")

    def test_query_by_code_no_match(self):
        """It should return 200 and an empty list when no Offers match"""
        self._create_offers(2)
        resp = self.client.get(f"{BASE_URL}?code=NOPE")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.get_json(), [])

    # ---------- Update ----------
    def test_update_offer(self):
        """It should Update an existing Offer"""
        test_offer = self._create_offers(1)[0]
        resp = self.client.put(
            f"{BASE_URL}/{test_offer.id}",
            json=make_payload(title="Updated", code="NEW-CODE"),
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        body = resp.get_json()
        self.assertEqual(body["id"], test_offer.id)
        self.assertEqual(body["title"], "Updated")
        self.assertEqual(body["code"], "NEW-CODE")

        again = self.client.get(f"{BASE_URL}/{test_offer.id}").get_json()
        self.assertEqual(again["title"], "Updated")

    def test_update_offer_not_found(self):
        """It should not Update an Offer that does not exist"""
        resp = self.client.put(f"{BASE_URL}/0", json=make_payload())
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_update_offer_mismatched_id(self):
        """It should reject a body id that disagrees with the path"""
        test_offer = self._create_offers(1)[0]
        resp = self.client.put(
            f"{BASE_URL}/{test_offer.id}", json=make_payload(id=test_offer.id + 1)
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_offer_missing_field(self):
        """It should not Update an Offer with a missing field"""
        test_offer = self._create_offers(1)[0]
        payload = make_payload()
        del payload["description"]
        resp = self.client.put(f"{BASE_URL}/{test_offer.id}", json=payload)
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    # ---------- Delete ----------
    def test_delete_offer(self):
        """It should Delete an Offer and return 204"""
        test_offer = self._create_offers(1)[0]
        resp = self.client.delete(f"{BASE_URL}/{test_offer.id}")
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(len(resp.data), 0)
        resp = self.client.get(f"{BASE_URL}/{test_offer.id}")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_offer_not_found(self):
        """It should return 404 when deleting an Offer that does not exist"""
        resp = self.client.delete(f"{BASE_URL}/0")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)


######################################################################
#  S A D   P A T H S
######################################################################
class TestSadPaths(TestCase):
    """Test REST Exception Handling"""

    def setUp(self):
        self.client = app.test_client()

    def test_create_offer_no_data(self):
        """It should not Create an Offer with missing data"""
        resp = self.client.post(BASE_URL, json={})
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_offer_not_a_dict(self):
        """It should not Create an Offer from a JSON list"""
        resp = self.client.post(BASE_URL, json=["not", "an", "offer"])
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_offer_bad_field_type(self):
        """It should not Create an Offer whose code is not a string"""
        resp = self.client.post(BASE_URL, json=make_payload(code=10))
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("code", resp.get_json()["message"])

    def test_create_offer_malformed_json(self):
        """It should not Create an Offer from a malformed JSON body"""
        resp = self.client.post(BASE_URL, data="{not json", content_type="application/json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_offer_no_content_type(self):
        """It should not Create an Offer with no content type"""
        resp = self.client.post(BASE_URL)
        self.assertEqual(resp.status_code, status.HTTP_415_UNSUPPORTED_MEDIA_TYPE)

    def test_create_offer_wrong_content_type(self):
        """It should not Create an Offer with the wrong content type"""
        resp = self.client.post(BASE_URL, data="hello", content_type="text/html")
        self.assertEqual(resp.status_code, status.HTTP_415_UNSUPPORTED_MEDIA_TYPE)
        self.assertEqual(resp.get_json()["error"], "Unsupported Media Type")

    def test_method_not_allowed(self):
        """It should not allow an illegal method call"""
        resp = self.client.put(BASE_URL)
        self.assertEqual(resp.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        body = resp.get_json()
        self.assertEqual(body["error"], "Method Not Allowed")
        self.assertIn("GET", resp.headers["Allow"])

    @patch("service.models.Offer.create")
    def test_create_offer_database_error(self, mock_create):
        """It should hide database failures behind a 500"""
        mock_create.side_effect = DatabaseError("connection lost")
        resp = self.client.post(BASE_URL, json=make_payload())
        self.assertEqual(resp.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        body = resp.get_json()
        self.assertEqual(body["message"], "An unexpected error occurred.")
        self.assertNotIn("connection lost", body["message"])
