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
Offers Service

This service implements a REST API that allows you to Create, Read, Update,
Delete and List Offers
"""

# Third-party
from flask import abort, current_app as app, jsonify, request, url_for

# First-party
from service.common import status  # HTTP status codes
from service.models import DataValidationError, Offer


######################################################################
# Root endpoint
######################################################################
@app.route("/", methods=["GET"])
def index():
    """Root URL response"""
    return (
        jsonify(
            name="Offers Service",
            version="1.0.0",
            description="RESTful service for managing promotional offers",
            paths={
                "offers": "/offers",
                "admin": "/admin",
            },
        ),
        status.HTTP_200_OK,
    )


######################################################################
# LIST Offers with optional filters

# Supported query params:
# ?code=<str>   -> exact match list
# ?title=<str>  -> exact match list
# Priority: code > title > all
######################################################################
@app.route("/offers", methods=["GET"])
def list_offers():
    """
    List Offers
    - Without query: return all offers
    - With filter: return exact matches
    """
    app.logger.info("Request to list Offers")

    code = request.args.get("code")
    title = request.args.get("title")

    if code:
        app.logger.info("Filtering by code=%s", code)
        offers = Offer.find_by_code(code.strip())
    elif title:
        app.logger.info("Filtering by title=%s", title)
        offers = Offer.find_by_title(title.strip())
    else:
        offers = Offer.all()

    results = [offer.serialize() for offer in offers]
    return jsonify(results), status.HTTP_200_OK


######################################################################
# READ an Offer
######################################################################
@app.route("/offers/<int:offer_id>", methods=["GET"])
def get_offers(offer_id: int):
    """
    Get an Offer by id
    """
    app.logger.info("Request to get Offer with id [%s]", offer_id)
    offer = _find_or_404(offer_id)
    return jsonify(offer.serialize()), status.HTTP_200_OK


######################################################################
# CREATE an Offer
######################################################################
@app.route("/offers", methods=["POST"])
def create_offers():
    """
    Create an Offer
    """
    app.logger.info("Request to Create an Offer")
    check_content_type("application/json")

    offer = Offer()
    try:
        data = request.get_json()
        app.logger.info("Processing: %s", data)
        offer.deserialize(data)
        offer.create()
    except DataValidationError as error:
        abort(status.HTTP_400_BAD_REQUEST, str(error))

    location_url = url_for("get_offers", offer_id=offer.id, _external=True)
    return (
        jsonify(offer.serialize()),
        status.HTTP_201_CREATED,
        {"Location": location_url},
    )


######################################################################
# UPDATE an Offer
######################################################################
@app.route("/offers/<int:offer_id>", methods=["PUT"])
def update_offers(offer_id: int):
    """
    Update an Offer
    Replaces the content fields of an offer with payload values
    """
    app.logger.info("Request to update Offer with id [%s]", offer_id)
    check_content_type("application/json")

    offer = _find_or_404(offer_id)

    try:
        data = request.get_json()
        app.logger.info("Processing: %s", data)
        if isinstance(data, dict) and "id" in data and str(data["id"]) != str(offer_id):
            abort(status.HTTP_400_BAD_REQUEST, "ID in body must match resource path")
        offer.deserialize(data)
        offer.id = offer_id  # path id takes precedence
        offer.update()
    except DataValidationError as error:
        abort(status.HTTP_400_BAD_REQUEST, str(error))

    return jsonify(offer.serialize()), status.HTTP_200_OK


######################################################################
# DELETE an Offer
######################################################################
@app.route("/offers/<int:offer_id>", methods=["DELETE"])
def delete_offers(offer_id: int):
    """
    Delete an Offer by id
    - If the offer doesn't exist, return 404
    - If exists, delete and return 204
    """
    app.logger.info("Request to delete Offer with id [%s]", offer_id)
    offer = _find_or_404(offer_id)
    offer.delete()
    return "", status.HTTP_204_NO_CONTENT


######################################################################
# Endpoint: /health (K8s liveness/readiness)
######################################################################
@app.route("/health", methods=["GET"])
def health():
    """
    K8s health check endpoint
    Returns:
        JSON: {"status": "OK"} with HTTP 200
    """
    app.logger.info("Health check requested")
    return jsonify(status="OK"), status.HTTP_200_OK


######################################################################
#  U T I L I T Y   F U N C T I O N S
######################################################################
def _find_or_404(offer_id: int) -> Offer:
    """Returns the Offer with the given id or aborts with 404_NOT_FOUND"""
    offer = Offer.find(offer_id)
    if not offer:
        abort(
            status.HTTP_404_NOT_FOUND,
            f"Offer with id '{offer_id}' was not found.",
        )
    return offer


def check_content_type(content_type: str):
    """Checks that the media type is correct (tolerates charset etc.)"""
    if request.mimetype != content_type:
        got = request.content_type or "none"
        abort(
            status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            f"Content-Type must be {content_type}; received {got}",
        )
