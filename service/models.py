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
Models for Offers

All of the models are stored in this module
"""

import logging
from typing import List, Optional, Union

from flask_sqlalchemy import SQLAlchemy

logger = logging.getLogger("flask.app")

# SQLAlchemy handle; bound to the app in service/__init__.py
db = SQLAlchemy()

# Editable content of an Offer, in form order; also the /offers payload the admin page sends
CONTENT_FIELDS = ("img", "title", "code", "description")


class DataValidationError(Exception):
    """Used for data validation errors when deserializing or updating."""


class DatabaseError(Exception):
    """Used for database operation failures (commit/connection/constraint errors)."""


class Offer(db.Model):
    """
    Class that represents an Offer (a promotional code shown on the site)
    """

    ##################################################
    # Table Schema
    ##################################################
    id = db.Column(db.Integer, primary_key=True)
    img = db.Column(db.String(255), nullable=False, default="")
    title = db.Column(db.String(127), nullable=False, default="")
    code = db.Column(db.String(63), nullable=False, default="")
    description = db.Column(db.Text, nullable=False, default="")
    # Auditing fields
    created_at = db.Column(db.DateTime, default=db.func.now(), nullable=False)
    last_updated = db.Column(
        db.DateTime, default=db.func.now(), onupdate=db.func.now(), nullable=False
    )

    ##################################################
    # INSTANCE METHODS
    ##################################################

    def __repr__(self):
        return f"<Offer {self.title} id=[{self.id}]>"

    def create(self):
        """Creates this Offer in the database."""
        logger.info("Creating %s", self.title)
        self.id = None  # make sure id is None so SQLAlchemy will assign one
        try:
            db.session.add(self)
            db.session.flush()
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.error("Error creating record: %s", self)
            raise DatabaseError(e) from e

    def update(self):
        """Updates this Offer in the database."""
        logger.info("Saving %s", self.title)
        if not self.id:
            raise DataValidationError("Field 'id' is required for update")
        try:
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.error("Error updating record: %s", self)
            raise DatabaseError(e) from e

    def delete(self):
        """Removes this Offer from the data store."""
        logger.info("Deleting %s", self.title)
        try:
            db.session.delete(self)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.error("Error deleting record: %s", self)
            raise DatabaseError(e) from e

    def serialize(self) -> dict:
        """Serializes an Offer into a dictionary."""
        return {
            "id": self.id,
            "img": self.img,
            "title": self.title,
            "code": self.code,
            "description": self.description,
        }

    def deserialize(self, data: dict):
        """
        Deserializes an Offer from a dictionary.

        All four content fields are required and must be strings; empty
        strings are allowed.

        Args:
            data (dict): a dictionary containing the offer data
        """
        try:
            for field in CONTENT_FIELDS:
                value = data[field]
                if not isinstance(value, str):
                    raise DataValidationError(f"Field '{field}' must be a string")
                setattr(self, field, value)
        except AttributeError as error:
            raise DataValidationError("Invalid attribute: " + error.args[0]) from error
        except KeyError as error:
            missing = error.args[0]
            raise DataValidationError(f"Invalid offer: missing '{missing}'") from error
        except TypeError as error:
            # non-dict body or incompatible structure
            raise DataValidationError(
                "Invalid offer: request body contained malformed or invalid data"
            ) from error

        return self

    ##################################################
    # CLASS METHODS
    ##################################################

    @classmethod
    def all(cls) -> List["Offer"]:
        """Returns all Offers in the database, oldest first."""
        logger.info("Processing all Offers")
        return list(cls.query.order_by(cls.id).all())

    @classmethod
    def find(cls, by_id: Union[int, str]) -> Optional["Offer"]:
        """Finds an Offer by its ID (single object or None)."""
        logger.info("Processing lookup for id %s ...", by_id)
        try:
            oid = int(by_id)
        except (TypeError, ValueError):
            return None
        return db.session.get(cls, oid)

    @classmethod
    def find_by_code(cls, code: str) -> List["Offer"]:
        """Returns all Offers with the given redemption code."""
        logger.info("Processing code query for %s ...", code)
        return list(cls.query.filter(cls.code == code).order_by(cls.id).all())

    @classmethod
    def find_by_title(cls, title: str) -> List["Offer"]:
        """Returns all Offers with the given title."""
        logger.info("Processing title query for %s ...", title)
        return list(cls.query.filter(cls.title == title).order_by(cls.id).all())

    @classmethod
    def remove_all(cls):
        """Removes all Offers from the database (used by tests)."""
        logger.info("Removing all Offers")
        cls.query.delete()
        db.session.commit()
