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
State held by the Offers admin page

Offer is the client-side record returned by the Offers Service, Draft is
the form being composed, and Composing / Editing are the two modes the
form can be in.
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, Generic, Optional, TypeVar, Union

from service.models import CONTENT_FIELDS

T = TypeVar("T")


@dataclass(frozen=True)
class Offer:
    """An Offer as stored by the Offers Service"""

    id: str
    img: str = ""
    title: str = ""
    code: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: Mapping) -> "Offer":
        """Builds an Offer from a service record (``id`` or ``_id`` key)"""
        if not isinstance(data, Mapping):
            raise TypeError(f"Offer record must be a mapping, not {type(data).__name__}")
        offer_id = data["id"] if "id" in data else data["_id"]
        if offer_id is None:
            raise KeyError("id")
        content = {name: _text(data.get(name)) for name in CONTENT_FIELDS}
        return cls(id=str(offer_id), **content)

    def content(self) -> Dict[str, str]:
        """Returns the four editable fields"""
        return {name: getattr(self, name) for name in CONTENT_FIELDS}


@dataclass
class Draft:
    """Unsaved form state mirroring an Offer's editable fields"""

    img: str = ""
    title: str = ""
    code: str = ""
    description: str = ""

    @classmethod
    def of(cls, offer: Offer) -> "Draft":
        return cls(**offer.content())

    def set(self, name: str, value: str) -> None:
        if name not in CONTENT_FIELDS:
            raise KeyError(f"Unknown draft field '{name}'")
        setattr(self, name, value)

    def copy(self) -> "Draft":
        return replace(self)

    def to_payload(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class Composing:
    """The form composes a new offer"""


@dataclass(frozen=True)
class Editing:
    """The form edits the offer with ``target_id``"""

    target_id: str


Mode = Union[Composing, Editing]


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of a remote operation: a value on success, the error on failure"""

    ok: bool
    value: Optional[T] = None
    error: Optional[Exception] = field(default=None, compare=False)

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Outcome[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: Exception) -> "Outcome[T]":
        return cls(ok=False, error=error)

    def __bool__(self):
        return self.ok


def _text(value: Any) -> str:
    return "" if value is None else str(value)
