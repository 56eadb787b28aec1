"""
=============================================================================
PEOPLE RESOURCE
=============================================================================

A tiny REST resource used by the HTTP methods lesson:

    ┌──────────┬────────────────────────┬────────────────────────────────┐
    │ Method   │ Path                   │ Does                           │
    ├──────────┼────────────────────────┼────────────────────────────────┤
    │ GET      │ /api/people            │ list everyone                  │
    │ POST     │ /api/people            │ echo the posted name           │
    │ POST     │ /api/people/postman    │ add a person, return the list  │
    │ PUT      │ /api/people/:personId  │ rename a person                │
    │ DELETE   │ /api/people/:personId  │ remove a person                │
    └──────────┴────────────────────────┴────────────────────────────────┘

PeopleStore holds the list for one app instance, in memory only.
PeopleController turns requests into store calls and JSON envelopes.

=============================================================================
"""

import logging
from typing import Iterable, Optional

from .catalog import coerce_number
from .http import HTTPRequest, HTTPResponse, HTTPStatus, Router, json_response


logger = logging.getLogger(__name__)


class PeopleStore:
    """
    In-memory list of ``{"id", "name"}`` records.

    Every write builds a new tuple and swaps it in, so a list handed out
    by all() is never changed behind the caller's back.
    """

    def __init__(self, initial: Iterable[dict] = ()):
        self._people: tuple[dict, ...] = tuple(dict(p) for p in initial)

    def __len__(self) -> int:
        return len(self._people)

    def all(self) -> list[dict]:
        return [dict(p) for p in self._people]

    def get(self, person_id) -> Optional[dict]:
        for person in self._people:
            if person["id"] == person_id:
                return dict(person)
        return None

    def add(self, name: str) -> dict:
        """Add a person. The new id is one more than the largest id in use."""
        next_id = max((p["id"] for p in self._people), default=0) + 1
        person = {"id": next_id, "name": name}
        self._people = self._people + (person,)
        return dict(person)

    def rename(self, person_id, name: str) -> Optional[dict]:
        """Rename a person. Returns the updated record, or None if unknown."""
        if self.get(person_id) is None:
            return None
        self._people = tuple(
            {**p, "name": name} if p["id"] == person_id else p
            for p in self._people
        )
        return self.get(person_id)

    def remove(self, person_id) -> Optional[dict]:
        """Remove a person. Returns the removed record, or None if unknown."""
        person = self.get(person_id)
        if person is None:
            return None
        self._people = tuple(p for p in self._people if p["id"] != person_id)
        return person


def _body_name(request: HTTPRequest) -> Optional[str]:
    # JSON or form body; a JSON array or scalar has no name
    body = request.payload
    if not isinstance(body, dict):
        return None
    name = body.get("name")
    return name if name else None


class PeopleController:
    """Request handlers for the people resource."""

    def __init__(self, store: PeopleStore):
        self.store = store

    def list_people(self, request: HTTPRequest) -> HTTPResponse:
        return json_response({"success": True, "people": self.store.all()})

    def create_person(self, request: HTTPRequest) -> HTTPResponse:
        logger.info(f"Create person, body: {request.payload}")
        name = _body_name(request)
        if name:
            return json_response({"success": True, "person": name}, HTTPStatus.CREATED)

        return json_response(
            {"success": False, "msg": "Please provide user name"},
            HTTPStatus.BAD_REQUEST,
        )

    def create_person_postman(self, request: HTTPRequest) -> HTTPResponse:
        logger.info(f"Create person (postman), body: {request.payload}")
        name = _body_name(request)
        if not name:
            return json_response(
                {"success": False, "data": "Please provide a valid name"},
                HTTPStatus.BAD_REQUEST,
            )

        self.store.add(name)
        return json_response({"success": True, "data": self.store.all()}, HTTPStatus.CREATED)

    def update_person(self, request: HTTPRequest) -> HTTPResponse:
        raw_id = request.path_params.get("personId", "")
        name = _body_name(request)
        logger.info(f"Update person {raw_id!r}, new name {name!r}")

        if not raw_id or not name:
            return json_response(
                {
                    "success": False,
                    "msg": "Please provide the id of the resource to be updated && their new name",
                },
                HTTPStatus.BAD_REQUEST,
            )

        if self.store.rename(coerce_number(raw_id), name) is None:
            return self._no_such_person(raw_id)

        return json_response({"success": True, "data": self.store.all()})

    def delete_person(self, request: HTTPRequest) -> HTTPResponse:
        raw_id = request.path_params.get("personId", "")
        logger.info(f"Delete person {raw_id!r}")

        if not raw_id:
            return json_response(
                {"success": False, "msg": "Please provide the id of the resource to be deleted"},
                HTTPStatus.BAD_REQUEST,
            )

        if self.store.remove(coerce_number(raw_id)) is None:
            return self._no_such_person(raw_id)

        return json_response({"success": True, "data": self.store.all()})

    def _no_such_person(self, raw_id: str) -> HTTPResponse:
        return json_response(
            {"success": False, "msg": f"No resource with the Id {raw_id} found"},
            HTTPStatus.NOT_FOUND,
        )


def register_routes(router: Router, controller: PeopleController) -> Router:
    """
    Register the people routes on ``router`` (mounted at /api/people).
    """
    router.get("/", name="people.list")(controller.list_people)
    router.post("/", name="people.create")(controller.create_person)
    router.post("/postman", name="people.create_postman")(controller.create_person_postman)
    router.put("/:personId", name="people.update")(controller.update_person)
    router.delete("/:personId", name="people.delete")(controller.delete_person)
    return router
