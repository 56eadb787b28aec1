"""
Tests for the HTTP methods lesson: people API, login form, static pages.
"""

import pytest

from httplessons.data import PEOPLE
from httplessons.http import HTTPStatus
from httplessons.lessons import methods_app
from httplessons.people import PeopleStore


FORM = {"Content-Type": "application/x-www-form-urlencoded"}


@pytest.fixture
def app(config):
    return methods_app.create_app(config)


class TestStaticPages:
    """Files from methods-public/."""

    def test_form_page(self, app, make_request):
        response = app.handle(make_request("GET", "/"))

        assert response.status == HTTPStatus.OK
        assert '<form action="/login" method="POST">' in response.text

    def test_javascript_page(self, app, make_request):
        response = app.handle(make_request("GET", "/javascript.html"))

        assert response.status == HTTPStatus.OK

    def test_browser_script(self, app, make_request):
        response = app.handle(make_request("GET", "/browser-app.js"))

        assert "/api/people" in response.text


class TestLogin:
    """POST /login with a url-encoded form."""

    def test_welcome(self, app, make_request):
        response = app.handle(make_request("POST", "/login", body="name=john", headers=FORM))

        assert response.status == HTTPStatus.OK
        assert "Welcome dear" in response.text
        assert ">john</span>" in response.text

    @pytest.mark.parametrize("body", ["name=", "", "user=john"])
    def test_missing_name(self, app, make_request, body: str):
        response = app.handle(make_request("POST", "/login", body=body, headers=FORM))

        assert response.status == HTTPStatus.BAD_REQUEST
        assert "Please provide valid user info" in response.text

    def test_name_is_escaped(self, app, make_request):
        response = app.handle(make_request(
            "POST", "/login", body="name=%3Cb%3Ejohn%3C%2Fb%3E", headers=FORM,
        ))

        assert "&lt;b&gt;john&lt;/b&gt;" in response.text
        assert "<b>" not in response.text

    def test_get_login_is_not_found(self, app, make_request):
        response = app.handle(make_request("GET", "/login"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert "<pre>Cannot GET /login</pre>" in response.text
        assert response.get_header("Allow") is None



class TestPeopleApi:
    """The people resource mounted at /api/people."""

    def test_list(self, app, make_request):
        response = app.handle(make_request("GET", "/api/people"))

        assert response.json() == {"success": True, "people": list(PEOPLE)}

    def test_create_echoes(self, app, make_request):
        response = app.handle(make_request("POST", "/api/people", body={"name": "zoe"}))

        assert response.status == HTTPStatus.CREATED
        assert response.json() == {"success": True, "person": "zoe"}
        assert len(app.handle(make_request("GET", "/api/people")).json()["people"]) == 5

    def test_create_requires_name(self, app, make_request):
        response = app.handle(make_request("POST", "/api/people", body={}))

        assert response.status == HTTPStatus.BAD_REQUEST

    def test_invalid_json_is_400(self, app, make_request):
        response = app.handle(make_request(
            "POST", "/api/people",
            body=b"{not json",
            headers={"Content-Type": "application/json"},
        ))

        assert response.status == HTTPStatus.BAD_REQUEST

    def test_postman_persists(self, app, make_request):
        app.handle(make_request("POST", "/api/people/postman", body={"name": "zoe"}))

        people = app.handle(make_request("GET", "/api/people")).json()["people"]
        assert people[-1] == {"id": 6, "name": "zoe"}

    def test_update_persists(self, app, make_request):
        response = app.handle(make_request("PUT", "/api/people/1", body={"name": "johnny"}))

        assert response.status == HTTPStatus.OK
        people = app.handle(make_request("GET", "/api/people")).json()["people"]
        assert people[0] == {"id": 1, "name": "johnny"}

    def test_update_unknown(self, app, make_request):
        response = app.handle(make_request("PUT", "/api/people/42", body={"name": "x"}))

        assert response.status == HTTPStatus.NOT_FOUND

    def test_delete_persists(self, app, make_request):
        app.handle(make_request("DELETE", "/api/people/2"))

        people = app.handle(make_request("GET", "/api/people")).json()["people"]
        assert 2 not in [p["id"] for p in people]

    def test_get_single_person_is_not_found(self, app, make_request):
        response = app.handle(make_request("GET", "/api/people/1"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert "Cannot GET /api/people/1" in response.text

    def test_unsupported_method_is_not_found(self, app, make_request):
        response = app.handle(make_request("PATCH", "/api/people", body={"name": "x"}))

        assert response.status == HTTPStatus.NOT_FOUND
        assert "Cannot PATCH /api/people" in response.text

    def test_head_people(self, app, make_request):
        full = app.handle(make_request("GET", "/api/people"))
        response = app.handle(make_request("HEAD", "/api/people"))

        assert response.status == HTTPStatus.OK
        assert response.body == b""
        assert response.get_header("Content-Length") == str(len(full.body))


    def test_apps_do_not_share_people(self, config, make_request):
        first = methods_app.create_app(config)
        second = methods_app.create_app(config)

        first.handle(make_request("DELETE", "/api/people/1"))

        assert len(second.handle(make_request("GET", "/api/people")).json()["people"]) == 5

    def test_custom_store(self, config, make_request):
        store = PeopleStore()
        app = methods_app.create_app(config, store=store)

        app.handle(make_request("POST", "/api/people/postman", body={"name": "first"}))

        assert store.all() == [{"id": 1, "name": "first"}]
