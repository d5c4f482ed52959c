"""JSON / XML 応答形式の選択テスト"""
import pytest
from uuid import uuid4
from xml.etree import ElementTree

from src.infra.presentators.format_api_output import negotiate_media_type, to_xml
from src.usecase.user_management.validation import LOGIN_CHARSET_MESSAGE


class TestNegotiateMediaType:
    @pytest.mark.parametrize("accept, expected", [
        (None, "application/json"),
        ("", "application/json"),
        ("*/*", "application/json"),
        ("application/json", "application/json"),
        ("application/xml", "application/xml"),
        ("text/xml", "text/xml"),
        ("application/json, application/xml", "application/json"),
        ("application/xml, application/json", "application/xml"),
        ("application/xml;q=0.5, application/json;q=0.9", "application/json"),
        ("application/json;q=0, application/xml", "application/xml"),
        ("text/html, */*;q=0.8", "application/json"),
    ])
    def test_negotiation(self, accept, expected):
        assert negotiate_media_type(accept) == expected


class TestToXml:
    def test_none_values_are_omitted(self):
        document = to_xml("UserDto", {"CurrentGameId": None, "FullName": "Doe John"})

        root = ElementTree.fromstring(document)
        assert root.tag == "UserDto"
        assert root.find("CurrentGameId") is None
        assert root.findtext("FullName") == "Doe John"

    def test_declaration_is_present(self):
        assert to_xml("guid", "abc").startswith(b'<?xml version="1.0" encoding="utf-8"?>')


class TestXmlResponses:
    XML = {"Accept": "application/xml"}

    def test_get_user_as_xml(self, client):
        user_id = client.post("/api/users", json={"login": "johndoe", "firstName": "John", "lastName": "Doe"}).json()

        response = client.get(f"/api/users/{user_id}", headers=self.XML)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")
        root = ElementTree.fromstring(response.content)
        assert root.tag == "UserDto"
        assert root.findtext("FullName") == "Doe John"

    def test_create_returns_guid_element(self, client):
        response = client.post("/api/users", json={"login": "johndoe"}, headers=self.XML)

        assert response.status_code == 201
        root = ElementTree.fromstring(response.content)
        assert root.tag == "guid"
        assert response.headers["Location"].endswith(root.text)

    def test_list_as_xml(self, client):
        for login in ("alice", "bob"):
            client.post("/api/users", json={"login": login, "firstName": login.title()})

        response = client.get("/api/users", headers=self.XML)

        root = ElementTree.fromstring(response.content)
        assert root.tag == "ArrayOfUserDto"
        assert [e.findtext("FullName") for e in root.findall("UserDto")] == [" Alice", " Bob"]
        assert "X-Pagination" in response.headers


class TestXmlErrors:
    XML = {"Accept": "application/xml"}

    def test_not_found_as_xml(self, client):
        response = client.get(f"/api/users/{uuid4()}", headers=self.XML)

        assert response.status_code == 404
        assert response.headers["content-type"].startswith("application/xml")
        root = ElementTree.fromstring(response.content)
        assert root.tag == "ErrorResponse"
        assert root.findtext("error_type") == "user_not_found"
        assert root.findtext("retry_available") == "false"

    def test_validation_errors_as_xml(self, client):
        response = client.post("/api/users", json={"login": "john doe"}, headers=self.XML)

        assert response.status_code == 422
        root = ElementTree.fromstring(response.content)
        errors = root.find("errors").findall("error")
        assert [(e.findtext("field"), e.findtext("message")) for e in errors] == [("login", LOGIN_CHARSET_MESSAGE)]

    def test_errors_default_to_json(self, client):
        response = client.get(f"/api/users/{uuid4()}")

        assert response.headers["content-type"].startswith("application/json")
        assert response.json()["error_type"] == "user_not_found"
