"""Tests for the request model and builder."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from easyhttp import EasyHttpRequest, Header, HttpMethod, InvalidRequestError


class TestValidation:
    @pytest.mark.parametrize("url", [None, "", "   "])
    def test_blank_url_rejected(self, url):
        with pytest.raises(InvalidRequestError):
            EasyHttpRequest.builder(url).GET().build()

    def test_missing_method_rejected(self):
        with pytest.raises(InvalidRequestError):
            EasyHttpRequest.builder("test").build()

    def test_invalid_request_error_is_value_error(self):
        with pytest.raises(ValueError):
            EasyHttpRequest.builder("").GET().build()

    def test_non_string_param_rejected(self):
        with pytest.raises(InvalidRequestError):
            EasyHttpRequest.builder("http://h").GET().query_param("page", object()).build()


class TestBuilder:
    @pytest.mark.parametrize("method", list(HttpMethod))
    def test_method_selectors(self, method):
        builder = EasyHttpRequest.builder("http://h")
        request = getattr(builder, method.value)().build()
        assert request.method is method

    def test_last_method_wins(self):
        request = EasyHttpRequest.builder("http://h").GET().POST().build()
        assert request.method is HttpMethod.POST

    def test_single_params_accumulate(self):
        request = (
            EasyHttpRequest.builder("http://h/{a}/{b}")
            .GET()
            .path_param("a", "1")
            .path_param("b", "2")
            .query_param("x", "1")
            .query_param("y", "2")
            .header("X-One", "1")
            .build()
        )
        assert request.path_params == {"a": "1", "b": "2"}
        assert list(request.query_params) == ["x", "y"]
        assert request.headers == {"X-One": "1"}

    def test_maps_replace_previous_entries(self):
        request = (
            EasyHttpRequest.builder("http://h")
            .GET()
            .path_param("old", "1")
            .path_map({"country": "italy", "user": "1"})
            .query_param("old", "1")
            .query_map({"logData": "false", "overwrite": "true"})
            .header("Old", "1")
            .header_map({"Authorization": "token", "Accept": "application/json"})
            .build()
        )
        assert request.path_params == {"country": "italy", "user": "1"}
        assert list(request.query_params.items()) == [("logData", "false"), ("overwrite", "true")]
        assert request.headers == {"Authorization": "token", "Accept": "application/json"}

    def test_duplicate_header_last_write_wins(self):
        request = (
            EasyHttpRequest.builder("http://h")
            .GET()
            .authorization("first")
            .header("Authorization", "second")
            .build()
        )
        assert request.headers == {"Authorization": "second"}

    def test_common_header_setters(self):
        request = (
            EasyHttpRequest.builder("http://h")
            .GET()
            .user_agent("ua")
            .accept("acc")
            .accept_language("lang")
            .accept_encoding("enc")
            .authorization("auth")
            .content_type("ct")
            .cookie("c")
            .referer("ref")
            .origin("orig")
            .build()
        )
        assert request.headers == {
            Header.USER_AGENT.value: "ua",
            Header.ACCEPT.value: "acc",
            Header.ACCEPT_LANGUAGE.value: "lang",
            Header.ACCEPT_ENCODING.value: "enc",
            Header.AUTHORIZATION.value: "auth",
            Header.CONTENT_TYPE.value: "ct",
            Header.COOKIE.value: "c",
            Header.REFERER.value: "ref",
            Header.ORIGIN.value: "orig",
        }

    def test_body_type_defaults_to_content_type(self):
        request = EasyHttpRequest.builder("http://h").POST().body(Path("a.txt")).build()
        assert request.body.content == Path("a.txt")
        assert issubclass(request.body.type, Path)

    def test_explicit_body_type(self):
        request = EasyHttpRequest.builder("http://h").POST().body("raw", bytes).build()
        assert request.body.type is bytes

    def test_null_body_content_allowed(self):
        request = EasyHttpRequest.builder("http://h").POST().body(None, dict).build()
        assert request.body.content is None
        assert request.body.type is dict

    def test_fragment(self):
        request = EasyHttpRequest.builder("http://h").GET().fragment("top").build()
        assert request.fragment == "top"


class TestImmutability:
    def test_request_is_frozen(self):
        request = EasyHttpRequest.builder("http://h").GET().build()
        with pytest.raises(ValidationError):
            request.url = "http://other"

    def test_builder_changes_do_not_leak(self):
        builder = EasyHttpRequest.builder("http://h").GET().query_param("a", "1")
        first = builder.build()
        builder.query_param("b", "2")
        second = builder.build()

        assert first.query_params == {"a": "1"}
        assert second.query_params == {"a": "1", "b": "2"}

    @pytest.mark.parametrize("field", ["path_params", "query_params", "headers"])
    def test_built_maps_are_read_only(self, field):
        request = (
            EasyHttpRequest.builder("http://h/{a}")
            .GET()
            .path_param("a", "1")
            .query_param("a", "1")
            .header("a", "1")
            .build()
        )

        with pytest.raises(TypeError):
            getattr(request, field)["b"] = "2"
        with pytest.raises(TypeError):
            del getattr(request, field)["a"]
        assert dict(getattr(request, field)) == {"a": "1"}

    def test_direct_construction_defaults_are_read_only(self):
        request = EasyHttpRequest(url="http://h", method="GET")

        with pytest.raises(TypeError):
            request.query_params["b"] = "2"
        assert dict(request.query_params) == {}

    def test_map_argument_is_copied(self):
        params = {"a": "1"}
        request = EasyHttpRequest.builder("http://h").GET().query_map(params).build()
        params["b"] = "2"
        assert request.query_params == {"a": "1"}
