"""Tests for the REST-backed catalog adapter."""

from unittest.mock import MagicMock, patch

import pytest
import requests
from ordering.catalog import FakeCatalog, HttpCatalog, get_catalog, reset_catalog
from ordering.catalog.http_adapter import _to_meal
from ordering.exceptions import ServerError
from ordering.utils import settings


def _response(status_code=200, payload=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    return resp


@pytest.fixture()
def no_backoff(monkeypatch):
    monkeypatch.setattr(HttpCatalog._fetch.retry, "sleep", lambda _seconds: None)


class TestPayloadMapping:
    def test_meal_service_document(self):
        meal = _to_meal(
            "m-1",
            {"_id": "m-1", "foodName": "Kacchi Biryani", "price": "150", "chefId": 7, "foodImage": "k.jpg"},
        )

        assert meal.meal_id == "m-1"
        assert meal.name == "Kacchi Biryani"
        assert meal.price == 150.0
        assert meal.chef_id == "7"
        assert meal.image == "k.jpg"
        assert meal.available is True

    def test_plain_field_names_and_unavailable(self):
        meal = _to_meal("m-2", {"name": "Pitha", "price": 45.5, "chefId": "chef-2", "available": False})

        assert meal.meal_id == "m-2"
        assert meal.name == "Pitha"
        assert meal.available is False


class TestHttpCatalog:
    def test_fetches_meal_by_id(self):
        catalog = HttpCatalog(base_url="http://meals.local/", timeout=1.5)
        payload = {"_id": "m-1", "foodName": "Biryani", "price": 150, "chefId": "chef-1"}

        with patch("ordering.catalog.http_adapter.requests.get", return_value=_response(payload=payload)) as get:
            meal = catalog.get_meal("m-1")

        get.assert_called_once_with("http://meals.local/meals/m-1", timeout=1.5)
        assert meal.price == 150.0

    def test_missing_meal_is_none(self):
        catalog = HttpCatalog(base_url="http://meals.local")

        with patch("ordering.catalog.http_adapter.requests.get", return_value=_response(404)):
            assert catalog.get_meal("gone") is None

    def test_retries_then_reports_unavailable(self, no_backoff):
        catalog = HttpCatalog(base_url="http://meals.local")

        with patch(
            "ordering.catalog.http_adapter.requests.get",
            side_effect=requests.ConnectionError("refused"),
        ) as get:
            with pytest.raises(ServerError):
                catalog.get_meal("m-1")

        assert get.call_count == 3

    def test_recovers_from_transient_failure(self, no_backoff):
        catalog = HttpCatalog(base_url="http://meals.local")
        payload = {"_id": "m-1", "foodName": "Biryani", "price": 150, "chefId": "chef-1"}

        with patch(
            "ordering.catalog.http_adapter.requests.get",
            side_effect=[requests.Timeout("slow"), _response(payload=payload)],
        ):
            assert catalog.get_meal("m-1").name == "Biryani"

    def test_server_error_status_is_retried(self, no_backoff):
        catalog = HttpCatalog(base_url="http://meals.local")

        with patch("ordering.catalog.http_adapter.requests.get", return_value=_response(500)) as get:
            with pytest.raises(ServerError):
                catalog.get_meal("m-1")

        assert get.call_count == 3


class TestCatalogFactory:
    def test_defaults_to_fake(self, monkeypatch):
        monkeypatch.setattr(settings, "CATALOG_BACKEND", "fake")
        reset_catalog()
        assert isinstance(get_catalog(), FakeCatalog)

    def test_http_backend(self, monkeypatch):
        monkeypatch.setattr(settings, "CATALOG_BACKEND", "http")
        monkeypatch.setattr(settings, "CATALOG_SERVICE_URL", "http://meals.internal")
        reset_catalog()

        catalog = get_catalog()

        assert isinstance(catalog, HttpCatalog)
        assert catalog.base_url == "http://meals.internal"
        assert get_catalog() is catalog
