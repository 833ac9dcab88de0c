"""Catalog adapter backed by the meal service's REST API."""

import requests
import structlog
from requests import RequestException
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ordering.catalog.port import CatalogService, Meal
from ordering.exceptions import ServerError
from ordering.utils import settings

logger = structlog.get_logger(__name__)


def http_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type(RequestException),
    )


class HttpCatalog(CatalogService):
    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        self.base_url = (base_url or settings.CATALOG_SERVICE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.CATALOG_TIMEOUT_SECONDS

    @http_retry()
    def _fetch(self, meal_id: str) -> dict | None:
        url = f"{self.base_url}/meals/{meal_id}"
        logger.debug("catalog_fetch", url=url)

        resp = requests.get(url, timeout=self.timeout)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return resp.json()

    def get_meal(self, meal_id: str) -> Meal | None:
        try:
            payload = self._fetch(meal_id)
        except RequestException as exc:
            logger.error("catalog_unavailable", meal_id=meal_id, error=str(exc))
            raise ServerError({"catalog": ["Meal catalog is unavailable"]}) from exc

        if payload is None:
            return None
        return _to_meal(meal_id, payload)


def _to_meal(meal_id, payload: dict) -> Meal:
    """Map the meal service document onto a Meal."""
    return Meal(
        meal_id=str(payload.get("_id") or payload.get("id") or meal_id),
        name=payload.get("foodName") or payload.get("name") or "",
        price=float(payload["price"]),
        chef_id=str(payload["chefId"]),
        image=payload.get("foodImage") or payload.get("image"),
        available=bool(payload.get("available", True)),
    )
