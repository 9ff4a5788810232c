# core/catalog/google_books.py
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from core.exceptions import CatalogError

logger = logging.getLogger(__name__)


class GoogleBooksClient:
    """Read-only client for the Google Books volumes API.
    
    Every call is attempted once. Transport failures, 5xx responses and
    unreadable payloads raise CatalogError; an unknown volume id yields None.
    """

    def __init__(self, api_key: Optional[str] = None,
                 base_url: str = "https://www.googleapis.com/books/v1",
                 timeout: float = 10.0):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    def _params(self, **params) -> Dict[str, Any]:
        if self.api_key:
            params['key'] = self.api_key
        return params

    def _get(self, path: str, params: Dict[str, Any]) -> requests.Response:
        url = f"{self.base_url}/{path}"
        try:
            return requests.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Catalog request to {path} failed: {str(e)}")
            raise CatalogError() from e

    @staticmethod
    def _json(response: requests.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Catalog returned a non-JSON body (status {response.status_code})")
            raise CatalogError() from e
        if not isinstance(data, dict):
            raise CatalogError()
        return data

    def search(self, term: str) -> List[Dict[str, Any]]:
        """Search volumes by free text.
        
        Args:
            term: The search query
            
        Returns:
            Raw volume resources, empty when nothing matched
        """
        response = self._get("volumes", self._params(q=term))
        if not response.ok:
            logger.warning(f"Catalog search failed: {response.status_code}")
            raise CatalogError("Failed to search books")
        data = self._json(response)
        items = data.get('items') or []
        return [item for item in items if isinstance(item, dict) and item.get('id')]

    def get_volume(self, volume_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a single volume by catalog id.
        
        Returns:
            The raw volume resource, or None if the catalog does not know the id
        """
        response = self._get(f"volumes/{quote(volume_id, safe='')}", self._params())
        if 400 <= response.status_code < 500 and response.status_code != 429:
            logger.warning(f"Catalog has no volume {volume_id}: {response.status_code}")
            return None
        if not response.ok:
            logger.warning(f"Catalog lookup of {volume_id} failed: {response.status_code}")
            raise CatalogError("Failed to fetch book")
        data = self._json(response)
        if not data.get('id'):
            raise CatalogError("Failed to fetch book")
        return data
