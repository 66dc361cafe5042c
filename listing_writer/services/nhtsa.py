"""
NHTSA vPIC Integration
FREE, unlimited - VIN decode and model listing
"""

import httpx
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from listing_writer.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class NHTSAService:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = settings or default_settings
        self.base_url = settings.nhtsa_base_url.rstrip("/")
        self.timeout = settings.http_timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def get_models_for_make_year(self, make: str, year: int) -> List[Dict[str, Any]]:
        """Raw `Results` rows for a make and model year. Raises on non-2xx."""
        url = f"{self.base_url}/GetModelsForMakeYear/make/{quote(make)}/modelyear/{year}"
        async with self._client() as client:
            logger.info(f"vPIC models lookup: {make} {year}")
            response = await client.get(url, params={"format": "json"})
            response.raise_for_status()
            data = response.json()

        return data.get("Results") or []

    async def decode_vin_values(self, vin: str) -> Dict[str, Any]:
        """First flat `Results` row of DecodeVinValues. Raises on non-2xx."""
        url = f"{self.base_url}/DecodeVinValues/{quote(vin)}"
        async with self._client() as client:
            logger.info(f"vPIC VIN decode: {vin}")
            response = await client.get(url, params={"format": "json"})
            response.raise_for_status()
            data = response.json()

        results = data.get("Results") or []
        return results[0] if results else {}
