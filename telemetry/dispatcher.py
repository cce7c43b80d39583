"""
HTTP dispatcher for measurements.
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from bridge_core.errors import DispatchError
from .mapper import Measurement


@dataclass
class DispatchConfig:
    """Ingestion endpoint configuration."""
    url: Optional[str] = None
    host: str = "localhost"
    port: int = 5000
    user_id: int = 1
    timeout: float = 10.0

    URL_TEMPLATE = "http://{host}:{port}/new/user/{user_id}/measurements"

    @property
    def endpoint(self) -> str:
        if self.url:
            return self.url
        return self.URL_TEMPLATE.format(host=self.host, port=self.port, user_id=self.user_id)


class MeasurementDispatcher:
    """POSTs measurements as JSON to the ingestion endpoint."""

    def __init__(self, config: DispatchConfig, client: Optional[httpx.Client] = None):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)
        self._client = client or httpx.Client(timeout=config.timeout)

    @property
    def endpoint(self) -> str:
        return self.config.endpoint

    def send(self, measurement: Measurement) -> None:
        """
        Send one measurement.

        Only pass/fail matters: a transport failure or a non-2xx status
        raises DispatchError and the response body is not inspected.
        NaN and infinite values are not valid JSON and are never sent.
        """
        try:
            body = json.dumps(measurement.to_dict(), allow_nan=False)
        except ValueError as e:
            raise DispatchError(f"Cannot serialize {measurement}: {e}") from e

        try:
            response = self._client.post(
                self.endpoint,
                content=body,
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DispatchError(
                f"Endpoint rejected measurement: HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise DispatchError(f"Request to {self.endpoint} failed: {e}") from e

        self.logger.debug(f"Sent {measurement} -> HTTP {response.status_code}")

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "MeasurementDispatcher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
