"""HTTP client for the remote message selection mirror."""

from dataclasses import dataclass

import httpx

from opener_studio.domain.messages import SelectionSyncRequest
from opener_studio.services.guest_context import SelectionSyncClient, SelectionSyncError


@dataclass
class HttpxSelectionSyncClient(SelectionSyncClient):
    """Calls the selection function over HTTPS with httpx."""

    base_url: str
    api_key: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str, api_key: str) -> "HttpxSelectionSyncClient":
        """Create a sync client with a managed httpx session."""
        return cls(base_url=base_url, api_key=api_key, http_client=httpx.AsyncClient())

    async def sync_selection(self, request: SelectionSyncRequest) -> None:
        """Post the selected message variant to the selection function."""
        url = f"{self.base_url}/update_guest_message_selection"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "apikey": self.api_key,
        }
        try:
            response = await self.http_client.post(
                url, json=request.to_payload(), headers=headers, timeout=10
            )
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise SelectionSyncError(str(exc)) from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
