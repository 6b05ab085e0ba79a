"""Newsletter signup via the Brevo contacts API."""

import httpx
from loguru import logger

from app.errors import UpstreamError, ValidationError
from settings import BREVO_API_KEY, BREVO_LIST_ID

BREVO_CONTACTS_URL = "https://api.brevo.com/v3/contacts"


class NewsletterService:
    def __init__(
        self,
        api_key: str = BREVO_API_KEY,
        list_id: int = BREVO_LIST_ID,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_key = api_key
        self._list_id = list_id
        self._transport = transport

    async def subscribe(self, email: str | None) -> dict:
        if not email or "@" not in email:
            raise ValidationError("Please provide a valid email address")

        if not self._api_key:
            logger.info("Newsletter signup (no provider configured): {}", email)
            return {"message": "Successfully subscribed to newsletter", "email": email}

        payload = {"email": email, "updateEnabled": True}
        if self._list_id:
            payload["listIds"] = [self._list_id]

        async with httpx.AsyncClient(timeout=15, transport=self._transport) as client:
            try:
                resp = await client.post(
                    BREVO_CONTACTS_URL,
                    json=payload,
                    headers={"api-key": self._api_key, "Accept": "application/json"},
                )
                resp.raise_for_status()
            except httpx.HTTPError as e:
                logger.error("Brevo signup failed for {}: {}", email, e)
                raise UpstreamError(
                    "Failed to subscribe to newsletter. Please try again.", details=str(e)
                ) from e

        logger.info("Newsletter signup: {}", email)
        return {"message": "Successfully subscribed to newsletter", "email": email}
