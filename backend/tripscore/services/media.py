import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


def _url(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


def clean_media(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Drop fields whose types do not match what the media service documents."""
    media = dict(payload)
    images = media.get("images")
    media["images"] = [url for url in images if _url(url)] if isinstance(images, list) else []
    if not isinstance(media.get("caption"), str):
        media.pop("caption", None)
    return media


def pick_representative_image(media: Dict[str, Any]) -> Optional[str]:
    """
    Choose the image to show for a post.

    Photos prefer a signed URL, then the stored image URL, then the first
    image of an album. Shorts prefer a thumbnail and fall back to the video.
    Values that are not non-empty strings are ignored.
    """
    images = media.get("images")
    first_image = _url(images[0]) if isinstance(images, list) and images else None
    if media.get("type") == "short" or _url(media.get("videoUrl")):
        return (
            _url(media.get("thumbnailUrl"))
            or _url(media.get("imageUrl"))
            or first_image
            or _url(media.get("signedUrl"))
            or _url(media.get("videoUrl"))
        )
    return (
        _url(media.get("signedUrl"))
        or _url(media.get("imageUrl"))
        or first_image
    )


class MediaClient:
    """Client for the media service that owns post images."""

    def __init__(
        self,
        api_url: Optional[str],
        api_key: Optional[str] = None,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url.rstrip('/') if api_url else None
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport
        self.headers = {"Accept": "application/json"}
        if api_key:
            self.headers["x-api-key"] = api_key

    @property
    def enabled(self) -> bool:
        return self.api_url is not None

    async def get_post_media(self, post_id: str) -> Optional[Dict[str, Any]]:
        """
        Fetch the media record of a post.

        Lookups are best-effort: any failure is logged and ``None`` returned,
        so a broken media service never fails a score request.

        Args:
            post_id: The post the visit was created from

        Returns:
            The media payload, or None
        """
        if not self.enabled or not post_id:
            return None

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(
                    f"{self.api_url}/posts/{post_id}/media",
                    headers=self.headers
                )
                response.raise_for_status()
                payload = response.json()
            except httpx.HTTPError as e:
                logger.warning("Media lookup failed for post %s: %s", post_id, e)
                return None
            except ValueError as e:
                logger.warning("Media service returned invalid JSON for post %s: %s", post_id, e)
                return None

        if not isinstance(payload, dict):
            logger.warning("Unexpected media payload for post %s: %r", post_id, type(payload))
            return None
        return clean_media(payload)
