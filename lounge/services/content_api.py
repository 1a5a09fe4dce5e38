"""
Lounge Discord Bot - Content API Client
=======================================

Outbound HTTP calls to the meme and pat-GIF APIs.

DESIGN:
    One persistent aiohttp session for the bot's lifetime, opened in
    setup_hook and closed on shutdown. Calls are best-effort: every
    transport or payload problem surfaces as ContentAPIError and is
    never retried.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Optional

import aiohttp

from lounge.core.config import DEFAULT_MEME_API_URL, DEFAULT_PAT_API_URL
from lounge.core.errors import ContentAPIError
from lounge.core.logger import logger


@dataclass(frozen=True)
class Meme:
    title: str
    url: str
    post_link: Optional[str] = None


class ContentAPI:
    """Client for the third-party content APIs used by the fun commands."""

    def __init__(
        self,
        meme_url: str = DEFAULT_MEME_API_URL,
        pat_url: str = DEFAULT_PAT_API_URL,
    ) -> None:
        self.meme_url = meme_url
        self.pat_url = pat_url
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the persistent HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": "LoungeBot (discord.py)"},
            )
        return self._session

    async def start(self) -> None:
        await self._get_session()
        logger.tree("Content API Ready", [
            ("Memes", self.meme_url),
            ("Pat GIFs", self.pat_url),
        ], emoji="🌐")

    async def close(self) -> None:
        """Close the HTTP session on shutdown."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _get_json(self, url: str) -> Dict[str, Any]:
        session = await self._get_session()
        try:
            async with session.get(url) as resp:
                resp.raise_for_status()
                data = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise ContentAPIError(f"GET {url} failed: {e}") from e

        if not isinstance(data, dict):
            raise ContentAPIError(f"GET {url} returned {type(data).__name__}, expected object")
        return data

    async def fetch_meme(self) -> Meme:
        """
        Fetch a random meme.

        Raises:
            ContentAPIError: On transport errors or a payload without title/url.
        """
        data = await self._get_json(self.meme_url)
        try:
            return Meme(
                title=str(data["title"]),
                url=str(data["url"]),
                post_link=data.get("postLink"),
            )
        except KeyError as e:
            raise ContentAPIError(f"Meme payload missing {e}") from e

    async def fetch_pat_gif(self) -> str:
        """
        Fetch the URL of a random head-pat GIF.

        Raises:
            ContentAPIError: On transport errors or a payload without url.
        """
        data = await self._get_json(self.pat_url)
        url = data.get("url")
        if not url:
            raise ContentAPIError("Pat payload missing url")
        return str(url)


__all__ = [
    "ContentAPI",
    "Meme",
]
