from __future__ import annotations

import asyncio
from typing import Protocol

import httpx
from pydantic import ValidationError

from jokes_shared.models import ErrorResponse, Joke, JokeListResponse

NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}


class JokesApiError(RuntimeError):
    pass


class JokesUnavailableError(JokesApiError):
    """The service could not be reached or answered with something unusable."""


class NoJokesError(JokesApiError):
    """The service answered, but had no jokes to give."""


class JokesClient(Protocol):
    async def fetch_jokes(self) -> list[Joke]: ...


def _no_jokes_message(response: httpx.Response) -> str | None:
    try:
        payload = ErrorResponse.model_validate(response.json())
    except ValueError:
        return None
    return payload.message


class HttpJokesClient:
    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    async def fetch_jokes(self) -> list[Joke]:
        try:
            async with asyncio.timeout(self._timeout_seconds):
                async with httpx.AsyncClient(
                    base_url=self._base_url,
                    timeout=self._timeout_seconds,
                    headers=NO_CACHE_HEADERS,
                    transport=self._transport,
                ) as client:
                    response = await client.get("/post")
        except TimeoutError as exc:
            raise JokesUnavailableError(
                f"Request timed out after {self._timeout_seconds:g}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise JokesUnavailableError(str(exc) or type(exc).__name__) from exc

        if response.status_code == 404:
            message = _no_jokes_message(response)
            if message is not None:
                raise NoJokesError(message)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise JokesUnavailableError(str(exc)) from exc

        try:
            payload = JokeListResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise JokesUnavailableError("Invalid jokes payload") from exc

        if not payload.data:
            raise NoJokesError("No data received")
        return payload.data
