"""EmySound fingerprint provider.

Talks to a self-hosted EmySound (SoundFingerprinting Emy) REST API:

    POST /api/v1/Query?mediaType=Audio&minCoverage=<f>   multipart ``file``
    POST /api/v1/Tracks                                  multipart ``file``
                                                         + Id/Artist/Title

Query results arrive as a JSON list; each entry carries the matched
``track`` (id, artist, title) and an ``audio`` block with the match score.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

import httpx
import structlog
from pydantic import ValidationError

from radiorecall.interfaces.fingerprint_provider import IFingerprintProvider
from radiorecall.models.records import FingerprintMatch, TrackInfo
from radiorecall.utils.errors import FingerprintError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_BASE_URL = "http://localhost:3340"
_DEFAULT_TIMEOUT = 60.0
_QUERY_PATH = "/api/v1/Query"
_TRACKS_PATH = "/api/v1/Tracks"
_MEDIA_TYPE = "Audio"


class EmySoundFingerprintProvider(IFingerprintProvider):
    """Fingerprint queries and registrations against an EmySound server."""

    def __init__(
        self,
        base_url: str = _DEFAULT_BASE_URL,
        username: str = "ADMIN",
        password: str = "",
        min_coverage: float = 0.2,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._min_coverage = min_coverage
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(_DEFAULT_TIMEOUT),
        )
        self._auth = httpx.BasicAuth(username, password)

    # ------------------------------------------------------------------
    # IFingerprintProvider implementation
    # ------------------------------------------------------------------

    async def query(self, label: str, data: bytes) -> list[FingerprintMatch]:
        response = await self._post(
            _QUERY_PATH,
            params={"mediaType": _MEDIA_TYPE, "minCoverage": self._min_coverage},
            files={"file": (label, data, "application/octet-stream")},
        )
        try:
            payload = response.json()
        except ValueError as exc:
            raise FingerprintError(
                message=f"Query returned invalid JSON: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if not isinstance(payload, list):
            raise FingerprintError(
                message=f"Query returned {type(payload).__name__}, expected a list",
                provider_name=self.get_provider_name(),
            )

        matches = [m for m in (self._parse_result(entry) for entry in payload) if m is not None]
        logger.debug("emysound_query_done", label=label, matches=len(matches))
        return matches

    async def insert(self, track: TrackInfo, label: str, data: bytes) -> None:
        await self._post(
            _TRACKS_PATH,
            data={
                "Id": str(track.id),
                "Artist": track.artist,
                "Title": track.title,
                "MediaType": _MEDIA_TYPE,
            },
            files={"file": (label, data, "application/octet-stream")},
        )
        logger.debug("emysound_track_inserted", id=str(track.id), label=label)

    def get_provider_name(self) -> str:
        return "emysound"

    async def aclose(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _post(self, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self._base_url}{path}"
        try:
            response = await self._client.post(url, auth=self._auth, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FingerprintError(
                message=(
                    f"HTTP {exc.response.status_code} from {path}: "
                    f"{exc.response.text[:200]}"
                ),
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPError as exc:
            raise FingerprintError(
                message=f"HTTP error calling {path}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        return response

    @staticmethod
    def _parse_result(entry: Any) -> FingerprintMatch | None:
        """Map one query result entry; malformed entries are skipped."""
        if not isinstance(entry, dict):
            return None
        track = entry.get("track") or {}
        audio = entry.get("audio") or {}
        if not isinstance(track, dict) or not isinstance(audio, dict):
            logger.warning("emysound_result_malformed", entry=str(entry)[:200])
            return None

        try:
            track_id = UUID(str(track.get("id")))
        except ValueError:
            logger.warning("emysound_result_bad_track_id", track_id=track.get("id"))
            return None

        score = audio.get("score")
        if score is None:
            coverage = audio.get("coverage")
            score = coverage.get("queryCoverage", 0.0) if isinstance(coverage, dict) else 0.0

        try:
            score = float(score)
        except (TypeError, ValueError):
            logger.warning("emysound_result_bad_score", track_id=str(track_id), score=score)
            score = 0.0

        try:
            return FingerprintMatch(
                id=track_id,
                artist=track.get("artist"),
                title=track.get("title"),
                score=score,
            )
        except ValidationError as exc:
            logger.warning("emysound_result_invalid", track_id=str(track_id), error=str(exc))
            return None
