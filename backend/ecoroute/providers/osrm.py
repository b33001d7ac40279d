from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import NoRouteFound, ProviderUnavailable
from ..models import Coordinate, RouteCandidate
from ..settings import settings

logger = logging.getLogger(__name__)


class OsrmGeometry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str = "LineString"
    coordinates: list[tuple[float, float]] = Field(default_factory=list)


class OsrmRoute(BaseModel):
    model_config = ConfigDict(extra="ignore")

    distance: float = Field(ge=0)
    duration: float = Field(ge=0)
    geometry: OsrmGeometry
    weight_name: str | None = None


class OsrmResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: str
    message: str | None = None
    routes: list[OsrmRoute] = Field(default_factory=list)


def _to_candidate(route: OsrmRoute) -> RouteCandidate:
    # GeoJSON orders pairs as [lon, lat]
    path = [Coordinate(lat, lon) for lon, lat in route.geometry.coordinates]
    return RouteCandidate(
        distance_m=route.distance,
        duration_s=route.duration,
        path=tuple(path),
        summary=route.weight_name,
    )


class OsrmProvider:
    """
    Routing provider backed by an OSRM ``/route`` service.

    Talks HTTP through a shared ``httpx.AsyncClient`` and returns every route
    OSRM offers (main route plus alternatives) as RouteCandidates.
    """

    name = "osrm"

    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        *,
        alternatives: bool | None = None,
        timeout: float | None = None,
        connect_timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = (base_url or settings.OSRM_BASE_URL).rstrip("/")
        self.profile = profile or settings.OSRM_PROFILE
        self.alternatives = settings.OSRM_ALTERNATIVES if alternatives is None else alternatives
        self._timeout = httpx.Timeout(
            timeout or settings.OSRM_TIMEOUT_SECONDS,
            connect=connect_timeout or settings.OSRM_CONNECT_TIMEOUT_SECONDS,
        )
        self._client = client
        self._owns_client = client is None
        self._client_lock = asyncio.Lock()

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            async with self._client_lock:
                if self._client is None:
                    self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    def route_url(self, origin: Coordinate, destination: Coordinate) -> str:
        coords = f"{origin.lng},{origin.lat};{destination.lng},{destination.lat}"
        return f"{self.base_url}/route/v1/{self.profile}/{coords}"

    async def fetch_routes(
        self, origin: Coordinate, destination: Coordinate
    ) -> list[RouteCandidate]:
        client = await self._get_client()
        params = {
            "alternatives": "true" if self.alternatives else "false",
            "overview": "full",
            "geometries": "geojson",
            "steps": "false",
        }
        started = time.perf_counter()
        try:
            resp = await client.get(self.route_url(origin, destination), params=params)
        except httpx.HTTPError as exc:
            raise ProviderUnavailable(f"OSRM request failed: {exc}") from exc

        payload = self._parse(resp)
        if payload.code == "NoRoute":
            raise NoRouteFound(payload.message or "OSRM found no route")
        if resp.status_code >= 400 or payload.code != "Ok":
            raise ProviderUnavailable(
                f"OSRM error {resp.status_code} {payload.code}: {payload.message or ''}".strip()
            )

        candidates: list[RouteCandidate] = []
        for index, route in enumerate(payload.routes):
            try:
                candidates.append(_to_candidate(route))
            except ValueError as exc:
                logger.warning("Skipping malformed OSRM route #%d: %s", index, exc)

        if not candidates:
            raise NoRouteFound(payload.message or "OSRM returned no usable routes")

        elapsed = (time.perf_counter() - started) * 1000
        logger.info(
            "OSRM route origin=(%.4f,%.4f) dest=(%.4f,%.4f) candidates=%d latency=%.1fms",
            origin.lat,
            origin.lng,
            destination.lat,
            destination.lng,
            len(candidates),
            elapsed,
        )
        return candidates

    @staticmethod
    def _parse(resp: httpx.Response) -> OsrmResponse:
        try:
            data: Any = resp.json()
        except ValueError as exc:
            raise ProviderUnavailable(
                f"OSRM returned non-JSON body (status {resp.status_code})"
            ) from exc
        try:
            return OsrmResponse.model_validate(data)
        except ValidationError as exc:
            raise ProviderUnavailable(f"Unexpected OSRM response shape: {exc}") from exc

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> OsrmProvider:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ["OsrmProvider", "OsrmResponse", "OsrmRoute"]
