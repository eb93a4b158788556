"""Routing provider contract."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from jsonmaps.contracts.layers import Coordinate


class RouteRequest(BaseModel):
    origin: Coordinate
    destination: Coordinate
    waypoints: list[Coordinate] = Field(default_factory=list)
    profile: str = "driving"

    model_config = {"frozen": True}

    def points(self) -> list[Coordinate]:
        return [self.origin, *self.waypoints, self.destination]


class RoutingProvider(ABC):
    """Resolves endpoints into road-following ``[lng, lat]`` coordinates."""

    @abstractmethod
    async def route(self, request: RouteRequest) -> list[Coordinate]: ...  # pragma: no cover
