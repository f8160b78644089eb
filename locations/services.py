"""
Locations — Service Layer

Read-only location directory. Location kind is resolved here into the
closed LocationKind enumeration; callers never branch on raw strings.

@file locations/services.py
"""

from dataclasses import dataclass

from core.exceptions import ResourceNotFoundError

from .models import Location, LocationKind


@dataclass(frozen=True)
class LocationRef:
    id: int
    name: str
    kind: LocationKind


class LocationDirectory:
    """Resolves location identifiers to their kind."""

    @staticmethod
    def get_location(location_id) -> LocationRef:
        row = (
            Location.objects.filter(pk=location_id)
            .values('id', 'name', 'kind')
            .first()
        )
        if row is None:
            raise ResourceNotFoundError(
                detail=f'Location {location_id} not found.', location_id=location_id,
            )
        return LocationRef(id=row['id'], name=row['name'], kind=LocationKind(row['kind']))
