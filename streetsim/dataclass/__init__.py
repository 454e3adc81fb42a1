"""Dataclass module for the static street layout."""
from streetsim.dataclass.dataclass import (Bounds, Lot, LotState, LotUsage,
                                           MapMetadata, Orientation,
                                           RoadSegment)

__all__ = ['Bounds', 'Lot', 'LotState', 'LotUsage', 'MapMetadata', 'Orientation', 'RoadSegment']
