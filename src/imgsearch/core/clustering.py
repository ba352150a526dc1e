"""
Greedy place clustering.

Each unassigned item, in input order, seeds a cluster and absorbs every
still-unassigned item within ``radius_km`` of the seed. Membership is tested
against the seed only, so two members may be up to twice the radius apart,
and a different input order can produce different clusters.
"""

from collections.abc import Sequence

from ..logging_config import get_logger
from ..models.cluster import Cluster, GeoItem
from .geo import haversine_km, is_valid_coordinate

logger = get_logger(__name__)

DEFAULT_RADIUS_KM = 1.0


def cluster_by_location(items: Sequence[GeoItem], radius_km: float = DEFAULT_RADIUS_KM) -> list[Cluster]:
    """
    Group geo items into seed-radius clusters.

    Every item with valid coordinates lands in exactly one cluster. Items
    without usable coordinates are skipped.

    Args:
        items: Items to cluster, in the order that decides seeding
        radius_km: Maximum haversine distance to the seed, inclusive

    Returns:
        Clusters in the order their seeds were encountered
    """
    candidates = [item for item in items if is_valid_coordinate(item.latitude, item.longitude)]

    skipped = len(items) - len(candidates)
    if skipped:
        logger.debug("cluster_items_skipped", skipped=skipped, reason="invalid_coordinates")

    used = [False] * len(candidates)
    clusters: list[Cluster] = []

    for seed_index, seed in enumerate(candidates):
        if used[seed_index]:
            continue

        used[seed_index] = True
        members = [seed]

        for other_index, other in enumerate(candidates):
            if used[other_index]:
                continue

            distance = haversine_km(seed.latitude, seed.longitude, other.latitude, other.longitude)
            if distance <= radius_km:
                members.append(other)
                used[other_index] = True

        clusters.append(Cluster(items=members))

    logger.debug("items_clustered", items=len(candidates), clusters=len(clusters), radius_km=radius_km)
    return clusters
