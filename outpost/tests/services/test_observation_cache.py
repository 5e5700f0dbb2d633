"""Tests for ObservationCache."""

import pytest

from outpost.adapters import GridWorld
from outpost.config import CacheSettings
from outpost.core import Position, RegionName, StructureCategory
from outpost.services import CacheKey, ObservationCache, QueryKind


class TestTTLs:
    """Tests for TTL configuration."""

    def test_default_ttls(self, cache: ObservationCache):
        """Defaults are 50 / 20 / 100 ticks."""
        assert cache.ttl(QueryKind.STRUCTURES) == 50
        assert cache.ttl(QueryKind.SITES) == 20
        assert cache.ttl(QueryKind.OCCUPANCY) == 100

    def test_custom_ttls(self, world: GridWorld):
        """TTLs come from settings."""
        settings = CacheSettings(ttl_structures=5, ttl_sites=6, ttl_occupancy=7)
        cache = ObservationCache(world, world.now, settings)
        assert cache.ttl(QueryKind.STRUCTURES) == 5
        assert cache.ttl(QueryKind.SITES) == 6
        assert cache.ttl(QueryKind.OCCUPANCY) == 7


class TestStructuresByType:
    """Tests for grouped structure inventories."""

    def test_empty_region(self, cache, region):
        """An empty region yields an empty mapping."""
        assert cache.get_structures_by_type(region) == {}

    def test_groups_by_category_in_order(self, cache, world, region):
        """Records are grouped by category, keeping world order."""
        world.add_structure(region, Position(10, 10), StructureCategory.ROAD)
        world.add_structure(region, Position(20, 20), StructureCategory.LINK)
        world.add_structure(region, Position(11, 10), StructureCategory.ROAD)

        grouped = cache.get_structures_by_type(region)

        assert set(grouped) == {StructureCategory.ROAD, StructureCategory.LINK}
        assert [r.position for r in grouped[StructureCategory.ROAD]] == [
            Position(10, 10),
            Position(11, 10),
        ]

    def test_fresh_read_returns_stored_value(self, cache, world, spy_world, region):
        """Within the TTL the same object comes back without a world query."""
        first = cache.get_structures_by_type(region)
        world.add_structure(region, Position(10, 10), StructureCategory.ROAD)
        world.advance(49)

        second = cache.get_structures_by_type(region)

        assert second is first
        assert second == {}
        assert spy_world.find_structures.call_count == 1

    def test_expired_read_recomputes(self, cache, world, spy_world, region):
        """At exactly the TTL the inventory is rebuilt and restamped."""
        cache.get_structures_by_type(region)
        world.add_structure(region, Position(10, 10), StructureCategory.ROAD)
        world.advance(50)

        grouped = cache.get_structures_by_type(region)

        assert StructureCategory.ROAD in grouped
        assert spy_world.find_structures.call_count == 2
        assert cache.entry(CacheKey(region, QueryKind.STRUCTURES)).computed_at == 50

    def test_regions_are_independent(self, cache, world, region):
        """Each region has its own entry."""
        other = RegionName("W2N1")
        world.add_region(other)
        world.add_structure(other, Position(5, 5), StructureCategory.TOWER)

        assert cache.get_structures_by_type(region) == {}
        assert StructureCategory.TOWER in cache.get_structures_by_type(other)


class TestConstructionSites:
    """Tests for construction-site inventories."""

    def test_inventory_contents(self, cache, world, region):
        """Inventory carries sites, count and ids."""
        world.add_site(region, Position(10, 10), StructureCategory.ROAD)
        world.add_site(region, Position(12, 10), StructureCategory.LINK)

        inventory = cache.get_construction_sites(region)

        assert inventory.count == 2
        assert inventory.ids == ("site-1", "site-2")
        assert [s.position for s in inventory.sites] == [Position(10, 10), Position(12, 10)]

    def test_sites_ttl(self, cache, world, spy_world, region):
        """Sites refresh after 20 ticks."""
        cache.get_construction_sites(region)
        world.add_site(region, Position(10, 10), StructureCategory.ROAD)

        world.advance(19)
        assert cache.get_construction_sites(region).count == 0

        world.advance(1)
        assert cache.get_construction_sites(region).count == 1
        assert spy_world.find_construction_sites.call_count == 2

    def test_kinds_do_not_cross_invalidate(self, cache, world, spy_world, region):
        """Refreshing sites leaves the structure entry untouched."""
        cache.get_structures_by_type(region)
        cache.get_construction_sites(region)

        world.advance(30)
        cache.get_construction_sites(region)
        cache.get_structures_by_type(region)

        assert spy_world.find_construction_sites.call_count == 2
        assert spy_world.find_structures.call_count == 1
        assert cache.entry(CacheKey(region, QueryKind.STRUCTURES)).computed_at == 0


class TestOccupancy:
    """Tests for per-tile occupancy and the shared region gate."""

    def test_reports_structures_and_sites(self, cache, world, region):
        """Both built structures and sites are occupants."""
        world.add_structure(region, Position(10, 10), StructureCategory.RAMPART)
        world.add_site(region, Position(10, 10), StructureCategory.ROAD)

        occupants = cache.get_occupancy(region, Position(10, 10))

        assert {o.category for o in occupants} == {
            StructureCategory.RAMPART,
            StructureCategory.ROAD,
        }

    def test_empty_tile(self, cache, region):
        """An empty tile has no occupants."""
        assert cache.get_occupancy(region, Position(10, 10)) == ()

    def test_memoized_within_ttl(self, cache, world, spy_world, region):
        """Asked at 100 then 150 with TTL 100, the world is queried once."""
        world.advance(100)
        first = cache.get_occupancy(region, Position(10, 10))
        world.advance(50)
        second = cache.get_occupancy(region, Position(10, 10))

        assert second is first
        assert spy_world.look_at.call_count == 1

    def test_repeated_reads_in_one_tick_identical(self, cache, world, region):
        """Many reads in one tick return the very same object."""
        world.add_structure(region, Position(10, 10), StructureCategory.ROAD)
        results = [cache.get_occupancy(region, Position(10, 10)) for _ in range(5)]
        assert all(r is results[0] for r in results)

    def test_stale_until_gate_expires(self, cache, world, region):
        """A structure built after a look-up stays hidden until expiry."""
        tile = Position(10, 10)
        assert cache.get_occupancy(region, tile) == ()

        world.add_structure(region, tile, StructureCategory.ROAD)
        world.advance(99)
        assert cache.get_occupancy(region, tile) == ()

        world.advance(1)
        assert len(cache.get_occupancy(region, tile)) == 1

    def test_expired_gate_drops_every_tile(self, cache, world, spy_world, region):
        """Querying a brand-new tile after expiry refreshes the whole region."""
        a, b, c = Position(10, 10), Position(11, 10), Position(12, 10)
        cache.get_occupancy(region, a)
        world.advance(50)
        cache.get_occupancy(region, b)

        world.advance(50)
        cache.get_occupancy(region, c)

        assert CacheKey(region, QueryKind.OCCUPANCY, a) not in cache
        assert CacheKey(region, QueryKind.OCCUPANCY, b) not in cache
        assert CacheKey(region, QueryKind.OCCUPANCY, c) in cache
        assert cache.entry(CacheKey(region, QueryKind.OCCUPANCY)).computed_at == 100

        # b was cached only 50 ticks ago but still goes back to the world
        cache.get_occupancy(region, b)
        assert spy_world.look_at.call_count == 4

    def test_new_tile_does_not_extend_gate(self, cache, world, region):
        """Misses inside the window leave the gate timestamp alone."""
        cache.get_occupancy(region, Position(10, 10))
        world.advance(90)
        cache.get_occupancy(region, Position(11, 10))

        assert cache.entry(CacheKey(region, QueryKind.OCCUPANCY)).computed_at == 0

    def test_new_tile_within_window_uses_current_world(self, cache, world, region):
        """A tile first seen mid-window is read from the world at that time."""
        cache.get_occupancy(region, Position(10, 10))
        world.add_structure(region, Position(11, 10), StructureCategory.TOWER)
        world.advance(10)

        occupants = cache.get_occupancy(region, Position(11, 10))

        assert [o.category for o in occupants] == [StructureCategory.TOWER]

    def test_gate_is_per_region(self, cache, world, region):
        """Expiry in one region leaves another region's tiles alone."""
        other = RegionName("W2N1")
        world.add_region(other)
        cache.get_occupancy(region, Position(10, 10))
        world.advance(60)
        cache.get_occupancy(other, Position(10, 10))

        world.advance(40)
        cache.get_occupancy(region, Position(20, 20))

        assert CacheKey(region, QueryKind.OCCUPANCY, Position(10, 10)) not in cache
        assert CacheKey(other, QueryKind.OCCUPANCY, Position(10, 10)) in cache


class TestBlockingOccupant:
    """Tests for has_blocking_occupant."""

    def test_empty_tile_never_blocks(self, cache, region):
        """Nothing there, nothing blocking."""
        assert not cache.has_blocking_occupant(region, Position(10, 10), StructureCategory.LINK)

    def test_road_over_rampart(self, cache, world, region):
        """A road may go on a rampart."""
        world.add_structure(region, Position(10, 10), StructureCategory.RAMPART)
        assert not cache.has_blocking_occupant(region, Position(10, 10), StructureCategory.ROAD)

    def test_link_over_rampart(self, cache, world, region):
        """Anything else on a rampart is blocked."""
        world.add_structure(region, Position(10, 10), StructureCategory.RAMPART)
        assert cache.has_blocking_occupant(region, Position(10, 10), StructureCategory.LINK)

    def test_road_over_road_and_rampart(self, cache, world, region):
        """One blocking occupant is enough."""
        world.add_structure(region, Position(10, 10), StructureCategory.RAMPART)
        world.add_structure(region, Position(10, 10), StructureCategory.ROAD)
        assert cache.has_blocking_occupant(region, Position(10, 10), StructureCategory.ROAD)

    def test_site_blocks(self, cache, world, region):
        """Construction sites block like structures."""
        world.add_site(region, Position(10, 10), StructureCategory.EXTENSION)
        assert cache.has_blocking_occupant(region, Position(10, 10), StructureCategory.ROAD)


class TestMaps:
    """Tests for structure and site maps."""

    def test_structure_map(self, cache, world, region):
        """Map holds (position, category) pairs."""
        world.add_structure(region, Position(10, 10), StructureCategory.ROAD)
        world.add_structure(region, Position(10, 10), StructureCategory.RAMPART)

        placed = cache.structure_map(region)

        assert (Position(10, 10), StructureCategory.ROAD) in placed
        assert (Position(10, 10), StructureCategory.RAMPART) in placed
        assert (Position(10, 10), StructureCategory.LINK) not in placed

    def test_site_map(self, cache, world, region):
        """Site map mirrors the site inventory."""
        world.add_site(region, Position(3, 4), StructureCategory.LINK)
        assert cache.site_map(region) == frozenset({(Position(3, 4), StructureCategory.LINK)})


class TestClearAll:
    """Tests for clear_all."""

    def test_discards_everything(self, cache, world, spy_world, region):
        """All kinds in all regions are dropped and recomputed on next read."""
        cache.get_structures_by_type(region)
        cache.get_construction_sites(region)
        cache.get_occupancy(region, Position(10, 10))
        assert len(cache) > 0

        cache.clear_all()
        assert len(cache) == 0

        cache.get_structures_by_type(region)
        cache.get_occupancy(region, Position(10, 10))
        assert spy_world.find_structures.call_count == 2
        assert spy_world.look_at.call_count == 2

    def test_clear_empty_cache(self, cache):
        """Clearing an empty cache is harmless."""
        cache.clear_all()
        assert len(cache) == 0


@pytest.mark.parametrize("delta, refreshed", [
    (0, False),
    (99, False),
    (100, True),
    (250, True),
])
def test_occupancy_staleness_boundary(cache, world, spy_world, region, delta, refreshed):
    """Reads younger than the TTL are served from the cache, older ones are not."""
    cache.get_occupancy(region, Position(10, 10))
    world.advance(delta)
    cache.get_occupancy(region, Position(10, 10))

    assert spy_world.look_at.call_count == (2 if refreshed else 1)
