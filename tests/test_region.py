"""Tests for realms_zone.region."""

import random

import pytest

from realms_tags import TagValidationError
from realms_zone import CircleShape, Region, RegionMetadata, RectangleShape, polygon


def make_region(**kwargs) -> Region:
    defaults = dict(
        id="abc123def456",
        name="Old Wood",
        geometry=polygon([(0, 0), (50, 0), (50, 50), (0, 50)]),
        metadata=RegionMetadata.new("gm", timestamp="2026-01-01T00:00:00+00:00"),
    )
    defaults.update(kwargs)
    return Region(**defaults)


class TestRegionConstruction:
    """Test ids, names and metadata defaults."""

    def test_empty_id_rejected(self):
        with pytest.raises(ValueError, match="id cannot be empty"):
            Region(id="", name="x")

    def test_placeholder_name(self):
        region = Region(id="abcdef0123456789", name="")
        assert region.name == "Realm abcdef01"

    def test_metadata_new(self):
        metadata = RegionMetadata.new("gm", timestamp="2026-01-01T00:00:00+00:00")
        assert metadata.created == metadata.modified
        assert metadata.author == "gm"
        assert metadata.version == "1.0.0"


class TestRegionTags:
    """Test tag cardinality and queries."""

    def test_single_valued_replaces(self):
        region = make_region()
        region.add_tag("biome:forest")
        region.add_tag("biome:swamp")
        assert region.tags == ["biome:swamp"]

    def test_multi_valued_accumulates(self):
        region = make_region()
        region.add_tag("resources:timber")
        region.add_tag("resources:game")
        assert region.tags == ["resources:game", "resources:timber"]

    def test_single_valued_invariant_over_random_adds(self):
        values = {
            "biome": ["forest", "desert", "swamp"],
            "climate": ["arid", "temperate"],
            "travel_speed": ["0.5", "1.0", "1.5"],
            "elevation": ["peak", "lowland"],
        }
        rng = random.Random(7)
        region = make_region()
        for _ in range(200):
            key = rng.choice(sorted(values))
            region.add_tag(f"{key}:{rng.choice(values[key])}")
            for single_key in values:
                assert len(region.tags_with_prefix(single_key)) <= 1

    def test_duplicate_add_is_noop(self):
        region = make_region()
        region.add_tag("terrain:dense")
        modified = region.metadata.modified
        region.add_tag("terrain:dense")
        assert region.tags == ["terrain:dense"]
        assert region.metadata.modified == modified

    def test_invalid_tag_leaves_region_unchanged(self):
        region = make_region()
        region.add_tag("biome:forest")
        with pytest.raises(TagValidationError):
            region.add_tag("biome:old:growth")
        assert region.tags == ["biome:forest"]

    def test_has_tag_full_and_bare_key(self):
        region = make_region()
        region.add_tags(["biome:forest", "resources:timber"])
        assert region.has_tag("biome:forest")
        assert not region.has_tag("biome:desert")
        assert region.has_tag("resources")
        assert not region.has_tag("climate")

    def test_get_tag_and_number(self):
        region = make_region()
        region.add_tags(["travel_speed:0.75", "biome:forest"])
        assert region.get_tag("biome") == "forest"
        assert region.get_tag_number("travel_speed") == 0.75
        assert region.get_tag_number("biome") is None
        assert region.get_tag("climate") is None

    def test_module_tag_value(self):
        region = make_region()
        region.add_tag("module:jj:encounter_chance:0.3")
        assert region.get_tag("module") == "jj:encounter_chance:0.3"

    def test_remove_tag(self):
        region = make_region()
        region.add_tag("biome:forest")
        assert region.remove_tag("biome:forest") is True
        assert region.remove_tag("biome:forest") is False
        assert region.tags == []

    def test_remove_tags_by_key(self):
        region = make_region()
        region.add_tags(["resources:timber", "resources:game", "biome:forest"])
        assert region.remove_tags_by_key("resources") == 2
        assert region.tags == ["biome:forest"]

    def test_tags_with_prefix(self):
        region = make_region()
        region.add_tags(["resources:timber", "resources:game", "biome:forest"])
        assert region.tags_with_prefix("resources") == ["resources:game", "resources:timber"]
        assert region.tags_with_prefix("resources:") == ["resources:game", "resources:timber"]

    def test_mutation_touches_modified(self):
        region = make_region()
        created = region.metadata.created
        region.add_tag("custom:haunted")
        assert region.metadata.modified != created
        assert region.metadata.created == created

    def test_tag_order_does_not_affect_equality(self):
        first = make_region()
        second = make_region()
        for tag in ("resources:timber", "resources:game"):
            first.add_tag(tag)
        for tag in ("resources:game", "resources:timber"):
            second.add_tag(tag)
        first.metadata.modified = second.metadata.modified
        assert first == second


class TestRegionGeometry:
    """Test geometry delegation."""

    def test_contains_and_bounds(self):
        region = make_region(geometry=CircleShape(x=75, y=75, radius=25))
        assert region.contains_point(75, 80)
        assert not region.contains_point(0, 0)
        assert region.bounds().width == 50


class TestRegionSerialization:
    """Test dict round trips and malformed records."""

    @pytest.mark.parametrize("geometry", [
        polygon([(0, 0), (50, 0), (50, 50), (0, 50)]),
        RectangleShape(x=5, y=5, width=10, height=4, rotation=0.3),
        CircleShape(x=75, y=75, radius=25),
    ])
    def test_round_trip(self, geometry):
        region = make_region(geometry=geometry)
        region.add_tags(["biome:forest", "resources:timber", "module:jj:encounter_chance:0.3"])
        assert Region.from_dict(region.to_dict()) == region

    def test_to_dict_shape(self):
        region = make_region()
        region.add_tags(["resources:timber", "biome:forest"])
        data = region.to_dict()
        assert set(data) == {'id', 'name', 'geometry', 'tags', 'metadata'}
        assert data['tags'] == ["biome:forest", "resources:timber"]
        assert data['geometry']['type'] == "polygon"

    def test_from_dict_keeps_conflicting_tags(self):
        data = make_region().to_dict()
        data['tags'] = ["biome:forest", "biome:desert"]
        region = Region.from_dict(data)
        assert region.tags == ["biome:desert", "biome:forest"]

    def test_from_dict_missing_id(self):
        with pytest.raises(ValueError, match="Missing required Region field"):
            Region.from_dict({'name': "x"})

    def test_from_dict_bad_tags(self):
        data = make_region().to_dict()
        data['tags'] = "biome:forest"
        with pytest.raises(ValueError, match="list of strings"):
            Region.from_dict(data)

    def test_from_dict_bad_geometry(self):
        data = make_region().to_dict()
        data['geometry'] = {'type': 'hexagon'}
        with pytest.raises(ValueError):
            Region.from_dict(data)


class TestRegionCopy:
    """Test clone and assign_from."""

    def test_clone_is_independent(self):
        region = make_region()
        region.add_tag("biome:forest")
        copy = region.clone()
        copy.add_tag("biome:desert")
        assert region.tags == ["biome:forest"]
        assert copy == copy.clone()

    def test_assign_from_other_id_rejected(self):
        with pytest.raises(ValueError, match="Cannot assign"):
            make_region().assign_from(make_region(id="other"))

    def test_assign_from_copies_state(self):
        region = make_region()
        draft = region.clone()
        draft.name = "Renamed"
        draft.add_tags(["biome:desert", "climate:arid"])
        region.assign_from(draft)
        assert region.name == "Renamed"
        assert region.tags == ["biome:desert", "climate:arid"]

