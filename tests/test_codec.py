"""Tests for realms_io: export documents and import policies."""

import json
import logging

import pytest

from realms_io import (
    FORMAT_TAG,
    ExportDocument,
    ImportPolicy,
    UnsupportedFormatError,
    export_store,
    import_store,
)
from realms_zone import CircleShape, RegionStore, StoreConfig, polygon


@pytest.fixture
def one_region_store(store):
    store.create("Old Wood", polygon([(0, 0), (50, 0), (50, 50), (0, 50)]), ["biome:forest"])
    return store


class TestExport:
    """Test export_store and the document envelope."""

    def test_export_envelope(self, sample_store):
        document = export_store(sample_store, author="gm", description="Session 4")
        data = document.to_dict()

        assert data['format'] == FORMAT_TAG
        assert data['metadata']['author'] == "gm"
        assert data['metadata']['description'] == "Session 4"
        assert data['metadata']['version'] == "1.0.0"
        assert data['metadata']['scope_id'] == "test_scene"
        assert data['bounds'] is None
        assert [record['name'] for record in data['regions']] == ["Old Wood", "Dune Sea"]

    def test_records_are_verbatim(self, sample_store):
        document = export_store(sample_store)
        assert document.regions == [region.to_dict() for region in sample_store]

    def test_author_defaults_to_config(self, clock):
        store = RegionStore(config=StoreConfig(author="cartographer"), clock=clock)
        assert export_store(store).metadata.author == "cartographer"

    def test_bounds_from_plane(self):
        store = RegionStore(config=StoreConfig(plane_width=4000, plane_height=3000))
        assert export_store(store).to_dict()['bounds'] == {
            'x': 0.0, 'y': 0.0, 'width': 4000.0, 'height': 3000.0
        }

    def test_json_round_trip(self, sample_store):
        document = export_store(sample_store, description="backup")
        assert ExportDocument.from_json(document.to_json()) == document

    def test_bounds_without_origin(self):
        document = ExportDocument.from_dict({
            'format': FORMAT_TAG,
            'regions': [],
            'bounds': {'width': 100, 'height': 80},
        })
        assert document.bounds.width == 100
        assert document.bounds.x == 0


class TestDocumentValidation:
    """Test envelope-level failures."""

    @pytest.mark.parametrize("data", [
        {'format': 'realms-v0', 'regions': []},
        {'regions': []},
    ])
    def test_unsupported_format(self, data):
        with pytest.raises(UnsupportedFormatError):
            ExportDocument.from_dict(data)

    def test_unsupported_format_is_value_error(self):
        with pytest.raises(ValueError):
            ExportDocument(format="other")

    def test_regions_must_be_list(self):
        with pytest.raises(ValueError, match="must be a list"):
            ExportDocument.from_dict({'format': FORMAT_TAG, 'regions': {'a': 1}})

    def test_not_a_mapping(self):
        with pytest.raises(ValueError):
            ExportDocument.from_dict(["not", "a", "document"])

    def test_invalid_json(self):
        with pytest.raises(ValueError, match="Invalid export document JSON"):
            ExportDocument.from_json("{not json")


class TestImportPolicies:
    """Test SKIP, MERGE and REPLACE."""

    def test_skip_twice_then_merge(self, one_region_store):
        store = one_region_store
        document = export_store(store)
        store.clear()

        assert import_store(store, document, ImportPolicy.SKIP) == 1
        assert len(store) == 1

        assert import_store(store, document, ImportPolicy.SKIP) == 0
        assert len(store) == 1

        assert import_store(store, document, ImportPolicy.MERGE) == 1
        assert len(store) == 2
        ids = [region.id for region in store]
        assert len(set(ids)) == 2

    def test_default_policy_is_skip(self, one_region_store):
        document = export_store(one_region_store)
        assert import_store(one_region_store, document) == 0

    def test_merge_keeps_free_ids(self, one_region_store, clock):
        document = export_store(one_region_store)
        target = RegionStore(scope_id="other", clock=clock)
        assert import_store(target, document, ImportPolicy.MERGE) == 1
        assert [region.id for region in target] == [record['id'] for record in document.regions]

    def test_merge_rekeyed_region_keeps_content(self, one_region_store):
        original = one_region_store.all()[0]
        document = export_store(one_region_store)
        import_store(one_region_store, document, ImportPolicy.MERGE)

        copy = [region for region in one_region_store if region.id != original.id][0]
        assert copy.tags == original.tags
        assert copy.geometry == original.geometry
        assert copy.metadata == original.metadata

    def test_replace(self, sample_store, clock):
        other = RegionStore(clock=clock)
        other.create("Lone Peak", CircleShape(x=0, y=0, radius=3), ["biome:mountain"])
        document = export_store(other)

        assert import_store(sample_store, document, ImportPolicy.REPLACE) == 1
        assert [region.name for region in sample_store] == ["Lone Peak"]

    def test_replace_skips_repeated_ids(self, one_region_store):
        data = export_store(one_region_store).to_dict()
        data['regions'].append(dict(data['regions'][0], name="Duplicate"))
        assert import_store(one_region_store, data, ImportPolicy.REPLACE) == 1
        assert [region.name for region in one_region_store] == ["Old Wood"]

    def test_policy_from_string(self, one_region_store):
        document = export_store(one_region_store)
        assert import_store(one_region_store, document, "merge") == 1

    def test_unknown_policy(self, one_region_store):
        with pytest.raises(ValueError):
            import_store(one_region_store, export_store(one_region_store), "overwrite")

    def test_imported_regions_are_queryable(self, sample_store, clock):
        target = RegionStore(clock=clock)
        import_store(target, export_store(sample_store).to_dict())
        assert [region.name for region in target.query_point(25, 25)] == ["Old Wood"]
        assert [region.name for region in target.query_tags(["biome:desert"])] == ["Dune Sea"]


class TestImportFailures:
    """Test format rejection and per-record recovery."""

    def test_bad_format_leaves_store_untouched(self, sample_store):
        data = export_store(sample_store).to_dict()
        data['format'] = "realms-v0"
        with pytest.raises(UnsupportedFormatError):
            import_store(sample_store, data, ImportPolicy.REPLACE)
        assert len(sample_store) == 2

    def test_malformed_records_are_skipped(self, store, caplog):
        data = {
            'format': FORMAT_TAG,
            'regions': [
                {'name': "No id"},
                {'id': "r1", 'name': "Bad tag", 'tags': ["biome:old:growth"]},
                {'id': "r2", 'name': "Bad geometry", 'geometry': {'type': 'hexagon'}},
                "not a record",
                {'id': "r3", 'name': "Good", 'tags': ["biome:forest"],
                 'geometry': {'type': 'circle', 'x': 0, 'y': 0, 'radius': 5}},
            ],
        }
        with caplog.at_level(logging.WARNING, logger="realms.codec"):
            assert import_store(store, data) == 1

        assert [region.id for region in store] == ["r3"]
        skipped = [
            json.loads(record.getMessage()) for record in caplog.records
            if record.name == "realms.codec" and record.levelno == logging.WARNING
        ]
        assert len(skipped) == 4
        assert {entry['event'] for entry in skipped} == {"import.record.skipped"}
        assert [entry['metadata']['index'] for entry in skipped] == [0, 1, 2, 3]

    def test_oversized_coordinate_is_record_error_under_replace(self, clock):
        store = RegionStore(clock=clock)
        store.create("Existing")
        circle = {'type': 'circle', 'x': 0, 'y': 0, 'radius': 5}
        data = {
            'format': FORMAT_TAG,
            'regions': [
                {'id': "good1", 'geometry': circle},
                {'id': "huge", 'geometry': dict(circle, x=10 ** 400)},
                {'id': "good2", 'geometry': circle},
            ],
        }
        assert import_store(store, data, ImportPolicy.REPLACE) == 2
        assert [region.id for region in store] == ["good1", "good2"]

    def test_oversized_polygon_point_is_record_error(self, store):
        data = {
            'format': FORMAT_TAG,
            'regions': [
                {'id': "huge", 'geometry': {'type': 'polygon', 'points': [0, 0, 10 ** 400, 0, 5, 5]}},
                {'id': "good", 'geometry': {'type': 'polygon', 'points': [0, 0, 10, 0, 5, 5]}},
            ],
        }
        assert import_store(store, data, ImportPolicy.SKIP) == 1
        assert [region.id for region in store] == ["good"]

    def test_conflicting_tags_survive_import(self, store):
        data = {
            'format': FORMAT_TAG,
            'regions': [{'id': "r1", 'name': "Confused", 'tags': ["biome:forest", "biome:desert"]}],
        }
        assert import_store(store, data) == 1
        region = store.get("r1")
        assert region.tags == ["biome:desert", "biome:forest"]
        assert store.conflicts("r1") == ["Multiple biome tags found: biome:desert, biome:forest"]

    def test_missing_fields_take_defaults(self, store):
        data = {'format': FORMAT_TAG, 'regions': [{'id': "abcdefgh99"}]}
        assert import_store(store, data) == 1
        region = store.get("abcdefgh99")
        assert region.name == "Realm abcdefgh"
        assert region.tags == []
        assert region.geometry.is_empty
