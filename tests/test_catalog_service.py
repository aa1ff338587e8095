"""Tests for the catalog browsing views."""
from __future__ import annotations

import pytest

from cryptozoo.application.catalog_service import CatalogService
from cryptozoo.domain.errors import NotFoundError, ValidationError


@pytest.fixture
def service(vertices, edges):
    return CatalogService(vertices, edges)


class TestCatalogService:

    def test_summary(self, service, sample_catalog):
        summary = service.summary()
        assert summary["vertex_count"] == 3
        assert summary["edge_count"] == 2
        assert summary["edge_type_counts"] == {
            "construction": 1, "impossibility": 0, "reduction": 0, "separation": 1,
        }

    def test_empty_summary(self, service):
        summary = service.summary()
        assert summary["vertex_count"] == 0
        assert set(summary["edge_type_counts"].values()) == {0}

    def test_filters(self, service, sample_catalog):
        assert [v.id for v in service.list_vertices(type_name="scheme")] == ["pke"]
        assert {v.id for v in service.list_vertices(tag="MINICRYPT")} == {"owf", "prg"}
        assert [e.id for e in service.list_edges(type_name="construction", tag="classic")] == ["owf-to-prg"]
        assert len(service.list_edges()) == 2

    def test_type_and_tag_must_both_match(self, service, sample_catalog):
        assert service.list_vertices(type_name="scheme", tag="minicrypt") == []
        assert service.list_edges(type_name="separation", tag="classic") == []
        assert [v.id for v in service.list_vertices(type_name="scheme", tag="cryptomania")] == ["pke"]

    def test_vertex_detail(self, service, sample_catalog):
        detail = service.vertex_detail("owf")
        assert detail["vertex"].id == "owf"
        assert {e.id for e in detail["outgoing_edges"]} == {"owf-to-prg", "ir-separation"}
        assert detail["incoming_edges"] == []
        assert {v.id for v in detail["outgoing_vertices"]} == {"prg", "pke"}
        assert [v.id for v in detail["related_vertices"]] == ["prg"]

    def test_edge_detail_reports_dangling(self, service, sample_catalog):
        detail = service.edge_detail("ir-separation")
        assert [v.id for v in detail["source_vertices"]] == ["owf"]
        assert [v.id for v in detail["target_vertices"]] == ["pke"]
        assert detail["dangling_ids"] == ["ghost"]

    def test_missing_entities(self, service):
        with pytest.raises(NotFoundError):
            service.vertex_detail("nope")
        with pytest.raises(NotFoundError):
            service.edge_detail("nope")

    def test_search(self, service, sample_catalog):
        results = service.search("  one-way ")
        assert results["query"] == "one-way"
        assert [v.id for v in results["vertices"]] == ["owf"]
        assert [e.id for e in results["edges"]] == ["owf-to-prg", "ir-separation"]

    def test_graph_skips_dangling_links(self, service, sample_catalog):
        graph = service.graph()
        assert {n["id"] for n in graph["nodes"]} == {"owf", "prg", "pke"}
        assert {n["label"] for n in graph["nodes"]} == {"OWF", "PRG", "PKE"}
        links = {(l["source"], l["target"], l["edge_id"]) for l in graph["links"]}
        assert links == {("owf", "prg", "owf-to-prg"), ("owf", "pke", "ir-separation")}

    def test_get_entity(self, service, sample_catalog):
        assert service.get_entity("edge", "owf-to-prg").name == "HILL"
        with pytest.raises(NotFoundError):
            service.get_entity("vertex", "ghost")
        with pytest.raises(ValidationError):
            service.get_entity("user", "owf")
