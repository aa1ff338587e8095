"""Tests for table creation and catalog seeding."""
from __future__ import annotations

import json

from sqlalchemy import inspect

from cryptozoo.db.init_db import create_tables, drop_all_tables, seed_catalog


class TestInitDb:

    def test_create_and_drop_tables(self, engine):
        drop_all_tables(engine)
        assert inspect(engine).get_table_names() == []
        create_tables(engine)
        assert set(inspect(engine).get_table_names()) == {"vertices", "edges", "edit_requests", "users"}

    def test_seed_catalog(self, db, vertices, edges, tmp_path):
        seed = tmp_path / "seed.json"
        seed.write_text(json.dumps({
            "vertices": [
                {"id": "owf", "name": "One-Way Functions", "relatedVertices": ["prg"], "unknown": 1},
                {"id": "prg", "name": "Pseudorandom Generators"},
            ],
            "edges": [
                {"id": "hill", "type": "construction", "name": "HILL",
                 "sourceVertices": ["owf"], "targetVertices": ["prg"]},
            ],
        }))

        assert seed_catalog(db, seed) == {"vertices": 2, "edges": 1}
        assert vertices.get("owf").related_vertices == ["prg"]
        assert edges.get("hill").target_vertices == ["prg"]

        # Reseeding skips existing ids
        assert seed_catalog(db, seed) == {"vertices": 0, "edges": 0}
