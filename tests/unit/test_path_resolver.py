"""Tests for root-to-album path resolution."""
import logging

import pytest

from albumtree.errors import BrokenChainError
from albumtree.hierarchy import PathResolver


class TestFullPath:
    """Walking parent pointers to build paths."""

    def test_three_level_chain(self, mutator, album_repo):
        trip = mutator.insert(None, "Trip")
        paris = mutator.insert(trip, "Paris")
        day1 = mutator.insert(paris, "Day1")

        resolver = PathResolver(album_repo)

        assert resolver.full_path(album_repo.get_by_id(day1)) == "Trip/Paris/Day1"

    def test_root_path_is_its_title(self, album_repo, sample_tree):
        resolver = PathResolver(album_repo)

        assert resolver.full_path(album_repo.get_by_id(sample_tree["Work"])) == "Work"

    def test_custom_separator(self, album_repo, sample_tree):
        resolver = PathResolver(album_repo, separator=" > ")

        assert resolver.full_path(album_repo.get_by_id(sample_tree["Day2"])) == "Trip > Paris > Day2"

    def test_breadcrumbs(self, album_repo, sample_tree):
        resolver = PathResolver(album_repo)

        assert resolver.breadcrumbs(album_repo.get_by_id(sample_tree["Q1"])) == [
            {"id": sample_tree["Work"], "title": "Work"},
            {"id": sample_tree["Q1"], "title": "Q1"},
        ]


class TestBrokenChains:
    """Corrupted parent pointers are reported, never repaired."""

    def test_dangling_parent_raises_and_logs(self, album_repo, db_connection, sample_tree, caplog):
        db_connection.execute("UPDATE albums SET parent_id = 999 WHERE id = ?", (sample_tree["Paris"],))
        resolver = PathResolver(album_repo)

        with caplog.at_level(logging.CRITICAL, logger="albumtree.hierarchy.path_resolver"):
            with pytest.raises(BrokenChainError) as exc_info:
                resolver.full_path(album_repo.get_by_id(sample_tree["Day1"]))

        assert exc_info.value.album_id == sample_tree["Paris"]
        assert exc_info.value.parent_id == 999
        assert any(record.levelno == logging.CRITICAL for record in caplog.records)
        # Data is left as found
        assert album_repo.get_by_id(sample_tree["Paris"]).parent_id == 999

    def test_pointer_cycle_raises(self, album_repo, db_connection, sample_tree):
        db_connection.execute(
            "UPDATE albums SET parent_id = ? WHERE id = ?",
            (sample_tree["Day1"], sample_tree["Trip"])
        )
        resolver = PathResolver(album_repo)

        with pytest.raises(BrokenChainError):
            resolver.full_path(album_repo.get_by_id(sample_tree["Day1"]))
