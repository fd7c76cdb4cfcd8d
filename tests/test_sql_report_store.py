"""Tests for the SQLAlchemy-backed report cache."""

import dataclasses
from datetime import timezone

import pytest

from repo_introspector.domain.entities import ContributorStat
from repo_introspector.infrastructure.sql_report_store import SqlReportStore


@pytest.fixture
def store(tmp_path):
    s = SqlReportStore.from_url(f"sqlite:///{tmp_path / 'reports.db'}")
    yield s
    s.close()


class TestSqlReportStore:
    def test_missing_key(self, store):
        assert store.get("acme/widget") is None

    def test_round_trip(self, store, sample_report):
        store.save(sample_report)
        loaded = store.get("acme/widget")

        assert loaded == sample_report
        assert loaded.generated_at.tzinfo is not None
        assert loaded.commit_timeline[0].tzinfo == timezone.utc

    def test_save_replaces_existing(self, store, sample_report):
        store.save(sample_report)
        newer = dataclasses.replace(
            sample_report, contributors=[ContributorStat(login="carol", total=9)]
        )
        store.save(newer)

        loaded = store.get("acme/widget")
        assert [c.login for c in loaded.contributors] == ["carol"]

    def test_keys_are_independent(self, store, sample_report):
        other = dataclasses.replace(
            sample_report,
            repo_info=dataclasses.replace(sample_report.repo_info, full_name="acme/gadget"),
        )
        store.save(sample_report)
        store.save(other)
        assert store.get("acme/widget").full_name == "acme/widget"
        assert store.get("acme/gadget").full_name == "acme/gadget"

    def test_persists_across_instances(self, tmp_path, sample_report):
        url = f"sqlite:///{tmp_path / 'shared.db'}"
        first = SqlReportStore.from_url(url)
        first.save(sample_report)
        first.close()

        second = SqlReportStore.from_url(url)
        try:
            assert second.get("acme/widget") == sample_report
        finally:
            second.close()
