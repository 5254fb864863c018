"""
Aurora Tests: Requirement Store
"""

import pytest

from aurora_tools.requirements.persistence import RequirementStore


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "ModelData" / "Aurora_Requirements.db"


@pytest.mark.unit
class TestRequirementStore:

    def test_new_store_creates_file(self, store_path):
        store = RequirementStore.open(store_path)

        assert store.is_new
        assert store_path.exists()
        assert len(store) == 0

    def test_nothing_persisted_before_save(self, store_path):
        store = RequirementStore(store_path)
        store.add("R-1", "First")

        assert "R-1" not in RequirementStore(store_path)

    def test_save_and_reload(self, store_path):
        store = RequirementStore(store_path)
        req = store.add("R-1", "First")
        req.description = "Body text"
        req.rationale = "Because"
        req.keywords = ["Verification: Test", "Notes: see drawing"]
        store.add("R-2", "Second")

        assert store.save() == 2

        reloaded = RequirementStore.open(store_path)
        assert not reloaded.is_new
        first = reloaded.find("R-1")
        assert first.summary == "First"
        assert first.description == "Body text"
        assert first.rationale == "Because"
        assert first.keywords == ["Verification: Test", "Notes: see drawing"]
        assert first.created_at

    def test_insertion_order_preserved(self, store_path):
        store = RequirementStore(store_path)
        for req_id in ["R-9", "R-1", "R-5"]:
            store.add(req_id)
        store.save()

        assert [r.id for r in RequirementStore(store_path).list_requirements()] == ["R-9", "R-1", "R-5"]

    def test_duplicate_id_rejected(self, store_path):
        store = RequirementStore(store_path)
        store.add("R-1")

        with pytest.raises(ValueError):
            store.add("R-1")

    def test_empty_id_rejected(self, store_path):
        with pytest.raises(ValueError):
            RequirementStore(store_path).add("")

    def test_find_missing(self, store_path):
        assert RequirementStore(store_path).find("R-404") is None

    def test_update_in_place(self, store_path):
        store = RequirementStore(store_path)
        store.add("R-1", "Old")
        store.save()

        store = RequirementStore(store_path)
        store.find("R-1").summary = "New"
        store.save()

        reloaded = RequirementStore(store_path)
        assert len(reloaded) == 1
        assert reloaded.find("R-1").summary == "New"

    def test_only_changed_records_are_restamped(self, store_path):
        store = RequirementStore(store_path)
        store.add("R-1", "First")
        store.add("R-2", "Second")
        store.save()
        stamps = {r.id: r.updated_at for r in RequirementStore(store_path)}

        store = RequirementStore(store_path)
        store.find("R-1").summary = "First (revised)"
        store.find("R-2").summary = "Second"

        assert store.changed() == ["R-1"]
        assert store.save() == 1

        reloaded = RequirementStore(store_path)
        assert reloaded.find("R-2").updated_at == stamps["R-2"]
        assert reloaded.find("R-1").summary == "First (revised)"
        assert reloaded.changed() == []

    def test_nothing_written_when_unchanged(self, store_path):
        store = RequirementStore(store_path)
        store.add("R-1", "First")
        store.save()

        assert store.save() == 0
