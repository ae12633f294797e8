import pytest

from conftest import USER_ID, OTHER_USER_ID
from wildscout.services import journal, supabase_client
from wildscout.utils.errors import InvalidArgument

ENTRY_ID = "aaaaaaaa-aaaa-4aaa-8aaa-aaaaaaaaaaaa"

ENTRIES = [
    {"id": "1", "plant_name": "Purslane (Portulaca oleracea)", "common_name": "Purslane",
     "scientific_name": "Portulaca oleracea", "plant_type": "edible", "is_favorite": True},
    {"id": "2", "plant_name": "English Ivy (Hedera helix)", "common_name": "English Ivy",
     "scientific_name": "Hedera helix", "plant_type": "invasive", "is_favorite": False},
    {"id": "3", "plant_name": "Yarrow", "common_name": None, "scientific_name": None,
     "plant_type": "medicinal", "is_favorite": True},
]


def ids(entries):
    return [e["id"] for e in entries]


def test_filter_by_search_text():
    assert ids(journal.filter_journal_entries(ENTRIES, "hedera")) == ["2"]
    assert ids(journal.filter_journal_entries(ENTRIES, "  PURS ")) == ["1"]
    assert ids(journal.filter_journal_entries(ENTRIES, "")) == ["1", "2", "3"]


def test_filter_by_type_and_favorites():
    assert ids(journal.filter_journal_entries(ENTRIES, None, "favorites")) == ["1", "3"]
    assert ids(journal.filter_journal_entries(ENTRIES, None, "invasive")) == ["2"]
    assert ids(journal.filter_journal_entries(ENTRIES, "ivy", "edible")) == []


def test_journal_stats():
    assert journal.journal_stats(ENTRIES) == {"total": 3, "favorites": 2, "edible": 1, "medicinal": 1}
    assert journal.journal_stats([]) == {"total": 0, "favorites": 0, "edible": 0, "medicinal": 0}


def test_is_valid_filter():
    assert journal.is_valid_filter("favorites")
    assert not journal.is_valid_filter("weeds")


def test_save_identification_splits_names(app, fake_db):
    result = {"species": "Purslane (Portulaca oleracea)", "type": "edible", "confidence": 0.88}
    with app.app_context():
        entry, error = journal.save_identification(USER_ID, result, image_url="u/p.jpg", notes=" tasty ")

    assert error is None
    assert entry["common_name"] == "Purslane"
    assert entry["scientific_name"] == "Portulaca oleracea"
    assert entry["plant_type"] == "edible"
    assert entry["confidence_score"] == 0.88
    assert entry["notes"] == "tasty"
    assert entry["is_favorite"] is False
    assert fake_db.tables["plant_journal"][0]["user_id"] == USER_ID


def test_save_identification_drops_bad_type_and_confidence(app):
    result = {"species": "Yarrow", "type": "weed", "confidence": 7}
    with app.app_context():
        entry, error = journal.save_identification(USER_ID, result)

    assert error is None
    assert entry["common_name"] == "Yarrow"
    assert entry["scientific_name"] is None
    assert entry["plant_type"] is None
    assert entry["confidence_score"] is None


def test_save_identification_requires_name(app):
    with app.app_context(), pytest.raises(InvalidArgument):
        journal.save_identification(USER_ID, {"species": "   "})


def test_save_identification_reports_store_failure(app, fake_db):
    fake_db.failing.add("plant_journal")
    with app.app_context():
        entry, error = journal.save_identification(USER_ID, {"species": "Yarrow"})
    assert entry is None
    assert "Error creating journal entry" in error


def test_toggle_favorite(app, fake_db):
    fake_db.tables["plant_journal"] = [{"id": ENTRY_ID, "user_id": USER_ID, "is_favorite": False}]
    with app.app_context():
        entry, error = journal.toggle_favorite(ENTRY_ID, USER_ID)
        assert error is None
        assert entry["is_favorite"] is True

        entry, error = journal.toggle_favorite(ENTRY_ID, USER_ID)
        assert entry["is_favorite"] is False


def test_toggle_favorite_other_users_entry_not_found(app, fake_db):
    fake_db.tables["plant_journal"] = [{"id": ENTRY_ID, "user_id": OTHER_USER_ID, "is_favorite": False}]
    with app.app_context():
        entry, error = journal.toggle_favorite(ENTRY_ID, USER_ID)
    assert (entry, error) == (None, None)
    assert fake_db.tables["plant_journal"][0]["is_favorite"] is False


def test_delete_entry_is_scoped_to_owner(app, fake_db):
    fake_db.tables["plant_journal"] = [{"id": ENTRY_ID, "user_id": OTHER_USER_ID}]
    with app.app_context():
        assert journal.delete_entry(ENTRY_ID, USER_ID) == (False, None)
        assert journal.delete_entry(ENTRY_ID, OTHER_USER_ID) == (True, None)
    assert fake_db.tables["plant_journal"] == []


def test_toggle_favorite_reads_only_the_one_entry(app, fake_db, monkeypatch):
    fake_db.tables["plant_journal"] = [{"id": ENTRY_ID, "user_id": USER_ID, "is_favorite": False}]

    def whole_journal(user_id):
        raise AssertionError("toggling must not load the whole journal")

    monkeypatch.setattr(supabase_client, "get_journal_entries", whole_journal)
    with app.app_context():
        entry, error = journal.toggle_favorite(ENTRY_ID, USER_ID)

    assert error is None
    assert entry["is_favorite"] is True


def test_toggle_favorite_retries_when_flag_changed_underneath(app, fake_db, monkeypatch):
    fake_db.tables["plant_journal"] = [{"id": ENTRY_ID, "user_id": USER_ID, "is_favorite": False}]
    real_get = supabase_client.get_journal_entry
    reads = []

    def stale_first_read(entry_id, user_id):
        row, error = real_get(entry_id, user_id)
        if not reads:
            # Another request flipped it after this read
            row = {**row, "is_favorite": True}
        reads.append(entry_id)
        return row, error

    monkeypatch.setattr(supabase_client, "get_journal_entry", stale_first_read)
    with app.app_context():
        entry, error = journal.toggle_favorite(ENTRY_ID, USER_ID)

    assert error is None
    assert len(reads) == 2
    assert entry["is_favorite"] is True
    assert fake_db.tables["plant_journal"][0]["is_favorite"] is True


def test_toggle_favorite_store_failure(app, fake_db):
    fake_db.failing.add("plant_journal")
    with app.app_context():
        entry, error = journal.toggle_favorite(ENTRY_ID, USER_ID)
    assert entry is None
    assert "Error loading journal entry" in error


@pytest.mark.parametrize("field, value", [("notes", 7), ("location_name", ["park"]), ("image_url", 12)])
def test_save_identification_rejects_non_text_fields(app, fake_db, field, value):
    with app.app_context(), pytest.raises(InvalidArgument):
        journal.save_identification(USER_ID, {"species": "Yarrow"}, **{field: value})
    assert fake_db.tables.get("plant_journal", []) == []


def test_toggle_favorite_unset_flag_becomes_favorite(app, fake_db):
    fake_db.tables["plant_journal"] = [{"id": ENTRY_ID, "user_id": USER_ID}]
    with app.app_context():
        entry, error = journal.toggle_favorite(ENTRY_ID, USER_ID)
    assert error is None
    assert entry["is_favorite"] is True
