from conftest import TOKEN, USER_ID
from wildscout.services import supabase_client


def test_not_configured_is_an_error_not_an_empty_result(app):
    supabase_client.set_clients(None)
    with app.app_context():
        assert supabase_client.get_seasonal_plants() == (None, supabase_client.NOT_CONFIGURED)
        assert supabase_client.get_all_user_stats() == (None, supabase_client.NOT_CONFIGURED)
        assert supabase_client.count_rows("species") == (0, supabase_client.NOT_CONFIGURED)


def test_catalog_is_cached_after_success(app, fake_db):
    fake_db.tables["seasonal_plants"] = [{"common_name": "Dandelion", "months_active": [4]}]
    with app.app_context():
        first, error = supabase_client.get_seasonal_plants()
        fake_db.tables["seasonal_plants"].append({"common_name": "Aster", "months_active": [9]})
        second, _ = supabase_client.get_seasonal_plants()

        supabase_client.refresh_catalogs()
        third, _ = supabase_client.get_seasonal_plants()

    assert error is None
    assert second == first
    assert [p["common_name"] for p in third] == ["Aster", "Dandelion"]


def test_failed_catalog_fetch_is_not_cached(app, fake_db):
    fake_db.failing.add("challenges")
    with app.app_context():
        rows, error = supabase_client.get_active_challenges()
        assert rows is None and error

        fake_db.failing.clear()
        fake_db.tables["challenges"] = [
            {"id": "c1", "is_active": True, "points_reward": 10},
            {"id": "c2", "is_active": False, "points_reward": 99},
            {"id": "c3", "is_active": True, "points_reward": 50},
        ]
        rows, error = supabase_client.get_active_challenges()

    assert error is None
    assert [c["id"] for c in rows] == ["c3", "c1"]


def test_get_user_stats_missing_row(app, fake_db):
    with app.app_context():
        assert supabase_client.get_user_stats(USER_ID) == (None, None)


def test_verify_session(app, fake_db):
    with app.app_context():
        assert supabase_client.verify_session(TOKEN)["id"] == USER_ID
        assert supabase_client.verify_session("bogus") is None
        assert supabase_client.verify_session(TOKEN, "refresh")["id"] == USER_ID
    assert fake_db.auth.sessions == [(TOKEN, "refresh")]


def test_upload_plant_image(app, fake_db):
    with app.app_context():
        path, error = supabase_client.upload_plant_image(b"img", USER_ID, "leaf.JPG")

    assert error is None
    assert path.startswith(f"{USER_ID}/") and path.endswith(".jpg")
    bucket, stored_path, data, options = fake_db.storage.uploads[0]
    assert bucket == "plant-images"
    assert stored_path == path
    assert options == {"content-type": "image/jpeg"}


def test_upload_plant_image_failure(app, fake_db):
    fake_db.storage.fail = True
    with app.app_context():
        path, error = supabase_client.upload_plant_image(b"img", USER_ID, "leaf.png")
    assert path is None
    assert error.startswith("Upload failed")
