def test_seasonal_plants_for_month(app, fake_db):
    fake_db.tables["seasonal_plants"] = [
        {"common_name": "Dandelion", "months_active": [4, 5], "plant_type": "edible"},
        {"common_name": "Aster", "months_active": [9]},
    ]
    result = app.test_cli_runner().invoke(args=["seasonal-plants", "--month", "4"])

    assert result.exit_code == 0
    assert "April: 1 plant(s) in season" in result.output
    assert "Dandelion [edible] April, May" in result.output


def test_seasonal_plants_for_season(app, fake_db):
    fake_db.tables["seasonal_plants"] = [{"common_name": "Aster", "months_active": [9]}]
    result = app.test_cli_runner().invoke(args=["seasonal-plants", "--season", "fall"])

    assert result.exit_code == 0
    assert "Fall (September, October, November): 1 plant(s)" in result.output
    assert "Aster [unspecified]" in result.output


def test_seasonal_plants_bad_month(app, fake_db):
    result = app.test_cli_runner().invoke(args=["seasonal-plants", "--month", "13"])
    assert result.exit_code != 0


def test_leaderboard(app, fake_db):
    fake_db.tables["user_stats"] = [
        {"user_id": "aaaaaaaa-0000", "total_points": 5, "level": 1, "created_at": "1"},
        {"user_id": "bbbbbbbb-0000", "total_points": 120, "level": 2, "created_at": "2"},
    ]
    result = app.test_cli_runner().invoke(args=["leaderboard", "--limit", "1"])

    assert result.exit_code == 0
    assert "crown  bbbbbbbb  level 2  120 pts" in result.output
    assert "aaaaaaaa" not in result.output


def test_leaderboard_database_failure(app, fake_db):
    fake_db.failing.add("user_stats")
    result = app.test_cli_runner().invoke(args=["leaderboard"])
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_leaderboard_limit_defaults_to_config(app, fake_db):
    app.config["LEADERBOARD_LIMIT"] = 2
    fake_db.tables["user_stats"] = [
        {"user_id": f"{i:08d}-user", "total_points": i * 10, "level": 1, "created_at": str(i)}
        for i in range(1, 5)
    ]
    result = app.test_cli_runner().invoke(args=["leaderboard"])

    assert result.exit_code == 0
    assert "00000004" in result.output
    assert "00000003" in result.output
    assert "00000002" not in result.output


def test_refresh_catalogs(app, fake_db):
    from wildscout.services import supabase_client

    fake_db.tables["seasonal_plants"] = [{"common_name": "Dandelion", "months_active": [4]}]
    with app.app_context():
        supabase_client.get_seasonal_plants()
    fake_db.tables["seasonal_plants"].append({"common_name": "Aster", "months_active": [4]})
    with app.app_context():
        stale, _ = supabase_client.get_seasonal_plants()
    assert [p["common_name"] for p in stale] == ["Dandelion"]

    result = app.test_cli_runner().invoke(args=["refresh-catalogs"])

    assert result.exit_code == 0
    assert "Catalog cache cleared" in result.output
    with app.app_context():
        plants, _ = supabase_client.get_seasonal_plants()
    assert [p["common_name"] for p in plants] == ["Aster", "Dandelion"]
