import logging

import pytest

from cornertile.generators.profiles import (
    EXAMPLE_BEVEL_SETTINGS,
    PROFILE_NAMES,
    SETTINGS_CATALOG,
    GeneratorSettings,
    SettingsCatalog,
    delete_profile,
    is_builtin_profile,
    list_saved_profiles,
    load_all_saved_profiles,
    load_profile,
    profile_exists,
    reload_custom_profiles,
    save_profile,
)


def test_save_and_load(profiles_dir):
    custom = EXAMPLE_BEVEL_SETTINGS.copy(name="Sharp Edges!")
    custom.type1_vertical_inside = [(0.0, -0.5, 0.0), (0.0, 0.0, 0.0)]

    path = save_profile(custom, profiles_dir)
    assert path.name == "sharp_edges.json"

    loaded = load_profile("Sharp Edges!", profiles_dir)
    assert loaded is not None
    assert loaded.name == "Sharp Edges!"
    assert loaded.profiles() == custom.profiles()
    assert all(isinstance(p, tuple) for p in loaded.type1_vertical_outside)


def test_list_exists_delete(profiles_dir):
    save_profile(EXAMPLE_BEVEL_SETTINGS.copy(name="Zeta"), profiles_dir)
    save_profile(EXAMPLE_BEVEL_SETTINGS.copy(name="Alpha"), profiles_dir)

    assert list_saved_profiles(profiles_dir) == ["Alpha", "Zeta"]
    assert profile_exists("Alpha", profiles_dir)

    assert delete_profile("Alpha", profiles_dir)
    assert not delete_profile("Alpha", profiles_dir)
    assert not profile_exists("Alpha", profiles_dir)
    assert list_saved_profiles(profiles_dir) == ["Zeta"]


def test_delete_by_stored_name(profiles_dir):
    profiles_dir.mkdir(parents=True)
    path = save_profile(EXAMPLE_BEVEL_SETTINGS.copy(name="Renamed"), profiles_dir)
    path.rename(profiles_dir / "other_file.json")

    assert profile_exists("Renamed", profiles_dir)
    assert delete_profile("Renamed", profiles_dir)
    assert list(profiles_dir.glob("*.json")) == []


def test_unreadable_file_is_skipped(profiles_dir, caplog):
    profiles_dir.mkdir(parents=True)
    (profiles_dir / "broken.json").write_text("{not json")
    (profiles_dir / "wrong.json").write_text('{"name": "Wrong", "type1_vertical_inside": 5}')
    save_profile(EXAMPLE_BEVEL_SETTINGS.copy(name="Fine"), profiles_dir)

    with caplog.at_level(logging.WARNING):
        profiles = load_all_saved_profiles(profiles_dir)

    assert [p.name for p in profiles] == ["Fine"]
    assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 2


def test_missing_profiles_load_empty(profiles_dir):
    profiles_dir.mkdir(parents=True)
    (profiles_dir / "partial.json").write_text('{"name": "Partial"}')
    settings = load_profile("Partial", profiles_dir)
    assert settings is not None
    assert all(settings.profile(name) == [] for name in PROFILE_NAMES)


def test_settings_profile_lookup():
    with pytest.raises(KeyError):
        EXAMPLE_BEVEL_SETTINGS.profile("type3_vertical_inside")
    assert set(EXAMPLE_BEVEL_SETTINGS.profiles()) == set(PROFILE_NAMES)


def test_copy_is_independent():
    copy = EXAMPLE_BEVEL_SETTINGS.copy()
    copy.type1_vertical_inside.clear()
    assert EXAMPLE_BEVEL_SETTINGS.type1_vertical_inside


def test_catalog_lookup():
    catalog = SettingsCatalog()
    catalog.register(GeneratorSettings(name="Soft"))

    assert catalog.get_profile("soft").name == "Soft"
    assert catalog.get_profile("missing") is None
    assert catalog.get_default_profile().name == "Soft"
    assert catalog.unregister("SOFT")
    assert not catalog.is_registered("Soft")


def test_reload_custom_profiles(profiles_dir, tmp_path):
    save_profile(EXAMPLE_BEVEL_SETTINGS.copy(name="Custom"), profiles_dir)
    # A saved file cannot shadow a builtin
    save_profile(GeneratorSettings(name="Example Bevel"), profiles_dir)

    try:
        assert reload_custom_profiles(profiles_dir) == 1
        assert SETTINGS_CATALOG.is_registered("custom")
        assert SETTINGS_CATALOG.get_profile("Example Bevel") is EXAMPLE_BEVEL_SETTINGS
        assert is_builtin_profile("Example Bevel")
        assert not is_builtin_profile("Custom")
    finally:
        reload_custom_profiles(tmp_path / "none")

    assert not SETTINGS_CATALOG.is_registered("Custom")
    assert SETTINGS_CATALOG.list_profiles() == ["Example Bevel"]
