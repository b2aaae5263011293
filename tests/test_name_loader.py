import random

from dynastydip.models import Gender
from dynastydip.name_loader import DEFAULT_POOLS, KINGDOMS, NameLoader
from dynastydip.paths import NAME_LISTS_DIR


def test_shipped_lists_match_built_in_pools():
    loader = NameLoader(NAME_LISTS_DIR)
    for pool, names in DEFAULT_POOLS.items():
        assert loader.get_all_names(pool) == names


def test_files_override_built_in_pools(tmp_path):
    (tmp_path / "kingdoms.txt").write_text("Avalon\n\nAvalon\nLyonesse\n", encoding="utf-8")
    loader = NameLoader(tmp_path)
    assert loader.get_all_names(KINGDOMS) == ["Avalon", "Lyonesse"]


def test_empty_file_falls_back(tmp_path, caplog):
    (tmp_path / "male.txt").write_text("\n   \n", encoding="utf-8")
    loader = NameLoader(tmp_path)
    assert loader.get_all_names("male") == DEFAULT_POOLS["male"]
    assert "empty" in caplog.text


def test_get_all_names_returns_copy(tmp_path):
    loader = NameLoader(tmp_path)
    loader.get_all_names(KINGDOMS).clear()
    assert loader.get_all_names(KINGDOMS)


def test_person_name_follows_gender(tmp_path):
    loader = NameLoader(tmp_path)
    rng = random.Random(5)
    assert loader.person_name(Gender.FEMALE, rng) in DEFAULT_POOLS["female"]
    assert loader.person_name("male", rng) in DEFAULT_POOLS["male"]


def test_unknown_pool_gets_placeholder(tmp_path):
    loader = NameLoader(tmp_path)
    assert loader.random_name("titles", random.Random(1)) == "Nameless_titles"
