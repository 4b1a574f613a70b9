import pytest
import yaml

from conftest import make_asset
from drishti.shared.infrastructure.seed import SeedDataError, load_seed_assets


def test_packaged_seed_file_loads():
    assets = load_seed_assets()

    assert len(assets) == 5
    assert len({a.id for a in assets}) == 5
    assert assets[0].name == "Bandra-Worli Sea Link"


def test_plain_list_file(tmp_path):
    path = tmp_path / "assets.yaml"
    path.write_text(yaml.safe_dump([make_asset("S1").to_record()]), encoding="utf-8")

    assert load_seed_assets(path) == [make_asset("S1")]


def test_empty_file_means_no_assets(tmp_path):
    path = tmp_path / "assets.yaml"
    path.write_text("", encoding="utf-8")

    assert load_seed_assets(path) == []


@pytest.mark.parametrize(
    "content",
    [
        "assets: [unclosed",
        yaml.safe_dump({"assets": [{"id": "S1", "name": "Half"}]}),
        yaml.safe_dump({"assets": [make_asset("S1").to_record(), make_asset("S1").to_record()]}),
    ],
)
def test_bad_seed_files_raise(tmp_path, content):
    path = tmp_path / "assets.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(SeedDataError):
        load_seed_assets(path)


def test_missing_file_raises(tmp_path):
    with pytest.raises(SeedDataError):
        load_seed_assets(tmp_path / "missing.yaml")
