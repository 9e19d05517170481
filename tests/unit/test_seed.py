from __future__ import annotations

import json
import sys
from decimal import Decimal
from pathlib import Path

import pytest
from pydantic import ValidationError

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from tableside.tools.seed import SEED_DATA_PATH_ENV, load_restaurants, main


def test_demo_seed_builds_restaurant(monkeypatch) -> None:
    monkeypatch.delenv(SEED_DATA_PATH_ENV, raising=False)

    [restaurant] = load_restaurants()

    assert restaurant.restaurant_id == 1
    assert len(restaurant.get_tables()) == 5
    assert [dish.title for dish in restaurant.get_dishes()][0] == "Margherita Pizza"
    assert restaurant.get_dishes()[1].discount == Decimal("1.90")


def test_seed_file_from_environment(tmp_path: Path, monkeypatch) -> None:
    seed_file = tmp_path / "seed.json"
    seed_file.write_text(
        json.dumps(
            {
                "restaurants": [
                    {"id": 9, "name": "Corner Cafe", "description": "Coffee", "tablesAmount": 2}
                ]
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv(SEED_DATA_PATH_ENV, str(seed_file))

    [restaurant] = load_restaurants()

    assert restaurant.restaurant_id == 9
    assert restaurant.get_dishes() == []
    assert len(restaurant.get_tables()) == 2


def test_invalid_seed_file(tmp_path: Path) -> None:
    seed_file = tmp_path / "seed.json"
    seed_file.write_text(json.dumps({"restaurants": [{"id": -1}]}), encoding="utf-8")

    with pytest.raises(ValidationError):
        load_restaurants(seed_file)
    assert main(["--path", str(seed_file)]) == 1


def test_duplicate_restaurant_ids_are_rejected(tmp_path: Path) -> None:
    restaurant = {"id": 1, "name": "A", "description": "B"}
    seed_file = tmp_path / "seed.json"
    seed_file.write_text(json.dumps({"restaurants": [restaurant, restaurant]}), encoding="utf-8")

    with pytest.raises(ValueError):
        load_restaurants(seed_file)


def test_main_validates_demo_seed(monkeypatch, capsys) -> None:
    monkeypatch.delenv(SEED_DATA_PATH_ENV, raising=False)

    assert main([]) == 0
    assert "seed valid" in capsys.readouterr().out
