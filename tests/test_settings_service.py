"""
Stored shipping settings: defaults, sanitized updates, persistence and
tier table import.
"""
import json
from decimal import Decimal

import pandas as pd
import pytest

from shipping_tiers.engine.models import Tier
from shipping_tiers.services.settings_service import SettingsService, find_overlaps


def test_defaults_when_nothing_stored(settings_service):
    shipping = settings_service.load()
    assert shipping.rules_text == "1,10,5\n11,30,8\n31,50,12"
    assert shipping.free_threshold == 0
    assert shipping.label == "Shipping"
    assert not settings_service.settings_path.exists()


def test_update_sanitizes_and_persists(settings, settings_service):
    settings_service.update({
        "rules": "1,5,2\n0,3,1\n6,20,4.25",
        "free_threshold": "-20",
        "label": " <em>Ground</em> ",
    })

    reloaded = SettingsService(settings).load()
    assert reloaded.tiers == [
        Tier(1, 5, Decimal(2)),
        Tier(6, 20, Decimal("4.25")),
    ]
    assert reloaded.free_threshold == 20
    assert reloaded.label == "Ground"
    assert reloaded.updated_at is not None

    with open(settings.settings_file, encoding="utf-8") as f:
        stored = json.load(f)
    assert stored["rules"] == [
        {"min": 1, "max": 5, "cost": "2"},
        {"min": 6, "max": 20, "cost": "4.25"},
    ]


def test_partial_update_keeps_other_fields(settings_service):
    settings_service.update({"free_threshold": 40})
    shipping = settings_service.update({"label": "Courier"})
    assert shipping.free_threshold == 40
    assert shipping.label == "Courier"
    assert len(shipping.tiers) == 3


def test_update_with_rows(settings_service):
    shipping = settings_service.update({"rules": [
        {"min": "1", "max": "3", "cost": "1"},
        {"min": "4", "max": "2", "cost": "1"},
    ]})
    assert shipping.rules == [{"min": 1, "max": 3, "cost": Decimal(1)}]


def test_empty_rules_are_stored_as_empty(settings_service):
    shipping = settings_service.update({"rules": "0,0,0"})
    assert shipping.tiers == []
    assert settings_service.load().tiers == []


def test_reset_restores_defaults(settings_service):
    settings_service.update({"rules": "1,2,3", "free_threshold": 5})
    shipping = settings_service.reset()
    assert shipping.free_threshold == 0
    assert len(shipping.tiers) == 3


def test_corrupt_file_falls_back_to_defaults(settings, settings_service):
    settings.settings_file.write_text("{not json", encoding="utf-8")
    assert settings_service.load().rules_text == settings_service.defaults().rules_text

    settings.settings_file.write_text("[1, 2]", encoding="utf-8")
    assert settings_service.load().label == "Shipping"


def test_stored_junk_is_sanitized_on_load(settings, settings_service):
    settings.settings_file.write_text(json.dumps({
        "rules": [{"min": 5, "max": 1, "cost": 3}, {"min": 1, "max": 9, "cost": "2"}],
        "free_threshold": -3,
        "label": "",
    }), encoding="utf-8")
    shipping = settings_service.load()
    assert shipping.tiers == [Tier(1, 9, Decimal(2))]
    assert shipping.free_threshold == 3
    assert shipping.label == "Shipping"


def test_import_csv_table(tmp_path, settings_service):
    table = tmp_path / "tiers.csv"
    table.write_text("Min,Max,Cost\n1,10,4.50\n20,10,3\n11,40,7\n", encoding="utf-8")

    report = settings_service.import_table(table, free_threshold=60, label="Ground", verbose=False)

    assert report["rows_read"] == 3
    assert report["rows_imported"] == 2
    assert report["rows_dropped"] == 1
    assert report["warnings"] == []

    shipping = settings_service.load()
    assert shipping.tiers == [Tier(1, 10, Decimal("4.50")), Tier(11, 40, Decimal(7))]
    assert shipping.free_threshold == 60
    assert shipping.label == "Ground"


def test_import_excel_table(tmp_path, settings_service):
    table = tmp_path / "tiers.xlsx"
    pd.DataFrame({"min": [1, 1], "max": [5, 10], "cost": [2.5, 9]}).to_excel(table, index=False)

    report = settings_service.import_table(table, verbose=False)

    assert report["rows_imported"] == 2
    assert len(report["warnings"]) == 1
    assert settings_service.load().tiers[0] == Tier(1, 5, Decimal("2.5"))


def test_import_prints_report(tmp_path, settings_service, capsys):
    table = tmp_path / "tiers.csv"
    table.write_text("min,max,cost\n1,10,5\n", encoding="utf-8")
    settings_service.import_table(table)
    out = capsys.readouterr().out
    assert "Imported 1 tiers" in out


def test_import_missing_file(tmp_path, settings_service):
    with pytest.raises(FileNotFoundError):
        settings_service.import_table(tmp_path / "missing.csv", verbose=False)


def test_import_unsupported_format(tmp_path, settings_service):
    table = tmp_path / "tiers.txt"
    table.write_text("1,10,5", encoding="utf-8")
    with pytest.raises(ValueError, match="Unsupported"):
        settings_service.import_table(table, verbose=False)


def test_import_missing_columns(tmp_path, settings_service):
    table = tmp_path / "tiers.csv"
    table.write_text("min,max\n1,10\n", encoding="utf-8")
    with pytest.raises(ValueError, match="cost"):
        settings_service.import_table(table, verbose=False)


def test_find_overlaps():
    tiers = [Tier(1, 10, Decimal(5)), Tier(11, 20, Decimal(6)), Tier(5, 12, Decimal(1))]
    warnings = find_overlaps(tiers)
    assert len(warnings) == 2
    assert all("5-12" in w for w in warnings)


def test_get_stats(settings_service):
    settings_service.update({"rules": "1,10,5\n5,50,7", "free_threshold": 30})
    stats = settings_service.get_stats()
    assert stats["tiers"] == 2
    assert stats["free_shipping_enabled"] is True
    assert stats["max_covered_quantity"] == 50
    assert len(stats["overlaps"]) == 1


def test_enabled_flag_persists(settings, settings_service):
    assert settings_service.load().enabled is True

    settings_service.update({"enabled": "no"})
    assert SettingsService(settings).load().enabled is False
    assert settings_service.get_stats()["enabled"] is False

    with open(settings.settings_file, encoding="utf-8") as f:
        assert json.load(f)["enabled"] is False


def test_missing_enabled_key_uses_default(settings, settings_service):
    settings.settings_file.write_text(json.dumps({"rules": [], "free_threshold": 0}), encoding="utf-8")
    assert settings_service.load().enabled is True
