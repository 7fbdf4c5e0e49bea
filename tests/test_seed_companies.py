"""Seed script: input parsing and exit codes (API mocked)."""
import json
from unittest.mock import AsyncMock, patch

import pytest

import seed_companies
from app.client import CompanyApiError
from conftest import company_payload


def _write(tmp_path, data) -> str:
    path = tmp_path / "companies.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_load_companies_accepts_list_and_wrapper(tmp_path) -> None:
    items = [company_payload(), company_payload(name="globex")]
    assert seed_companies.load_companies(_write(tmp_path, items)) == items
    assert seed_companies.load_companies(_write(tmp_path, {"companies": items})) == items


@pytest.mark.parametrize("data", [[], {"companies": "x"}, {"other": []}, "acme"])
def test_load_companies_rejects_bad_shape(tmp_path, data) -> None:
    with pytest.raises(ValueError):
        seed_companies.load_companies(_write(tmp_path, data))


def test_main_invalid_file_exit_code(tmp_path) -> None:
    assert seed_companies.main([str(tmp_path / "missing.json")]) == seed_companies.EXIT_INVALID_INPUT
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    assert seed_companies.main([str(bad)]) == seed_companies.EXIT_INVALID_INPUT


def test_main_api_failure_exit_code(tmp_path) -> None:
    path = _write(tmp_path, [company_payload()])
    with patch.object(seed_companies, "seed", AsyncMock(side_effect=CompanyApiError("down"))):
        assert seed_companies.main([str(path)]) == seed_companies.EXIT_API_FAIL


def test_main_reports_created(tmp_path, capsys) -> None:
    path = _write(tmp_path, [company_payload(), company_payload(industry="Nope")])
    with patch.object(seed_companies, "seed", AsyncMock(return_value=1)) as seed:
        assert seed_companies.main([str(path), "--base-url", "http://api.test/api"]) == 0
    seed.assert_awaited_once()
    assert seed.await_args.args[1] == "http://api.test/api"
    assert "created=1 submitted=2 skipped=1" in capsys.readouterr().out
