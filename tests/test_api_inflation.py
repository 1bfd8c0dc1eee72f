from __future__ import annotations

import json
import logging

import pytest
from fastapi.testclient import TestClient

from eramint.api.app import create_app
from eramint.ledger.policy import HISTORICAL_POLICY, REFERENCE_POLICY, PolicyActivation, PolicySchedule
from eramint.ledger.supply import U32, U128


@pytest.fixture()
def client() -> TestClient:
    return TestClient(create_app(boot_runtime=False))


def test_health(client: TestClient) -> None:
    r = client.get("/v1/health")
    assert r.status_code == 200
    j = r.json()
    assert j["ok"] is True
    assert j["service"] == "eramint"
    assert j["policies"] == 1
    assert j["supply_width"] == "u128"


def test_payout_growth(client: TestClient) -> None:
    r = client.get("/v1/inflation/payout", params={"era": 0, "total_tokens": 77_777_777, "total_issuance": 77_777_777})
    assert r.status_code == 200
    j = r.json()
    assert j["ok"] is True
    assert j["phase"] == "growth"
    assert j["policy_version"] == "v1"
    assert j["staker_payout"] == 54_457_144
    assert j["maximum_payout"] == 77_795_921
    assert j["treasury_payout"] == 23_338_777
    assert r.headers.get("x-request-id")


def test_payout_cutover_and_terminal(client: TestClient) -> None:
    r = client.get("/v1/inflation/payout?era=360000&total_tokens=77777777&total_issuance=77777777")
    assert r.status_code == 200
    j = r.json()
    assert j["phase"] == "cutover"
    assert (j["staker_payout"], j["maximum_payout"]) == (5_390_000_000, 7_700_000_000)

    r = client.get("/v1/inflation/payout?era=500000&total_tokens=1&total_issuance=1")
    j = r.json()
    assert j["phase"] == "terminal"
    assert (j["staker_payout"], j["maximum_payout"]) == (0, 0)


def test_payout_tokens_only_variant(client: TestClient) -> None:
    r = client.get("/v1/inflation/payout?era=360001&total_tokens=1000000000000000000")
    assert r.status_code == 200
    j = r.json()
    assert j["phase"] == "growth"
    assert j["total_issuance"] is None
    assert j["maximum_payout"] > 0


def test_payout_saturates_huge_amounts_to_width() -> None:
    c = TestClient(create_app(boot_runtime=False, width=U32))
    r = c.get("/v1/inflation/payout", params={"era": 0, "total_tokens": 0, "total_issuance": str(2**100)})
    assert r.status_code == 200
    j = r.json()
    assert j["supply_width"] == "u32"
    assert j["total_issuance"] == U32.max_value
    assert j["maximum_payout"] == U32.max_value


def test_payout_saturates_overlong_digit_strings(client: TestClient) -> None:
    r = client.get("/v1/inflation/payout", params={"era": 1, "total_tokens": "9" * 5000})
    assert r.status_code == 200
    j = r.json()
    assert j["total_tokens"] == U128.max_value
    assert j["total_issuance"] is None

    r = client.get(
        "/v1/inflation/payout",
        params={"era": "0" * 4000 + "9" * 5000, "total_tokens": 1, "total_issuance": "9" * 5000},
    )
    assert r.status_code == 200
    j = r.json()
    assert j["phase"] == "terminal"
    assert j["total_issuance"] == U128.max_value
    assert j["maximum_payout"] == 0


@pytest.mark.parametrize(
    "query,code",
    [
        ("total_tokens=1", "missing_param"),
        ("era=1", "missing_param"),
        ("era=-1&total_tokens=1", "invalid_param"),
        ("era=abc&total_tokens=1", "invalid_param"),
        ("era=1&total_tokens=1.5", "invalid_param"),
        ("era=1&total_tokens=1&total_issuance=-3", "invalid_param"),
    ],
)
def test_payout_bad_params(client: TestClient, query: str, code: str) -> None:
    r = client.get(f"/v1/inflation/payout?{query}")
    assert r.status_code == 400
    j = r.json()
    assert j["ok"] is False
    assert j["error"]["code"] == code


def test_policy_endpoint_follows_schedule() -> None:
    sched = PolicySchedule((PolicyActivation(0, HISTORICAL_POLICY), PolicyActivation(1_000, REFERENCE_POLICY)))
    c = TestClient(create_app(boot_runtime=False, schedule=sched))

    j = c.get("/v1/inflation/policy").json()
    assert j["version"] == HISTORICAL_POLICY.version
    assert j["activation_era"] == 0
    assert j["pow_mode"] == "stepwise"

    j = c.get("/v1/inflation/policy?era=5000").json()
    assert j["version"] == "v1"
    assert j["activation_era"] == 1_000
    assert j["split_ratio"] == "70/100"
    assert j["cutover_era"] == 360_000

    j = c.get("/v1/inflation/payout?era=999&total_tokens=0&total_issuance=77777777").json()
    assert j["policy_version"] == HISTORICAL_POLICY.version


def test_create_app_boot_runtime_loads_policy_file(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    p = tmp_path / "policy.json"
    p.write_text(json.dumps({"version": "from-file", "split_ratio": "1/2"}), encoding="utf-8")
    monkeypatch.delenv("ERAMINT_CONFIG_PATH", raising=False)
    monkeypatch.setenv("ERAMINT_POLICY_PATH", str(p))

    app = create_app(boot_runtime=True)
    assert app.state.cfg.policy_path == str(p)

    with TestClient(app) as c:
        j = c.get("/v1/inflation/payout?era=0&total_tokens=0&total_issuance=100").json()
    assert j["policy_version"] == "from-file"
    assert j["staker_payout"] == j["maximum_payout"] // 2


def test_prod_mode_rejects_wildcard_cors(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ERAMINT_MODE", "prod")
    monkeypatch.setenv("ERAMINT_CORS_ORIGINS", "*")
    with pytest.raises(RuntimeError):
        create_app(boot_runtime=False)


def test_rejected_request_logs_warning_with_era(client: TestClient, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="eramint.http")
    r = client.get("/v1/inflation/payout", params={"era": 7, "total_tokens": "x"})
    assert r.status_code == 400

    recs = [rec for rec in caplog.records if rec.name == "eramint.http"]
    assert recs
    payload = json.loads(recs[-1].getMessage())
    assert payload["event"] == "http_request"
    assert payload["status"] == 400
    assert payload["era"] == "7"
    assert recs[-1].levelno == logging.WARNING
