"""Integration tests for the tool and health endpoints."""

from fastapi.testclient import TestClient

from polytrade_sdk.identifiers import compute_main_id
from tests.conftest import NFT_ADDRESS, OWNER, signer_overrides


def test_root(test_client: TestClient):
    response = test_client.get("/")

    assert response.status_code == 200
    assert response.json()["health"] == "/health"


def test_health(test_client: TestClient):
    response = test_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_readiness_reports_each_network(test_client: TestClient):
    response = test_client.get("/health/ready")

    data = response.json()
    assert data["status"] == "ready"
    assert data["checks"]["testnet"] == "ok"
    # The fake node answers with the testnet chain id for every network.
    assert data["checks"]["mainnet"].startswith("unavailable")


def test_orchestrate_wrap_endpoint(test_client: TestClient, chain):
    chain.give_token(5, OWNER)

    response = test_client.post(
        "/api/v1/tools/orchestrate-wrap",
        json={"envOverrides": signer_overrides(TARGET_TOKEN_ID="5"), "network": "testnet"},
    )

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["success"] is True
    assert [s["name"] for s in body["steps"]] == ["mint", "whitelist", "grant_role", "approve", "wrap"]
    assert body["steps"][0]["status"] == "skipped"
    # uint256 values are rendered as decimal strings
    assert body["data"]["mainId"] == str(compute_main_id(NFT_ADDRESS, 5))
    assert body["error"] is None
    assert body["finishedAt"].endswith("Z")


def test_failed_run_is_still_http_200(test_client: TestClient, chain):
    response = test_client.post(
        "/api/v1/tools/orchestrate-wrap",
        json={"envOverrides": signer_overrides(TARGET_TOKEN_ID="77")},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "SimulationFailed"
    assert body["error"]["details"]["errorName"] == "ERC721NonexistentToken"


def test_private_keys_never_appear_in_reports(test_client: TestClient, chain):
    overrides = signer_overrides()
    chain.give_token(5, OWNER)

    response = test_client.post(
        "/api/v1/tools/verify", json={"envOverrides": dict(overrides, TARGET_TOKEN_ID=5)}
    )

    text = response.text
    assert overrides["ORIG_NFT_OWNER_PRIVATE_KEY"][2:] not in text
    assert overrides["POLYTRADE_ADMIN_TESTNET_PRIVATE_KEY"][2:] not in text


def test_verify_batch_endpoint(test_client: TestClient, chain):
    chain.give_token(1, OWNER)

    response = test_client.post(
        "/api/v1/tools/verify-batch",
        json={"envOverrides": signer_overrides(), "targets": [{"nftContract": NFT_ADDRESS, "tokenId": 1}]},
    )

    body = response.json()
    assert body["success"] is True
    assert body["data"]["verifiedCount"] == 1


def test_verify_batch_requires_targets(test_client: TestClient):
    response = test_client.post("/api/v1/tools/verify-batch", json={"targets": []})

    assert response.status_code == 422


def test_metadata_endpoint_validates_strategy(test_client: TestClient):
    response = test_client.post("/api/v1/tools/metadata", json={"enrichmentStrategy": "magic"})

    assert response.status_code == 422


def test_main_id_endpoint(test_client: TestClient):
    response = test_client.post("/api/v1/tools/main-id", json={"nftContract": NFT_ADDRESS, "tokenId": 5})

    body = response.json()
    assert body["success"] is True
    assert body["data"]["mainId"] == str(compute_main_id(NFT_ADDRESS, 5))
    assert body["data"]["mainIdHex"].startswith("0x")


def test_networks_endpoint(test_client: TestClient):
    response = test_client.get("/api/v1/tools/networks")

    names = [n["network"] for n in response.json()["networks"]]
    assert names == ["testnet", "mainnet"]


def test_unexpected_crash_answers_in_report_shape(test_client: TestClient, tool_service, monkeypatch):
    async def crash(params):
        raise RuntimeError("node returned garbage")

    monkeypatch.setattr(tool_service, "mint_asset", crash)
    client = TestClient(test_client.app, raise_server_exceptions=False)

    response = client.post("/api/v1/tools/mint", json={"envOverrides": signer_overrides()})

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "InternalError"
    assert "garbage" not in response.text
    assert body["path"] == "/api/v1/tools/mint"
