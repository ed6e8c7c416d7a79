from conftest import FakeChatModel
from fastapi.testclient import TestClient

from doc_expert.api.main import create_app
from doc_expert.service import ExpertService


def test_api_tools_call_reload_traces_metrics(service: ExpertService, fake_llm: FakeChatModel) -> None:
    client = TestClient(create_app(service))

    health_resp = client.get("/health")
    assert health_resp.status_code == 200
    assert health_resp.json()["documents_loaded"] == 2
    assert health_resp.json()["description_cached"] is False

    fake_llm.reply = "An inventory API."
    tools_resp = client.get("/tools")
    assert tools_resp.status_code == 200
    assert [tool["name"] for tool in tools_resp.json()["tools"]] == ["create-query", "documentation"]

    fake_llm.reply = "GET /items"
    call_resp = client.post("/tools/create-query", json={"request": "list items"})
    assert call_resp.status_code == 200
    assert call_resp.json() == {"content": [{"type": "text", "text": "GET /items"}]}

    invalid_resp = client.post("/tools/documentation", json={"request": ""})
    assert invalid_resp.status_code == 422
    assert invalid_resp.json()["detail"]["violations"][0]["field"] == "request"

    unknown_resp = client.post("/tools/nope", json={"request": "x"})
    assert unknown_resp.status_code == 404

    fake_llm.reply = "A refreshed inventory API."
    reload_resp = client.post("/reload")
    assert reload_resp.status_code == 200
    assert reload_resp.json()["service_description"] == "A refreshed inventory API."

    traces_resp = client.get("/traces")
    assert traces_resp.status_code == 200
    items = traces_resp.json()["items"]
    assert [item["status"] for item in items] == ["ok", "error"]

    trace_resp = client.get(f"/traces/{items[0]['trace_id']}")
    assert trace_resp.status_code == 200
    assert trace_resp.json()["name"] == "create-query"
    assert trace_resp.json()["output_preview"] == "GET /items"

    missing_resp = client.get("/traces/no-such-trace")
    assert missing_resp.status_code == 404

    metrics_resp = client.get("/metrics")
    assert metrics_resp.status_code == 200
    assert metrics_resp.json()["total_calls"] == 2
