"""API 엔드포인트 통합 테스트"""

import pytest
from fastapi.testclient import TestClient

from formlogic.api.main import app
from formlogic.api.routers.rulesets import get_registry
from formlogic.core import RuleSetRegistry


# 테스트마다 새 레지스트리 사용
_registry = RuleSetRegistry()


def override_get_registry():
    """테스트용 레지스트리"""
    return _registry


app.dependency_overrides[get_registry] = override_get_registry

client = TestClient(app)


CHAIN_RULES = {
    "a": {"var": "b"},
    "b": {"+": [{"var": "c"}, 1]},
}


@pytest.fixture(scope="function", autouse=True)
def cleanup_registry():
    """각 테스트 후 레지스트리 정리"""
    yield
    for name in _registry.list_names():
        _registry.remove(name)


@pytest.fixture
def chain_ruleset():
    response = client.post("/api/v1/rulesets", json={"name": "chain", "rules": CHAIN_RULES})
    assert response.status_code == 201
    return response.json()


class TestHealthCheck:
    """헬스체크 엔드포인트 테스트"""

    def test_root_endpoint(self):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert "message" in data
        assert "version" in data
        assert data["rulesets"] == []
        assert data["endpoints"]["rulesets"] == "/api/v1/rulesets"

    def test_root_lists_registered_rulesets(self, chain_ruleset):
        response = client.get("/")
        assert response.json()["rulesets"] == ["chain"]

    def test_health_endpoint(self):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestLogicEndpoints:
    """표현식 평가 엔드포인트 테스트"""

    def test_evaluate(self):
        response = client.post("/api/v1/logic/evaluate", json={
            "logic": {"if": [{"<": [{"var": "x"}, 10]}, "low", "high"]},
            "facts": {"x": 5}
        })
        assert response.status_code == 200
        assert response.json() == {"result": "low"}

    def test_evaluate_without_facts(self):
        response = client.post("/api/v1/logic/evaluate", json={"logic": {"*": [2, 3, 4]}})
        assert response.status_code == 200
        assert response.json()["result"] == 24

    def test_nan_is_serialized_as_null(self):
        response = client.post("/api/v1/logic/evaluate", json={
            "logic": {"+": [1, {"var": "missing"}]}
        })
        assert response.status_code == 200
        assert response.json() == {"result": None}

    def test_malformed_logic(self):
        response = client.post("/api/v1/logic/evaluate", json={"logic": {"var": []}})
        assert response.status_code == 400
        assert "표현식 평가 실패" in response.json()["detail"]

    def test_dependencies(self):
        response = client.post("/api/v1/logic/dependencies", json={
            "logic": {"some": [{"var": "items"}, {">": [{"var": "$"}, {"var": "limit"}]}]}
        })
        assert response.status_code == 200
        assert response.json() == {"dependencies": ["items", "limit"]}

    def test_missing_logic_field(self):
        response = client.post("/api/v1/logic/evaluate", json={"facts": {}})
        assert response.status_code == 422


class TestRuleSetEndpoints:
    """규칙 묶음 엔드포인트 테스트"""

    def test_create_ruleset(self, chain_ruleset):
        assert chain_ruleset["name"] == "chain"
        assert chain_ruleset["rule_paths"] == ["a", "b"]
        assert chain_ruleset["forward"] == {"a": ["b"], "b": ["c"]}
        assert chain_ruleset["backward"] == {"b": ["a"], "c": ["b"]}

    def test_duplicate_ruleset(self, chain_ruleset):
        response = client.post("/api/v1/rulesets", json={"name": "chain", "rules": {}})
        assert response.status_code == 409

        response = client.post("/api/v1/rulesets", json={
            "name": "chain", "rules": {"x": {"var": "y"}}, "replace": True
        })
        assert response.status_code == 201
        assert response.json()["rule_paths"] == ["x"]

    def test_malformed_ruleset(self):
        response = client.post("/api/v1/rulesets", json={
            "name": "broken", "rules": {"x": {"var": []}}
        })
        assert response.status_code == 400

    def test_list_and_delete(self, chain_ruleset):
        response = client.get("/api/v1/rulesets")
        assert response.json() == {"names": ["chain"], "total": 1}

        response = client.delete("/api/v1/rulesets/chain")
        assert response.status_code == 204

        response = client.get("/api/v1/rulesets/chain")
        assert response.status_code == 404

    def test_graph(self, chain_ruleset):
        response = client.get("/api/v1/rulesets/chain/graph", params={"direction": "undirected"})
        assert response.status_code == 200
        assert response.json()["graph"] == {"a": ["b"], "b": ["a"], "c": ["b"]}

    def test_unknown_ruleset(self):
        response = client.post("/api/v1/rulesets/none/run", json={"path": "a"})
        assert response.status_code == 404


class TestRunEndpoints:
    """규칙 실행 엔드포인트 테스트"""

    def test_run(self, chain_ruleset):
        response = client.post("/api/v1/rulesets/chain/run", json={
            "path": "b", "facts": {"c": 4}
        })
        assert response.status_code == 200
        assert response.json() == {"path": "b", "result": 5}

    def test_run_several(self, chain_ruleset):
        response = client.post("/api/v1/rulesets/chain/run-several", json={
            "entries": [
                {"path": "b", "facts": {"c": 1}},
                {"path": "a", "facts": {"b": "x"}},
                {"path": "a"},
            ]
        })
        assert response.status_code == 200
        assert [r["result"] for r in response.json()["results"]] == [2, "x", None]

    def test_propagate(self, chain_ruleset):
        response = client.get("/api/v1/rulesets/chain/propagate", params={
            "path": "c", "direction": "backward"
        })
        assert response.status_code == 200
        assert response.json() == {"path": "c", "direction": "backward", "paths": ["b", "a"]}

    def test_propagate_cycle(self):
        client.post("/api/v1/rulesets", json={
            "name": "loop", "rules": {"x": {"var": "y"}, "y": {"var": "x"}}
        })
        response = client.get("/api/v1/rulesets/loop/propagate", params={
            "path": "x", "direction": "forward"
        })
        assert response.status_code == 409
        assert "순환" in response.json()["detail"]

    def test_drill(self, chain_ruleset):
        response = client.post("/api/v1/rulesets/chain/drill", json={
            "path": "c", "facts": {"c": 4, "b": 5}, "direction": "backward"
        })
        assert response.status_code == 200
        assert response.json() == {"paths": ["c", "b", "a"], "results": [None, 5, 5]}

    def test_invalid_direction(self, chain_ruleset):
        response = client.post("/api/v1/rulesets/chain/drill", json={
            "path": "c", "direction": "sideways"
        })
        assert response.status_code == 422
