"""
Tests for environment and variable management.
"""

from hypothesis import HealthCheck, given, settings, strategies as st


variable_key_strategy = st.text(
    alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_"),
    min_size=1,
    max_size=30,
)

variable_value_strategy = st.text(
    alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789:/.?=&_-"),
    min_size=1,
    max_size=100,
)


def create_environment(client, name: str = "dev", variables: dict | None = None) -> dict:
    variables = variables or {}
    response = client.post("/api/environments", json={
        "name": name,
        "variables": [{"key": k, "value": v} for k, v in variables.items()],
    })
    assert response.status_code == 201
    return response.json()


class TestEnvironments:

    def test_create_and_get(self, api_client):
        created = create_environment(api_client, variables={"base": "http://dev.test", "token": "t"})

        fetched = api_client.get(f"/api/environments/{created['id']}").json()

        assert fetched["name"] == "dev"
        assert {v["key"]: v["value"] for v in fetched["variables"]} == {
            "base": "http://dev.test",
            "token": "t",
        }

    def test_list(self, api_client):
        create_environment(api_client, "dev")
        create_environment(api_client, "prod")

        assert [e["name"] for e in api_client.get("/api/environments").json()] == ["dev", "prod"]

    def test_rename(self, api_client):
        env = create_environment(api_client, "dev", {"a": "1"})

        response = api_client.put(f"/api/environments/{env['id']}", json={"name": "staging"})

        assert response.status_code == 200
        assert response.json()["name"] == "staging"
        assert len(response.json()["variables"]) == 1

    def test_empty_variable_key_is_rejected(self, api_client):
        response = api_client.post("/api/environments", json={
            "name": "dev", "variables": [{"key": "", "value": "x"}],
        })

        assert response.status_code == 400
        assert api_client.get("/api/environments").json() == []

    def test_delete_cascades_to_variables(self, api_client):
        env = create_environment(api_client, variables={"a": "1"})
        variable_id = env["variables"][0]["id"]

        assert api_client.delete(f"/api/environments/{env['id']}").status_code == 204
        assert api_client.get(f"/api/environments/{env['id']}").status_code == 404
        assert api_client.delete(f"/api/environments/variables/{variable_id}").status_code == 404

    def test_missing_environment_is_404(self, api_client):
        assert api_client.get("/api/environments/999").status_code == 404
        assert api_client.put("/api/environments/999", json={"name": "x"}).status_code == 404
        assert api_client.post("/api/environments/999/variables", json={"key": "a", "value": "b"}).status_code == 404


class TestVariables:

    def test_add(self, api_client):
        env = create_environment(api_client)

        response = api_client.post(f"/api/environments/{env['id']}/variables", json={"key": "a", "value": "1"})

        assert response.status_code == 201
        assert response.json()["environment_id"] == env["id"]

    def test_add_existing_key_replaces_value(self, api_client):
        env = create_environment(api_client, variables={"a": "1"})

        api_client.post(f"/api/environments/{env['id']}/variables", json={"key": "a", "value": "2"})

        variables = api_client.get(f"/api/environments/{env['id']}").json()["variables"]
        assert [(v["key"], v["value"]) for v in variables] == [("a", "2")]

    def test_update(self, api_client):
        env = create_environment(api_client, variables={"a": "1"})
        variable_id = env["variables"][0]["id"]

        response = api_client.put(f"/api/environments/variables/{variable_id}", json={"value": "9"})

        assert response.status_code == 200
        assert response.json() == {"id": variable_id, "environment_id": env["id"], "key": "a", "value": "9"}

    def test_update_to_empty_key_is_rejected(self, api_client):
        env = create_environment(api_client, variables={"a": "1"})
        variable_id = env["variables"][0]["id"]

        response = api_client.put(f"/api/environments/variables/{variable_id}", json={"key": ""})

        assert response.status_code == 400

    def test_delete(self, api_client):
        env = create_environment(api_client, variables={"a": "1", "b": "2"})
        variable_id = env["variables"][0]["id"]

        assert api_client.delete(f"/api/environments/variables/{variable_id}").status_code == 204
        remaining = api_client.get(f"/api/environments/{env['id']}").json()["variables"]
        assert [v["key"] for v in remaining] == ["b"]

    @given(variables=st.dictionaries(variable_key_strategy, variable_value_strategy, max_size=5))
    @settings(max_examples=20, deadline=None, suppress_health_check=[HealthCheck.function_scoped_fixture])
    def test_variables_round_trip(self, make_api, variables):
        client = make_api()

        env = create_environment(client, "prop", variables)
        fetched = client.get(f"/api/environments/{env['id']}").json()

        assert {v["key"]: v["value"] for v in fetched["variables"]} == variables
