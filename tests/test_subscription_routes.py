from urllib.parse import parse_qs, urlparse

from members.services import MemberService


def error_query(response):
    location = urlparse(response.headers["location"])
    assert location.path == "/subscription/error"
    return {k: v[0] for k, v in parse_qs(location.query).items()}


def test_callback_activates_subscription_and_redirects_to_success(client, db, make_member, fake_flow):
    make_member(uid="u1", customer_id="c1", plan_name="Plan Anual")

    response = client.post("/subscription/result", data={"token": "tok123"}, follow_redirects=False)

    assert response.status_code == 303
    location = urlparse(response.headers["location"])
    assert location.path == "/subscription/success"
    assert location.query == "status=success"
    member = MemberService.find_member_by_uid("u1", db).data
    assert member.subscription_status == "active"
    assert member.flow_subscription.subscription_id == "s1"


def test_callback_without_token_redirects_to_error(client, fake_flow):
    response = client.post("/subscription/result", data={}, follow_redirects=False)

    assert response.status_code == 303
    query = error_query(response)
    assert query["status"] == "3"
    assert "token" in query["message"]
    assert fake_flow.calls == []


def test_callback_with_unfinished_registration_redirects_to_error(client, make_member, fake_flow):
    make_member(uid="u1", customer_id="c1")
    fake_flow.register_status = {"status": 0}

    response = client.post("/subscription/result", data={"token": "tok123"}, follow_redirects=False)

    assert response.status_code == 303
    query = error_query(response)
    assert query["status"] == "2"
    assert "status: 0" in query["message"]
    assert "create_subscription" not in fake_flow.call_names


def test_callback_for_unknown_member_redirects_to_error(client, fake_flow):
    response = client.post("/subscription/result", data={"token": "tok123"}, follow_redirects=False)

    assert error_query(response)["status"] == "4"


def test_start_subscription_returns_redirect_url(client, make_member, auth_headers, fake_flow):
    make_member(uid="u1")

    response = client.post("/subscriptions/", json={"plan_name": "Plan Anual"}, headers=auth_headers("u1"))

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["redirect_url"].endswith("?token=regtok")
    assert fake_flow.call_names == ["create_customer", "register_card"]


def test_child_profile_subscribes_through_owner(client, db, make_member, auth_headers, fake_flow):
    make_member(uid="u1")
    make_member(uid="kid", owner_id="u1", name="Tomas", email=None)

    response = client.post("/subscriptions/", json={"plan_name": "Plan Mensual"}, headers=auth_headers("kid"))

    assert response.json()["success"] is True
    assert fake_flow.calls[0] == ("create_customer", "Ana", "a@x.com", "u1")
    assert MemberService.find_member_by_uid("u1", db).data.flow_subscription.plan_name == "Plan Mensual"
    assert MemberService.find_member_by_uid("kid", db).data.flow_subscription is None


def test_start_subscription_rejects_unknown_plan(client, make_member, auth_headers):
    make_member(uid="u1")
    response = client.post("/subscriptions/", json={"plan_name": "Plan Gratis"}, headers=auth_headers("u1"))
    assert response.status_code == 422


def test_start_subscription_requires_auth(client):
    response = client.post("/subscriptions/", json={"plan_name": "Plan Anual"})
    assert response.status_code == 401


def test_my_subscription(client, make_member, auth_headers):
    make_member(uid="u1", customer_id="c1", plan_name="Plan Semestral")

    response = client.get("/subscriptions/me", headers=auth_headers("u1"))

    assert response.status_code == 200
    body = response.json()
    assert body["customer_id"] == "c1"
    assert body["plan_name"] == "Plan Semestral"
    assert body["subscription_id"] is None


def test_list_plans(client):
    response = client.get("/subscriptions/plans")
    names = [plan["name"] for plan in response.json()["plans"]]
    assert names == ["Plan Mensual", "Plan Semestral", "Plan Anual"]
