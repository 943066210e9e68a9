from __future__ import annotations

import csv
import io

from fastapi.testclient import TestClient

USER = {"X-User-Id": "user-1"}
OTHER_USER = {"X-User-Id": "user-2"}


def create_published_form(client: TestClient) -> tuple[dict, str]:
    """Create a form with a required text field through the HTML flow and publish it."""
    response = client.post(
        "/forms", data={"name": "Feedback", "description": ""}, headers=USER, follow_redirects=False
    )
    assert response.status_code == 303
    form_id = int(response.headers["location"].rsplit("/", 1)[1])

    client.post(f"/builder/{form_id}/elements", data={"type": "TextField"}, headers=USER)
    form = client.get(f"/api/forms/{form_id}", headers=USER).json()
    assert form["content"] == []

    designer = client.app.state.designer_sessions.get("user-1", form_id)
    element_id = designer.selected_id
    response = client.post(
        f"/builder/{form_id}/elements/{element_id}",
        data={"label": "Your name", "placeholder": "Ada", "helper_text": "", "required": "on"},
        headers=USER,
        follow_redirects=False,
    )
    assert response.status_code == 303
    assert response.headers["location"] == f"/builder/{form_id}"
    client.post(f"/builder/{form_id}/save", headers=USER)
    response = client.post(f"/builder/{form_id}/publish", headers=USER, follow_redirects=False)
    assert response.headers["location"] == f"/forms/{form_id}"
    return client.get(f"/api/forms/{form_id}", headers=USER).json(), element_id


def test_dashboard_requires_identity(client: TestClient) -> None:
    response = client.get("/")
    assert response.status_code == 401
    assert "Not signed in" in response.text


def test_dashboard_lists_forms(client: TestClient) -> None:
    client.post("/api/forms", json={"name": "Contact form"}, headers=USER)
    response = client.get("/", headers=USER)
    assert response.status_code == 200
    assert "Contact form" in response.text
    assert "Contact form" not in client.get("/", headers=OTHER_USER).text


def test_dashboard_rejects_short_name(client: TestClient) -> None:
    response = client.post("/forms", data={"name": "abc"}, headers=USER)
    assert response.status_code == 400
    assert client.get("/api/forms", headers=USER).json() == []


def test_builder_page_renders_designer(client: TestClient) -> None:
    form = client.post("/api/forms", json={"name": "Contact form"}, headers=USER).json()
    client.post(f"/builder/{form['id']}/elements", data={"type": "SpacerField"}, headers=USER)
    response = client.get(f"/builder/{form['id']}", headers=USER)
    assert response.status_code == 200
    assert "Spacer: 20px" in response.text
    assert 'name="height"' in response.text


def test_builder_form_properties_are_coerced(client: TestClient) -> None:
    form, element_id = create_published_form(client)
    (element,) = form["content"]
    assert element["id"] == element_id
    assert element["extra_attributes"] == {
        "label": "Your name",
        "helper_text": "",
        "required": True,
        "placeholder": "Ada",
    }


def test_public_form_rejects_missing_value(client: TestClient) -> None:
    form, element_id = create_published_form(client)
    page = client.get(f"/submit/{form['share_url']}")
    assert page.status_code == 200
    assert "Your name*" in page.text

    response = client.post(f"/submit/{form['share_url']}", data={element_id: ""})
    assert response.status_code == 400
    assert "invalid" in response.text
    details = client.get(f"/api/forms/{form['id']}", headers=USER).json()
    assert details["submissions"] == 0
    assert details["visits"] == 1


def test_public_form_accepts_submission(client: TestClient) -> None:
    form, element_id = create_published_form(client)
    response = client.post(f"/submit/{form['share_url']}", data={element_id: "Grace"})
    assert response.status_code == 200
    assert "Form submitted successfully" in response.text

    page = client.get(f"/forms/{form['id']}", headers=USER)
    assert page.status_code == 200
    assert "Grace" in page.text
    assert f"/submit/{form['share_url']}" in page.text


def test_unknown_share_token_is_not_found(client: TestClient) -> None:
    response = client.get("/submit/does-not-exist")
    assert response.status_code == 404
    assert "Form not found" in response.text


def test_export_submissions_as_csv(client: TestClient) -> None:
    form, element_id = create_published_form(client)
    client.post(f"/submit/{form['share_url']}", data={element_id: "Grace"})
    client.post(f"/submit/{form['share_url']}", data={element_id: "Ada, Countess"})

    response = client.get(f"/forms/{form['id']}/export", headers=USER)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    rows = list(csv.reader(io.StringIO(response.text)))
    assert rows[0] == ["Your name", "Submitted at"]
    assert [row[0] for row in rows[1:]] == ["Grace", "Ada, Countess"]

    assert client.get(f"/forms/{form['id']}/export", headers=OTHER_USER).status_code == 404
