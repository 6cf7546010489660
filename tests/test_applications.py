"""Application tracking, filters and upcoming interviews."""

from datetime import date, timedelta


def _apply(client, headers, **fields):
    payload = {"company_name": "Acme", "role": "SDE Intern", "job_type": "internship"}
    payload.update(fields)
    response = client.post("/api/applications", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_defaults(client, auth_headers):
    app = _apply(client, auth_headers, application_link="  ")
    assert app["status"] == "applied"
    assert app["apply_date"] == date.today().isoformat()
    assert app["application_link"] is None


def test_blank_company_rejected(client, auth_headers):
    response = client.post(
        "/api/applications",
        json={"company_name": " ", "role": "SDE", "job_type": "full_time"},
        headers=auth_headers
    )
    assert response.status_code == 422


def test_status_and_type_filters_independent(client, auth_headers):
    combos = [
        ("internship", "applied"), ("internship", "interview"),
        ("full_time", "interview"), ("full_time", "rejected"),
    ]
    for job_type, status in combos:
        _apply(client, auth_headers, job_type=job_type, status=status, company_name=f"{job_type}-{status}")

    def names(**params):
        data = client.get("/api/applications", params=params, headers=auth_headers).json()
        return sorted(a["company_name"] for a in data["applications"])

    assert names(status="interview") == ["full_time-interview", "internship-interview"]
    assert names(job_type="full_time") == ["full_time-interview", "full_time-rejected"]
    assert names(status="interview", job_type="full_time") == ["full_time-interview"]
    assert names(status="all", job_type="all") == sorted(f"{j}-{s}" for j, s in combos)


def test_upcoming_interviews_window(client, auth_headers):
    today = date.today()
    _apply(client, auth_headers, company_name="Tomorrow", status="interview",
           interview_date=(today + timedelta(days=1)).isoformat())
    _apply(client, auth_headers, company_name="Six days", status="interview",
           interview_date=(today + timedelta(days=6)).isoformat())
    _apply(client, auth_headers, company_name="Today", status="interview",
           interview_date=today.isoformat())
    _apply(client, auth_headers, company_name="A week", status="interview",
           interview_date=(today + timedelta(days=7)).isoformat())
    _apply(client, auth_headers, company_name="Not interview", status="oa",
           interview_date=(today + timedelta(days=2)).isoformat())

    data = client.get("/api/applications", headers=auth_headers).json()
    assert [a["company_name"] for a in data["upcoming_interviews"]] == ["Tomorrow", "Six days"]


def test_update_clears_interview_date(client, auth_headers):
    app = _apply(client, auth_headers, status="interview", interview_date="2030-01-10")
    url = f"/api/applications/{app['id']}"

    response = client.put(url, json={"status": "selected", "interview_date": None}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "selected"
    assert response.json()["interview_date"] is None

    assert client.put(url, json={"status": None}, headers=auth_headers).status_code == 422


def test_delete_application(client, auth_headers):
    keep = _apply(client, auth_headers, company_name="Keep")
    drop = _apply(client, auth_headers, company_name="Drop")

    assert client.delete(f"/api/applications/{drop['id']}", headers=auth_headers).status_code == 200
    remaining = client.get("/api/applications", headers=auth_headers).json()["applications"]
    assert [a["id"] for a in remaining] == [keep["id"]]
