def test_workload_summary(client, engineer_headers):
    body = client.get("/engineer", headers=engineer_headers).json()

    assert body["activeProjects"] == 1
    assert body["currentUtilization"] == 60
    assert body["availableCapacity"] == 40
    assert len(body["assignments"]) == 2


def test_assignments_split_by_status(client, engineer_headers):
    body = client.get("/engineer/assignments", headers=engineer_headers).json()

    assert [a["id"] for a in body["active"]] == ["a1"]
    assert [a["id"] for a in body["completed"]] == ["a3"]


def test_project_counts(client, engineer_headers):
    body = client.get("/engineer/projects", headers=engineer_headers).json()

    assert body["activeCount"] == 1
    assert body["completedCount"] == 1
    assert body["assignments"][0]["projectId"]["name"] == "Portal Revamp"


def test_engineer_pages_share_one_upstream_read(client, upstream, engineer_headers):
    client.get("/engineer", headers=engineer_headers)
    client.get("/engineer/assignments", headers=engineer_headers)
    client.get("/engineer/projects", headers=engineer_headers)

    assert upstream.calls[("GET", "/assignments/engineer/e1")] == 1


def test_read_profile(client, engineer_headers):
    body = client.get("/profile", headers=engineer_headers).json()
    assert body["name"] == "Alice Cooper"
    assert body["department"] == "Frontend"


def test_update_profile_is_reflected_on_next_read(client, upstream, engineer_headers):
    response = client.put(
        "/profile",
        json={"name": "Alice Smith", "skills": ["React", "React", "Vue"]},
        headers=engineer_headers,
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Alice Smith"
    assert upstream.last_body[("PUT", "/users/e1")]["skills"] == ["React", "Vue"]
    assert client.get("/profile", headers=engineer_headers).json()["name"] == "Alice Smith"
    assert upstream.calls[("GET", "/users/me")] == 2


def test_profile_update_needs_a_session(client):
    assert client.put("/profile", json={"name": "x"}).status_code == 401


def test_change_password(client, engineer_headers):
    response = client.post(
        "/profile/password", json={"oldPassword": "pw", "newPassword": "new-pw"}, headers=engineer_headers
    )
    assert response.json() == {"ok": True}


def test_wrong_old_password(client, engineer_headers):
    response = client.post(
        "/profile/password", json={"oldPassword": "wrong", "newPassword": "new-pw"}, headers=engineer_headers
    )
    assert response.status_code == 400
    assert response.json() == {"message": "Old password is incorrect"}
