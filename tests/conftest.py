"""
Shared fixtures: an in-memory stand-in for the ERMS API served through
httpx.MockTransport, and a FastAPI test client wired to it.
"""
import json
import re
from collections import Counter
from typing import Any, Dict, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from erms_portal.core import api_client
from erms_portal.core.cache import query_cache
from erms_portal.main import app

MANAGER_TOKEN = "manager-token"
ENGINEER_TOKEN = "engineer-token"


class FakeErmsApi:
    def __init__(self):
        self.users: Dict[str, dict] = {}
        self.projects: Dict[str, dict] = {}
        self.assignments: Dict[str, dict] = {}
        self.passwords: Dict[str, str] = {}
        self.tokens: Dict[str, str] = {}
        self.calls: Counter = Counter()
        self.last_body: Dict[str, Any] = {}
        self.by_project_reports_capacity = True
        self.hidden_candidates: set = set()
        self._seq = 100
        self._seed()

    # -- data -------------------------------------------------------------

    def _next_id(self, prefix: str) -> str:
        self._seq += 1
        return f"{prefix}{self._seq}"

    def _seed(self):
        self.add_user("m1", "Maya Manager", "maya@example.com", "Manager", password="secret", token=MANAGER_TOKEN)
        self.add_user(
            "e1", "Alice Cooper", "alice@example.com", "Engineer",
            skills=["React", "Node.js", "TypeScript"], department="Frontend", token=ENGINEER_TOKEN, password="pw",
        )
        self.add_user("e2", "Bob Stone", "bob@example.com", "Engineer", skills=["Python", "Django"], department="Backend")
        self.add_user(
            "e3", "Cara Lee", "cara@example.com", "Engineer",
            skills=["React"], department="Frontend", max_capacity=50, employment="part-time",
        )
        self.projects["p1"] = {
            "_id": "p1", "name": "Portal Revamp", "description": "Customer portal rebuild",
            "startDate": "2026-01-05T00:00:00.000Z", "endDate": "2026-06-30T00:00:00.000Z",
            "requiredSkills": ["React", "TypeScript", "GraphQL"], "teamSize": 3, "status": "active", "managerId": "m1",
        }
        self.projects["p2"] = {
            "_id": "p2", "name": "Billing API", "description": "Payments backend",
            "startDate": "2026-03-01T00:00:00.000Z", "endDate": "2026-09-30T00:00:00.000Z",
            "requiredSkills": ["Python", "PostgreSQL", "React"], "teamSize": 2, "status": "planning", "managerId": "m1",
        }
        self.assignments["a1"] = {
            "_id": "a1", "engineerId": "e1", "projectId": "p1", "allocationPercentage": 60,
            "startDate": "2026-01-05T00:00:00.000Z", "endDate": "2026-06-30T00:00:00.000Z",
            "role": "Frontend Lead", "status": "active",
        }
        self.assignments["a2"] = {
            "_id": "a2", "engineerId": "e2", "projectId": "p2", "allocationPercentage": 100,
            "startDate": "2026-03-01T00:00:00.000Z", "endDate": "2026-03-20T00:00:00.000Z",
            "role": "Backend Developer", "status": "active",
        }
        self.assignments["a3"] = {
            "_id": "a3", "engineerId": "e1", "projectId": "p2", "allocationPercentage": 20,
            "startDate": "2025-11-01T00:00:00.000Z", "endDate": "2025-12-15T00:00:00.000Z",
            "role": "Reviewer", "status": "completed",
        }

    def add_user(self, uid, name, email, type_, skills=None, department="", max_capacity=100,
                 employment="full-time", password=None, token=None):
        self.users[uid] = {
            "_id": uid, "name": name, "email": email, "type": type_, "skills": skills or [],
            "seniority": "mid", "department": department, "maxCapacity": max_capacity,
            "employmentType": employment,
        }
        if password:
            self.passwords[email] = password
        if token:
            self.tokens[token] = uid

    def allocated(self, engineer_id: str) -> int:
        return sum(
            a["allocationPercentage"] for a in self.assignments.values()
            if a["engineerId"] == engineer_id and a["status"] == "active"
        )

    def _populated(self, assignment: dict) -> dict:
        data = dict(assignment)
        engineer = self.users.get(assignment["engineerId"])
        project = self.projects.get(assignment["projectId"])
        data["engineerId"] = dict(engineer) if engineer else assignment["engineerId"]
        data["projectId"] = dict(project) if project else assignment["projectId"]
        return data

    # -- transport --------------------------------------------------------

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.startswith("/api"):
            path = path[len("/api"):]
        method = request.method
        self.calls[(method, path)] += 1
        body = json.loads(request.content) if request.content else None
        self.last_body[(method, path)] = body

        if method == "POST" and path == "/users/login":
            return self._login(body or {})

        auth = request.headers.get("authorization", "")
        uid = self.tokens.get(auth[len("Bearer "):]) if auth.startswith("Bearer ") else None
        if uid is None or uid not in self.users:
            return httpx.Response(401, json={"message": "Invalid or expired token"})

        return self._route(method, path, body, dict(request.url.params), uid)

    def _login(self, body: dict) -> httpx.Response:
        email = body.get("email")
        if self.passwords.get(email) != body.get("password"):
            return httpx.Response(401, json={"message": "Invalid credentials"})
        uid = next(u["_id"] for u in self.users.values() if u["email"] == email)
        token = next((t for t, owner in self.tokens.items() if owner == uid), None) or f"token-{uid}"
        self.tokens[token] = uid
        return httpx.Response(200, json={"accessToken": token, "data": self.users[uid]})

    def _route(self, method: str, path: str, body: Optional[dict], params: dict, uid: str) -> httpx.Response:
        m = re.fullmatch
        if method == "GET" and path == "/users/me":
            return httpx.Response(200, json={"data": self.users[uid]})
        if method == "POST" and path == "/users/change-password":
            if body.get("oldPassword") != self.passwords.get(self.users[uid]["email"]):
                return httpx.Response(400, json={"message": "Old password is incorrect"})
            return httpx.Response(204)
        if method == "POST" and path == "/users":
            if any(u["email"] == body["email"] for u in self.users.values()):
                return httpx.Response(409, json={"message": "Email already registered"})
            new_id = self._next_id("e")
            self.users[new_id] = {k: v for k, v in body.items() if k != "password"} | {"_id": new_id}
            return httpx.Response(201, json={"data": self.users[new_id]})
        if match := m(r"/users/(\w+)", path):
            target = match.group(1)
            if target not in self.users:
                return httpx.Response(404, json={"message": "User not found"})
            if method == "PUT":
                self.users[target].update(body)
                return httpx.Response(200, json={"data": self.users[target]})
            if method == "DELETE":
                del self.users[target]
                return httpx.Response(204)

        if method == "GET" and path == "/engineers":
            rows = [u for u in self.users.values() if u["type"] == "Engineer"]
            if params.get("skill"):
                needle = params["skill"].lower()
                rows = [u for u in rows if any(needle in s.lower() for s in u["skills"])]
            return httpx.Response(200, json={"data": rows})
        if match := m(r"/engineers/by-project/(\w+)", path):
            project = self.projects.get(match.group(1))
            if project is None:
                return httpx.Response(404, json={"message": "Project not found"})
            rows = []
            for u in self.users.values():
                if u["type"] != "Engineer" or u["_id"] in self.hidden_candidates:
                    continue
                row = dict(u)
                if self.by_project_reports_capacity:
                    required = project["requiredSkills"]
                    matched = len(set(required) & set(u["skills"]))
                    row["availableCapacity"] = max(0, u["maxCapacity"] - self.allocated(u["_id"]))
                    row["matchPercentage"] = round(matched / len(required) * 100) if required else 0
                rows.append(row)
            return httpx.Response(200, json={"data": rows})
        if match := m(r"/engineers/(\w+)", path):
            user = self.users.get(match.group(1))
            if user is None:
                return httpx.Response(404, json={"message": "Engineer not found"})
            return httpx.Response(200, json={"data": user})

        if path == "/projects":
            if method == "GET":
                return httpx.Response(200, json={"data": list(self.projects.values())})
            new_id = self._next_id("p")
            self.projects[new_id] = dict(body) | {"_id": new_id}
            return httpx.Response(201, json={"data": self.projects[new_id]})
        if match := m(r"/projects/(\w+)", path):
            pid = match.group(1)
            if pid not in self.projects:
                return httpx.Response(404, json={"message": "Project not found"})
            if method == "GET":
                return httpx.Response(200, json={"data": self.projects[pid]})
            if method == "PUT":
                self.projects[pid].update(body)
                return httpx.Response(200, json={"data": self.projects[pid]})
            del self.projects[pid]
            return httpx.Response(204)

        if path == "/assignments":
            if method == "GET":
                return httpx.Response(200, json={"data": [self._populated(a) for a in self.assignments.values()]})
            new_id = self._next_id("a")
            self.assignments[new_id] = dict(body) | {"_id": new_id, "status": "active"}
            return httpx.Response(201, json={"data": self.assignments[new_id]})
        if match := m(r"/assignments/engineer/(\w+)", path):
            rows = [self._populated(a) for a in self.assignments.values() if a["engineerId"] == match.group(1)]
            return httpx.Response(200, json={"data": rows})
        if match := m(r"/assignments/(\w+)", path):
            aid = match.group(1)
            if aid not in self.assignments:
                return httpx.Response(404, json={"message": "Assignment not found"})
            if method == "GET":
                return httpx.Response(200, json={"data": self._populated(self.assignments[aid])})
            if method == "PUT":
                self.assignments[aid].update(body)
                return httpx.Response(200, json={"data": self.assignments[aid]})
            del self.assignments[aid]
            return httpx.Response(204)

        if method == "GET" and path == "/analytics/team":
            return httpx.Response(200, json={"data": {
                "overview": {"totalEngineers": 3, "totalProjects": 2, "activeAssignments": 2, "utilizationRate": 64},
                "skillDistribution": [{"skill": "React", "count": 2}],
            }})
        if method == "GET" and path == "/analytics/capacity":
            return httpx.Response(200, json={"data": {
                "insights": {"overUtilized": 1, "fullyUtilized": 0, "underUtilized": 2, "totalAvailableCapacity": 90},
                "engineers": [
                    {"_id": "e1", "name": "Alice Cooper", "utilizationPercentage": 60, "currentAllocation": 60, "maxCapacity": 100},
                    {"_id": "e2", "name": "Bob Stone", "utilizationPercentage": 120, "currentAllocation": 120, "maxCapacity": 100},
                    {"_id": "e3", "name": "Cara Lee", "utilizationPercentage": 0, "currentAllocation": 0, "maxCapacity": 50},
                ],
            }})

        return httpx.Response(404, json={"message": f"No route for {method} {path}"})


@pytest.fixture
def upstream():
    fake = FakeErmsApi()
    query_cache.clear()
    api_client.client = httpx.AsyncClient(
        base_url="http://erms.test/api",
        transport=httpx.MockTransport(fake.handle),
    )
    yield fake
    api_client.client = None
    query_cache.clear()


@pytest.fixture
def client(upstream) -> TestClient:
    return TestClient(app)


@pytest.fixture
def manager_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {MANAGER_TOKEN}"}


@pytest.fixture
def engineer_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {ENGINEER_TOKEN}"}
