import pytest
from fastapi.testclient import TestClient

from taskdesk.models import TeamMember
from taskdesk.schemas.project import TeamUpdate
from taskdesk.services.activity import ActivityService
from taskdesk.services.outcome import MutationOutcome
from taskdesk.services.teams import TeamService


@pytest.fixture
def three_teams(make_project, make_team):
    project = make_project("Factory")
    return [make_team(project.id, name) for name in ("Red", "Green", "Blue")]


def _memberships(db, user_id):
    return db.query(TeamMember).filter(TeamMember.user_id == user_id).all()


def test_user_ends_up_in_exactly_one_team(db, three_teams, make_user):
    red, green, blue = three_teams
    admin, user = make_user(role_id=1), make_user()
    service = TeamService(db)
    service.add_member(red.id, user.id, is_leader=True)
    service.add_member(green.id, user.id)

    outcome = service.update_user_team(user.id, blue.id, actor_id=admin.id)

    assert outcome is MutationOutcome.SUCCESS
    rows = _memberships(db, user.id)
    assert [(row.team_id, row.is_leader) for row in rows] == [(blue.id, False)]

    logged = ActivityService(db).by_type("TEAM_MANAGEMENT")
    assert len(logged) == 1
    assert logged[0].user_id == admin.id
    assert f"on team ID: {blue.id}" in logged[0].description


def test_user_without_team_gets_one(db, three_teams, make_user):
    red, _, _ = three_teams
    user = make_user()

    assert TeamService(db).update_user_team(user.id, red.id)
    assert TeamService(db).team_ids_for_user(user.id) == [red.id]
    assert ActivityService(db).by_type("TEAM_MANAGEMENT") == []


def test_repeated_moves(db, three_teams, make_user):
    red, green, _ = three_teams
    user = make_user()
    service = TeamService(db)

    assert service.update_user_team(user.id, red.id)
    assert service.update_user_team(user.id, red.id)
    assert len(_memberships(db, user.id)) == 1

    assert service.update_user_team(user.id, green.id)
    rows = _memberships(db, user.id)
    assert [(row.team_id, row.is_leader) for row in rows] == [(green.id, False)]


def test_moving_to_current_team_changes_nothing(db, three_teams, make_user, sql_log):
    red, _, _ = three_teams
    user = make_user()
    service = TeamService(db)
    service.add_member(red.id, user.id, is_leader=True)
    sql_log.clear()

    assert service.update_user_team(user.id, red.id, actor_id=user.id) is MutationOutcome.SUCCESS

    assert not any(s.lstrip().upper().startswith(("DELETE", "INSERT")) for s in sql_log)
    assert service.is_team_leader(red.id, user.id)


def test_failed_move_keeps_old_membership(db, three_teams, make_user, fail_on):
    red, green, _ = three_teams
    user = make_user()
    service = TeamService(db)
    service.add_member(red.id, user.id)
    fail_on("INSERT INTO team_members")

    outcome = service.update_user_team(user.id, green.id)

    assert outcome is MutationOutcome.TRANSIENT_FAILURE
    assert service.team_ids_for_user(user.id) == [red.id]


def test_move_to_unknown_team_is_conflict(db, three_teams, make_user):
    red, _, _ = three_teams
    user = make_user()
    service = TeamService(db)
    service.add_member(red.id, user.id)

    assert service.update_user_team(user.id, 8080) is MutationOutcome.CONFLICT
    assert service.team_ids_for_user(user.id) == [red.id]


def test_membership_queries(db, make_user, make_project, make_team):
    manager, leader, member = make_user(role_id=2), make_user(role_id=3), make_user()
    project = make_project("Hub", manager_id=manager.id)
    alpha = make_team(project.id, "Alpha")
    beta = make_team(project.id, "Beta")
    make_team(None, "Floating")
    service = TeamService(db)
    service.add_member(alpha.id, leader.id, is_leader=True)
    service.add_member(beta.id, leader.id)
    service.add_member(alpha.id, member.id)

    members = service.list_members(alpha.id)
    assert [(m.id, m.is_leader) for m in members] == [(leader.id, True), (member.id, False)]

    assert service.is_team_leader(alpha.id, leader.id)
    assert not service.is_team_leader(beta.id, leader.id)
    assert not service.is_team_leader(alpha.id, member.id)
    assert service.team_ids_for_leader(leader.id) == [alpha.id]
    assert [t.id for t in service.teams_for_user(leader.id)] == [alpha.id, beta.id]
    assert service.team_id_for_user(leader.id) == alpha.id
    assert service.team_id_for_user(manager.id) is None
    assert [t.team_name for t in service.teams_for_manager(manager.id)] == ["Alpha", "Beta"]

    assert service.remove_member(alpha.id, member.id)
    assert not service.remove_member(alpha.id, member.id)


def test_team_rename(db, three_teams):
    red, _, _ = three_teams
    service = TeamService(db)

    assert service.update_team(red.id, TeamUpdate(team_name="Crimson")).team_name == "Crimson"
    assert service.get_team_name(red.id) == "Crimson"
    assert service.get_team_name(1234) is None
    assert service.update_team(1234, TeamUpdate(team_name="x")) is None


def test_team_endpoints(client: TestClient):
    project = client.post("/api/v1/projects/", json={"project_name": "Mobile"}).json()
    user = client.post("/api/v1/users/", json={
        "name": "Piotr",
        "last_name": "Zielinski",
        "email": "piotr@example.com",
        "password": "p@ss",
        "role_id": 3
    }).json()
    ios = client.post("/api/v1/teams/", json={"team_name": "iOS", "project_id": project["id"]}).json()
    android = client.post("/api/v1/teams/", json={"team_name": "Android", "project_id": project["id"]}).json()

    response = client.post(f"/api/v1/teams/{ios['id']}/members", json={"user_id": user["id"], "is_leader": True})
    assert response.status_code == 201

    members = client.get(f"/api/v1/teams/{ios['id']}/members").json()
    assert members[0]["email"] == "piotr@example.com"
    assert members[0]["is_leader"] is True

    response = client.put(f"/api/v1/users/{user['id']}/team?actor_id={user['id']}", json={"team_id": android["id"]})
    assert response.status_code == 204
    teams = client.get(f"/api/v1/users/{user['id']}/teams").json()
    assert [t["team_name"] for t in teams] == ["Android"]

    assert client.delete(f"/api/v1/teams/{ios['id']}/members/{user['id']}").status_code == 404
    assert client.delete(f"/api/v1/teams/{android['id']}/members/{user['id']}").status_code == 204
    assert client.post("/api/v1/teams/999/members", json={"user_id": user["id"]}).status_code == 404
