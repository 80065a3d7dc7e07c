import pytest
from fastapi.testclient import TestClient

from taskdesk.models import Task, TaskAssignment, TaskActivity, TaskStatus
from taskdesk.schemas.task import TaskUpdate
from taskdesk.services.activity import ActivityService
from taskdesk.services.outcome import MutationOutcome
from taskdesk.services.tasks import TaskService
from taskdesk.services.teams import TeamService


@pytest.fixture
def project_with_team(make_project, make_team):
    project = make_project("Intranet")
    team = make_team(project.id, "Platform")
    return project, team


def _assignments(db, task_id):
    return db.query(TaskAssignment).filter(TaskAssignment.task_id == task_id).count()


def test_reassignment_keeps_single_assignee(db, project_with_team, make_user, make_task):
    project, team = project_with_team
    first, second = make_user(), make_user()
    task = make_task(project.id, team.id, "Login page")
    service = TaskService(db)

    assert service.assign_task(task.id, first.id) is MutationOutcome.SUCCESS
    assert service.assign_task(task.id, second.id, actor_id=first.id) is MutationOutcome.SUCCESS

    assert _assignments(db, task.id) == 1
    assert service.assigned_user_id(task.id) == second.id
    assert service.assigned_user_email(task.id) == second.email

    latest = ActivityService(db).for_task(task.id)[0]
    assert latest.activity_type == "ASSIGN"
    assert latest.user_id == first.id
    assert f"from user ID: {first.id} to user ID: {second.id}" in latest.description


def test_assigning_same_user_twice_is_stable(db, project_with_team, make_user, make_task):
    project, team = project_with_team
    user = make_user()
    task = make_task(project.id, team.id)
    service = TaskService(db)

    assert service.assign_task(task.id, user.id)
    assert service.assign_task(task.id, user.id)
    assert _assignments(db, task.id) == 1


def test_assign_missing_task(db, make_user):
    user = make_user()

    outcome = TaskService(db).assign_task(5555, user.id)

    assert outcome is MutationOutcome.NOT_FOUND
    assert db.query(TaskAssignment).count() == 0


def test_assign_unknown_user_is_conflict(db, project_with_team, make_user, make_task):
    project, team = project_with_team
    user = make_user()
    task = make_task(project.id, team.id)
    service = TaskService(db)
    service.assign_task(task.id, user.id)

    outcome = service.assign_task(task.id, 999999)

    assert outcome is MutationOutcome.CONFLICT
    assert service.assigned_user_id(task.id) == user.id


def test_failed_insert_keeps_previous_assignee(db, project_with_team, make_user, make_task, fail_on):
    project, team = project_with_team
    first, second = make_user(), make_user()
    task = make_task(project.id, team.id)
    service = TaskService(db)
    service.assign_task(task.id, first.id)
    fail_on("INSERT INTO task_assignments")

    outcome = service.assign_task(task.id, second.id)

    assert outcome is MutationOutcome.TRANSIENT_FAILURE
    assert _assignments(db, task.id) == 1
    assert service.assigned_user_id(task.id) == first.id


def test_delete_task_leaves_siblings(db, project_with_team, make_user, make_task):
    project, team = project_with_team
    user = make_user()
    doomed_id = make_task(project.id, team.id, "Doomed", actor_id=user.id).id
    sibling = make_task(project.id, team.id, "Sibling", actor_id=user.id)
    service = TaskService(db)
    service.assign_task(doomed_id, user.id)
    service.assign_task(sibling.id, user.id)
    ActivityService(db).log_login(user.id)

    assert service.delete_task(doomed_id) is MutationOutcome.SUCCESS

    assert db.query(Task).filter(Task.id == doomed_id).count() == 0
    assert _assignments(db, doomed_id) == 0
    assert db.query(TaskActivity).filter(TaskActivity.task_id == doomed_id).count() == 0

    assert db.query(Task).filter(Task.id == sibling.id).count() == 1
    assert _assignments(db, sibling.id) == 1
    assert db.query(TaskActivity).filter(TaskActivity.task_id == sibling.id).count() == 2
    assert len(ActivityService(db).by_type("LOGIN")) == 1


def test_delete_missing_task(db):
    assert TaskService(db).delete_task(31337) is MutationOutcome.NOT_FOUND


def test_delete_task_failure_rolls_back(db, project_with_team, make_user, make_task, fail_on):
    project, team = project_with_team
    user = make_user()
    task = make_task(project.id, team.id, actor_id=user.id)
    TaskService(db).assign_task(task.id, user.id)
    fail_on("DELETE FROM tasks")

    assert TaskService(db).delete_task(task.id) is MutationOutcome.TRANSIENT_FAILURE
    assert _assignments(db, task.id) == 1
    assert db.query(TaskActivity).filter(TaskActivity.task_id == task.id).count() == 2


def test_status_change_is_logged_once(db, project_with_team, make_user, make_task):
    project, team = project_with_team
    user = make_user()
    task = make_task(project.id, team.id, "Report")
    service = TaskService(db)

    assert service.update_status(task.id, TaskStatus.IN_PROGRESS.value, actor_id=user.id)
    assert service.update_status(task.id, TaskStatus.IN_PROGRESS.value, actor_id=user.id)
    assert not service.update_status(424242, TaskStatus.DONE.value)

    status_rows = ActivityService(db).filtered(activity_type="STATUS")
    assert len(status_rows) == 1
    assert status_rows[0].user_id == user.id
    assert '"Nowe" to "W toku"' in status_rows[0].description
    assert service.get_task(task.id).status == "W toku"


def test_task_events_use_activity_recorders(db, project_with_team, make_user, make_task):
    project, team = project_with_team
    user = make_user()
    task = make_task(project.id, team.id, "Budget", actor_id=user.id)

    TaskService(db).update_status(task.id, TaskStatus.DONE.value, actor_id=user.id)

    status, created = ActivityService(db).for_task(task.id)
    assert (created.activity_type, created.user_id) == ("CREATE", user.id)
    assert created.description == 'Created task "Budget"'
    assert (status.activity_type, status.user_id) == ("STATUS", user.id)
    assert status.description == 'Changed status of task "Budget" from "Nowe" to "Zakończone"'


def test_update_task_fields(db, project_with_team, make_task):
    project, team = project_with_team
    task = make_task(project.id, team.id, "Draft")
    service = TaskService(db)

    updated = service.update_task(task.id, TaskUpdate(title="Final", priority="Wysokie"))

    assert updated.title == "Final"
    assert updated.priority == "Wysokie"
    assert updated.status == "Nowe"
    assert service.update_task(9999, TaskUpdate(title="x")) is None


def test_listings_carry_team_and_assignee(db, make_project, make_team, make_user, make_task):
    project = make_project("Shop")
    team = make_team(project.id, "Checkout")
    leader, colleague = make_user(), make_user()
    teams = TeamService(db)
    teams.add_member(team.id, leader.id, is_leader=True)
    teams.add_member(team.id, colleague.id)

    mine = make_task(project.id, team.id, "Cart")
    theirs = make_task(project.id, team.id, "Payment")
    loose = make_task(project.id, None, "Unplanned")
    service = TaskService(db)
    service.assign_task(mine.id, leader.id)
    service.assign_task(theirs.id, colleague.id)

    listing = service.tasks_for_project(project.id)
    assert [t.title for t in listing] == ["Cart", "Payment", "Unplanned"]
    assert listing[0].team_name == "Checkout"
    assert listing[0].assigned_email == leader.email
    assert listing[2].team_name is None
    assert listing[2].assigned_to is None

    assert [t.id for t in service.tasks_for_team(team.id)] == [mine.id, theirs.id]
    assert [t.id for t in service.tasks_for_leader(leader.id)] == [mine.id, theirs.id]
    assert service.tasks_for_leader(colleague.id) == []
    assert [t.id for t in service.tasks_for_user(colleague.id)] == [theirs.id]
    assert [t.id for t in service.colleague_tasks(leader.id, team.id)] == [theirs.id]
    assert service.assigned_user_id(loose.id) is None
    assert service.assigned_user_email(loose.id) is None


def test_task_endpoints(client: TestClient):
    project = client.post("/api/v1/projects/", json={"project_name": "CRM"}).json()
    user = client.post("/api/v1/users/", json={
        "name": "Anna",
        "last_name": "Nowak",
        "email": "anna@example.com",
        "password": "p@ss",
        "role_id": 4
    }).json()

    response = client.post(
        f"/api/v1/tasks/?actor_id={user['id']}",
        json={"project_id": project["id"], "title": "Import contacts"}
    )
    assert response.status_code == 201
    task = response.json()
    assert task["status"] == "Nowe"
    assert task["priority"] == "Średnie"

    response = client.put(f"/api/v1/tasks/{task['id']}/assign", json={"user_id": user["id"]})
    assert response.status_code == 204

    response = client.put(
        f"/api/v1/tasks/{task['id']}/status?actor_id={user['id']}",
        json={"status": "Zakończone"}
    )
    assert response.status_code == 200
    assert response.json()["status"] == "Zakończone"

    tasks = client.get(f"/api/v1/users/{user['id']}/tasks").json()
    assert len(tasks) == 1
    assert tasks[0]["assigned_email"] == "anna@example.com"

    activity = client.get(f"/api/v1/tasks/{task['id']}/activity").json()
    assert [a["activity_type"] for a in activity][-1] == "CREATE"
    assert {a["activity_type"] for a in activity} == {"CREATE", "ASSIGN", "STATUS"}

    assert client.delete(f"/api/v1/tasks/{task['id']}").status_code == 204
    assert client.delete(f"/api/v1/tasks/{task['id']}").status_code == 404
    assert client.put(f"/api/v1/tasks/{task['id']}/assign", json={"user_id": user["id"]}).status_code == 404
    assert client.put(f"/api/v1/tasks/{task['id']}/status", json={"status": "W toku"}).status_code == 404


def test_assign_to_unknown_user_endpoint(client: TestClient):
    project = client.post("/api/v1/projects/", json={"project_name": "ERP"}).json()
    task = client.post("/api/v1/tasks/", json={"project_id": project["id"], "title": "Ledger"}).json()

    response = client.put(f"/api/v1/tasks/{task['id']}/assign", json={"user_id": 777})
    assert response.status_code == 409
