import pytest
from fastapi import status

from gradebook.models import Grade


def assign(client, headers, subject_id, entries):
    return client.post("/api/grades", json={"subject_id": subject_id, "grades": entries}, headers=headers)


def test_scenario_grade_and_foreign_teacher_update(client, headers, algebra, seed_data):
    student_id = seed_data["student"].id
    response = assign(client, headers["teacher"], algebra["subject_id"], [{"student_id": student_id, "grade": 87.5}])
    assert response.status_code == status.HTTP_201_CREATED
    grade_id = response.json()["grades"][0]["id"]

    mine = client.get("/api/grades/my-grades", headers=headers["student"]).json()
    assert len(mine) == 1
    assert mine[0]["grade"] == 87.5
    assert mine[0]["subject"]["school_class"]["name"] == "Algebra-1"

    response = client.put(f"/api/grades/{grade_id}", json={"grade": 10}, headers=headers["teacher2"])
    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.parametrize("value", [0, 100, 55.5])
def test_grade_bounds_accepted(client, headers, algebra, seed_data, value):
    response = assign(client, headers["teacher"], algebra["subject_id"], [{"student_id": seed_data["student"].id, "grade": value}])
    assert response.status_code == status.HTTP_201_CREATED


@pytest.mark.parametrize("value", [100.01, -0.01])
def test_grade_bounds_rejected(client, headers, algebra, seed_data, value):
    response = assign(client, headers["teacher"], algebra["subject_id"], [{"student_id": seed_data["student"].id, "grade": value}])
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"message": "Grade must be between 0 and 100"}


def test_batch_is_atomic(client, headers, algebra, seed_data, db_session):
    class_id = algebra["class_id"]
    extra = [seed_data["student2"].id, seed_data["student3"].id]
    client.post(f"/api/classes/{class_id}/students", json={"student_ids": extra}, headers=headers["teacher"])

    entries = [
        {"student_id": seed_data["student"].id, "grade": 80},
        {"student_id": seed_data["student2"].id, "grade": 70},
        {"student_id": seed_data["student3"].id, "grade": 101},
        {"student_id": seed_data["student"].id, "grade": 60},
        {"student_id": seed_data["student2"].id, "grade": 50},
    ]
    response = assign(client, headers["teacher"], algebra["subject_id"], entries)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert db_session.query(Grade).count() == 0


def test_student_must_be_enrolled(client, headers, algebra, seed_data, db_session):
    entries = [
        {"student_id": seed_data["student"].id, "grade": 80},
        {"student_id": seed_data["student2"].id, "grade": 80},
    ]
    response = assign(client, headers["teacher"], algebra["subject_id"], entries)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == f"Student with ID {seed_data['student2'].id} is not enrolled in this class"
    assert db_session.query(Grade).count() == 0


def test_entry_requires_student_and_grade(client, headers, algebra, seed_data):
    response = assign(client, headers["teacher"], algebra["subject_id"], [{"student_id": seed_data["student"].id}])
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"message": "Student ID and grade are required for each entry"}


def test_assign_requires_subject_and_grades(client, headers):
    response = client.post("/api/grades", json={}, headers=headers["teacher"])
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"message": "Subject ID and grades array are required"}


def test_missing_subject_is_not_found_before_payload_checks(client, headers, algebra):
    response = client.post("/api/grades", json={"subject_id": 999}, headers=headers["teacher"])
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"message": "Subject not found"}

    response = client.post("/api/grades", json={"subject_id": algebra["subject_id"]}, headers=headers["teacher2"])
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = client.post("/api/grades", json={"subject_id": algebra["subject_id"]}, headers=headers["teacher"])
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"message": "Subject ID and grades array are required"}


def test_assign_to_missing_or_foreign_subject(client, headers, algebra, seed_data):
    entry = [{"student_id": seed_data["student"].id, "grade": 50}]
    assert assign(client, headers["teacher"], 999, entry).status_code == status.HTTP_404_NOT_FOUND
    assert assign(client, headers["teacher2"], algebra["subject_id"], entry).status_code == status.HTTP_403_FORBIDDEN
    assert assign(client, headers["student"], algebra["subject_id"], entry).status_code == status.HTTP_403_FORBIDDEN


def test_assign_upserts_by_student_and_subject(client, headers, algebra, seed_data, db_session):
    student_id = seed_data["student"].id
    first = assign(
        client, headers["teacher"], algebra["subject_id"],
        [{"student_id": student_id, "grade": 40, "assignment": "Quiz", "comments": "retake"}],
    )
    second = assign(client, headers["teacher"], algebra["subject_id"], [{"student_id": student_id, "grade": 95}])
    assert first.json()["grades"][0]["id"] == second.json()["grades"][0]["id"]

    grade = db_session.query(Grade).one()
    db_session.refresh(grade)
    assert grade.grade == 95
    assert grade.assignment is None
    assert grade.comments is None


def test_list_for_subject_most_recent_first(client, headers, algebra, seed_data):
    client.post(
        f"/api/classes/{algebra['class_id']}/students",
        json={"student_ids": [seed_data["student2"].id]},
        headers=headers["teacher"],
    )
    assign(client, headers["teacher"], algebra["subject_id"], [{"student_id": seed_data["student"].id, "grade": 70}])
    assign(client, headers["teacher"], algebra["subject_id"], [{"student_id": seed_data["student2"].id, "grade": 90}])

    url = f"/api/grades/subject/{algebra['subject_id']}"
    response = client.get(url, headers=headers["teacher"])
    assert response.status_code == status.HTTP_200_OK
    assert [g["student"]["id"] for g in response.json()] == [seed_data["student2"].id, seed_data["student"].id]

    assert client.get(url, headers=headers["teacher2"]).status_code == status.HTTP_403_FORBIDDEN
    assert client.get(url, headers=headers["student"]).status_code == status.HTTP_403_FORBIDDEN


def test_my_subject_grades_requires_enrollment(client, headers, algebra, seed_data):
    assign(client, headers["teacher"], algebra["subject_id"], [{"student_id": seed_data["student"].id, "grade": 70}])
    url = f"/api/grades/subject/{algebra['subject_id']}/my-grade"

    response = client.get(url, headers=headers["student"])
    assert response.status_code == status.HTTP_200_OK
    assert [g["grade"] for g in response.json()] == [70]

    assert client.get(url, headers=headers["student2"]).status_code == status.HTTP_403_FORBIDDEN
    assert client.get("/api/grades/subject/999/my-grade", headers=headers["student"]).status_code == status.HTTP_404_NOT_FOUND


def test_my_grades_is_student_only(client, headers):
    response = client.get("/api/grades/my-grades", headers=headers["teacher"])
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json() == {"message": "Access denied. Student role required."}


def test_update_grade(client, headers, algebra, seed_data):
    grade_id = assign(
        client, headers["teacher"], algebra["subject_id"],
        [{"student_id": seed_data["student"].id, "grade": 70, "assignment": "Essay"}],
    ).json()["grades"][0]["id"]

    response = client.put(f"/api/grades/{grade_id}", json={"grade": 100.01}, headers=headers["teacher"])
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = client.put(f"/api/grades/{grade_id}", json={"comments": "late"}, headers=headers["teacher"])
    assert response.json() == {"message": "Grade is required"}

    response = client.put(f"/api/grades/{grade_id}", json={"grade": 72, "comments": "late"}, headers=headers["teacher"])
    assert response.status_code == status.HTTP_200_OK
    grade = response.json()["grade"]
    assert grade["grade"] == 72
    assert grade["assignment"] == "Essay"
    assert grade["comments"] == "late"


def test_get_grade_visibility(client, headers, algebra, seed_data):
    grade_id = assign(
        client, headers["teacher"], algebra["subject_id"], [{"student_id": seed_data["student"].id, "grade": 70}]
    ).json()["grades"][0]["id"]
    url = f"/api/grades/{grade_id}"
    assert client.get(url, headers=headers["teacher"]).status_code == status.HTTP_200_OK
    assert client.get(url, headers=headers["student"]).status_code == status.HTTP_200_OK
    assert client.get(url, headers=headers["student2"]).status_code == status.HTTP_403_FORBIDDEN
    assert client.get(url, headers=headers["teacher2"]).status_code == status.HTTP_403_FORBIDDEN


def test_delete_grade(client, headers, algebra, seed_data, db_session):
    grade_id = assign(
        client, headers["teacher"], algebra["subject_id"], [{"student_id": seed_data["student"].id, "grade": 70}]
    ).json()["grades"][0]["id"]
    assert client.delete(f"/api/grades/{grade_id}", headers=headers["teacher2"]).status_code == status.HTTP_403_FORBIDDEN
    assert client.delete(f"/api/grades/{grade_id}", headers=headers["teacher"]).status_code == status.HTTP_200_OK
    assert client.delete(f"/api/grades/{grade_id}", headers=headers["teacher"]).status_code == status.HTTP_404_NOT_FOUND
    assert db_session.query(Grade).count() == 0
