import uuid


def test_end_to_end_classification(client, make_student, add_record):
    student = make_student(birthdate="2018-01-10")
    record = add_record(student["id"], 14, 95, "2024-06-01T08:00:00")

    assert record["bmi"] == 15.51
    assert record["bmi_status"] == "Severely Wasted"
    assert record["hfa_status"] == "Severely Stunted"
    assert record["source"] == "manual"

    detail = client.get(f"/api/v1/students/{student['id']}").json()
    assert detail["tier"] == "Primary"


def test_classification_uses_age_at_measurement(make_student, add_record):
    # Five at the weigh-in, six by "today" (2024-06-15).
    student = make_student(birthdate="2018-06-10")
    record = add_record(student["id"], 14, 95, "2024-06-01T08:00:00")
    assert record["hfa_status"] == "Normal"


def test_aware_timestamp_is_stored_as_utc(make_student, add_record):
    student = make_student()
    record = add_record(student["id"], 20, 110, "2024-06-01T08:00:00+08:00")
    assert record["measured_at"].startswith("2024-06-01T00:00:00")


def test_weight_out_of_range(client, make_student):
    student = make_student()
    resp = client.post(
        "/api/v1/bmi-records",
        json={"student_id": student["id"], "weight_kg": 4, "height_cm": 100},
    )
    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["field"] == "weight_kg"
    assert "between 5 and 150" in detail["message"]


def test_height_out_of_range(client, make_student):
    student = make_student()
    resp = client.post(
        "/api/v1/bmi-records",
        json={"student_id": student["id"], "weight_kg": 20, "height_cm": 201},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"]["field"] == "height_cm"


def test_implausible_bmi_rejected(client, make_student):
    student = make_student()
    resp = client.post(
        "/api/v1/bmi-records",
        json={"student_id": student["id"], "weight_kg": 150, "height_cm": 50},
    )
    assert resp.status_code == 400
    assert "Invalid BMI calculation" in resp.json()["detail"]["message"]


def test_unknown_or_malformed_student(client):
    resp = client.post("/api/v1/bmi-records", json={"student_id": str(uuid.uuid4()), "weight_kg": 20, "height_cm": 110})
    assert resp.status_code == 404
    resp = client.post("/api/v1/bmi-records", json={"student_id": "abc", "weight_kg": 20, "height_cm": 110})
    assert resp.status_code == 400


def test_list_defaults_to_latest_per_student(client, make_student, add_record):
    a = make_student(first_name="Ana", lrn="100000000001")
    b = make_student(first_name="Ben", lrn="100000000002")
    add_record(a["id"], 14, 95, "2024-01-10T08:00:00")
    add_record(a["id"], 18.05, 95, "2024-05-10T08:00:00")
    add_record(b["id"], 20, 110, "2024-03-10T08:00:00")

    rows = client.get("/api/v1/bmi-records").json()
    assert len(rows) == 2
    assert {r["student_id"]: r["measured_at"][:10] for r in rows} == {a["id"]: "2024-05-10", b["id"]: "2024-03-10"}

    assert len(client.get("/api/v1/bmi-records", params={"include_history": True}).json()) == 3
    assert len(client.get("/api/v1/bmi-records", params={"student_id": a["id"]}).json()) == 2


def test_status_filter_means_current_status(client, make_student, add_record):
    student = make_student()
    add_record(student["id"], 14, 95, "2024-01-10T08:00:00")
    add_record(student["id"], 18.05, 95, "2024-05-10T08:00:00")

    assert client.get("/api/v1/bmi-records", params={"bmi_status": "Severely Wasted"}).json() == []
    current = client.get("/api/v1/bmi-records", params={"bmi_status": "Normal"}).json()
    assert len(current) == 1


def test_month_and_grade_filters(client, make_student, add_record):
    a = make_student(first_name="Ana", grade_level=1)
    b = make_student(first_name="Ben", grade_level=4)
    add_record(a["id"], 20, 110, "2024-05-31T23:00:00")
    add_record(b["id"], 30, 130, "2024-06-01T00:00:00")

    may = client.get("/api/v1/bmi-records", params={"month": "2024-05"}).json()
    assert [r["first_name"] for r in may] == ["Ana"]
    grade4 = client.get("/api/v1/bmi-records", params={"grade": 4}).json()
    assert [r["first_name"] for r in grade4] == ["Ben"]
    assert client.get("/api/v1/bmi-records", params={"month": "2024-13"}).status_code == 422
