import routers.notices as notices_router
from services import store
from services.store import StoreError

from factories import ANNUAL, CLASS, TERM1, TERM2, YEAR

SUBJECTS = ["গণিত", "ইংরেজি"]


def _setup_class(client, headers, students=(("s1", "1", "Rahim"), ("s2", "2", "Karim"))):
    resp = client.put(f"/api/v1/subjects/{CLASS}", json={"subjects": SUBJECTS}, headers=headers)
    assert resp.status_code == 200
    for student_id, roll, name in students:
        resp = client.post("/api/v1/students", json={
            "id": student_id,
            "roll": roll,
            "name": name,
            "fatherName": "Father",
            "studentClass": CLASS,
            "year": YEAR,
        }, headers=headers)
        assert resp.status_code == 201


def _save(client, headers, student_id, exam, math, english):
    resp = client.post("/api/v1/results/save", json={
        "studentId": student_id,
        "class": CLASS,
        "year": YEAR,
        "examName": exam,
        "marks": {"গণিত": math, "ইংরেজি": english},
    }, headers=headers)
    assert resp.status_code == 200
    return resp.json()


def _publish_all(client, headers, exam):
    resp = client.post("/api/v1/results/publish-bulk", json={
        "class": CLASS, "year": YEAR, "examName": exam, "publish": True,
    }, headers=headers)
    assert resp.status_code == 200
    return resp.json()


def _scope(exam, **extra):
    params = {"class": CLASS, "year": YEAR, "exam": exam}
    params.update(extra)
    return params


def test_teacher_routes_need_login(client):
    assert client.get("/api/v1/students").status_code == 401
    assert client.post("/api/v1/results/save", json={}).status_code == 401
    assert client.post("/auth/login", json={"password": "wrong"}).status_code == 401
    assert client.get("/auth/me").json() == {"authenticated": False}


def test_login_and_me(client, teacher_headers):
    me = client.get("/auth/me", headers=teacher_headers).json()
    assert me["authenticated"] is True
    assert me["role"] == "teacher"


def test_result_entry_publish_and_marksheet_flow(client, teacher_headers):
    _setup_class(client, teacher_headers)
    for exam, (m, e) in ((TERM1, (40, 40)), (TERM2, (45, 40)), (ANNUAL, (50, 40))):
        _save(client, teacher_headers, "s1", exam, m, e)
    _save(client, teacher_headers, "s2", ANNUAL, 30, 20)

    # nothing published yet
    resp = client.get("/api/v1/marksheet/search", params=_scope(ANNUAL, roll="1"))
    assert resp.json()["state"] == "NO_RESULT"

    for exam in (TERM1, TERM2, ANNUAL):
        _publish_all(client, teacher_headers, exam)

    body = client.get("/api/v1/marksheet/search", params=_scope(ANNUAL, roll="1")).json()
    assert body["state"] == "FOUND"
    sheet = body["marksheet"]
    assert sheet["student"]["name"] == "Rahim"
    assert sheet["totals"] == {"current": 90.0, "term1": 80.0, "term2": 85.0, "composite": 85.0}
    assert sheet["grade"] == "C"
    assert sheet["rank"] == 1

    batch = client.get("/api/v1/marksheet/batch", params=_scope(ANNUAL)).json()
    assert [row["roll"] for row in batch["rows"]] == ["1", "2"]
    assert batch["rows"][1]["totals"]["composite"] == 16.67
    assert batch["subjects"] == SUBJECTS

    rank = client.get("/api/v1/marksheet/rank", params=_scope(ANNUAL, student_id="s2")).json()
    assert rank == {"studentId": "s2", "rank": 2, "score": 16.67}


def test_search_for_unknown_roll(client):
    body = client.get("/api/v1/marksheet/search", params=_scope(TERM1, roll="99")).json()
    assert body["state"] == "NOT_FOUND"
    assert body["marksheet"] is None


def test_save_without_subjects_is_rejected(client, teacher_headers):
    client.post("/api/v1/students", json={
        "id": "s1", "roll": "1", "name": "Rahim", "studentClass": CLASS, "year": YEAR,
    }, headers=teacher_headers)
    resp = client.post("/api/v1/results/save", json={
        "studentId": "s1", "class": CLASS, "year": YEAR, "examName": TERM1, "marks": {"গণিত": 10},
    }, headers=teacher_headers)
    assert resp.status_code == 400


def test_resaving_same_scope_reuses_record_and_keeps_publication(client, teacher_headers):
    _setup_class(client, teacher_headers, students=(("s1", "1", "Rahim"),))
    first = _save(client, teacher_headers, "s1", TERM1, 40, 40)
    client.post(f"/api/v1/results/{first['id']}/publish", json={"publish": True}, headers=teacher_headers)

    second = _save(client, teacher_headers, "s1", f" {TERM1} ", 50, 50)
    assert second["id"] == first["id"]
    assert second["isPublished"] is True
    assert second["totalMarks"] == 100

    managed = client.get("/api/v1/results/manage", params=_scope(TERM1), headers=teacher_headers).json()
    assert len(managed) == 1


def test_entry_grid_returns_saved_marks(client, teacher_headers):
    _setup_class(client, teacher_headers)
    _save(client, teacher_headers, "s2", TERM1, 33, 44)
    grid = client.get("/api/v1/results/entry", params=_scope(TERM1), headers=teacher_headers).json()
    assert grid["subjects"] == SUBJECTS
    assert [s["id"] for s in grid["students"]] == ["s1", "s2"]
    assert grid["savedMarks"] == {"s1": {}, "s2": {"গণিত": 33.0, "ইংরেজি": 44.0}}


def test_save_all_and_delete_student_cascades(client, teacher_headers, db_session):
    _setup_class(client, teacher_headers)
    resp = client.post("/api/v1/results/save-all", json={
        "class": CLASS, "year": YEAR, "examName": TERM1,
        "entries": [
            {"studentId": "s1", "marks": {"গণিত": 10}},
            {"studentId": "s2", "marks": {"গণিত": 20}},
        ],
    }, headers=teacher_headers)
    assert resp.json()["updated_count"] == 2

    assert client.delete("/api/v1/students/s1", headers=teacher_headers).status_code == 200
    managed = client.get("/api/v1/results/manage", params=_scope(TERM1), headers=teacher_headers).json()
    assert [item["result"]["studentId"] for item in managed] == ["s2"]
    assert client.delete("/api/v1/students/s1", headers=teacher_headers).status_code == 404


def test_student_list_search_and_edit(client, teacher_headers):
    _setup_class(client, teacher_headers, students=(("s1", "10", "Rahim"), ("s2", "9", "Karim")))
    listed = client.get("/api/v1/students", params={"class": CLASS, "year": YEAR}, headers=teacher_headers).json()
    assert [s["roll"] for s in listed] == ["9", "10"]

    found = client.get("/api/v1/students", params={"search": "rah"}, headers=teacher_headers).json()
    assert [s["id"] for s in found] == ["s1"]

    resp = client.put("/api/v1/students/s1", json={"village": "Gazipur"}, headers=teacher_headers)
    assert resp.json()["village"] == "Gazipur"
    assert resp.json()["name"] == "Rahim"


def test_subject_add_and_remove(client, teacher_headers):
    client.post(f"/api/v1/subjects/{CLASS}/add", json={"subject": " বাংলা "}, headers=teacher_headers)
    client.post(f"/api/v1/subjects/{CLASS}/add", json={"subject": "বাংলা"}, headers=teacher_headers)
    assert client.get("/api/v1/subjects").json() == {CLASS: ["বাংলা"]}

    resp = client.delete(f"/api/v1/subjects/{CLASS}/বাংলা", headers=teacher_headers)
    assert resp.json()["subjects"] == []


def test_notices_and_dashboard(client, teacher_headers):
    resp = client.post("/api/v1/notices", data={"text": "School closed on Friday"}, headers=teacher_headers)
    assert resp.status_code == 201
    notice_id = resp.json()["id"]

    dashboard = client.get("/api/v1/dashboard").json()
    assert dashboard["notice_count"] == 1
    assert dashboard["notices"][0]["text"] == "School closed on Friday"

    assert client.delete(f"/api/v1/notices/{notice_id}", headers=teacher_headers).status_code == 200
    assert client.get("/api/v1/notices").json() == []


def test_password_change_revokes_old_sessions(client, teacher_headers):
    resp = client.post("/auth/change-password", json={
        "current": "admin123", "new": "abc", "confirm": "abc",
    }, headers=teacher_headers)
    assert resp.status_code == 400

    resp = client.post("/auth/change-password", json={
        "current": "admin123", "new": "newpass", "confirm": "newpass",
    }, headers=teacher_headers)
    assert resp.status_code == 200

    assert client.get("/api/v1/students", headers=teacher_headers).status_code == 401
    assert client.post("/auth/login", json={"password": "admin123"}).status_code == 401
    assert client.post("/auth/login", json={"password": "newpass"}).status_code == 200


def test_reset_requires_confirmation(client, teacher_headers):
    _setup_class(client, teacher_headers)
    assert client.post("/api/v1/settings/reset", json={"confirm": "yes"}, headers=teacher_headers).status_code == 400
    assert client.post("/api/v1/settings/reset", json={"confirm": "RESET"}, headers=teacher_headers).status_code == 200
    assert client.get("/api/v1/dashboard").json()["student_count"] == 0
    assert client.get("/api/v1/subjects").json() == {}


def test_exports_are_xlsx(client, teacher_headers):
    _setup_class(client, teacher_headers)
    _save(client, teacher_headers, "s1", TERM1, 40, 40)
    for url, params in (
        ("/api/v1/students/export", {"class": CLASS, "year": YEAR}),
        ("/api/v1/results/export", _scope(TERM1)),
    ):
        resp = client.get(url, params=params, headers=teacher_headers)
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("application/vnd.openxmlformats")
        assert resp.content[:2] == b"PK"


def test_print_views(client, teacher_headers):
    _setup_class(client, teacher_headers)
    _save(client, teacher_headers, "s1", TERM1, 40, 40)
    _publish_all(client, teacher_headers, TERM1)

    page = client.get("/marksheet/print", params=_scope(TERM1, roll="1"))
    assert page.status_code == 200
    assert "Rahim" in page.text

    assert client.get("/marksheet/print", params=_scope(TERM1, roll="2")).status_code == 404

    merit = client.get("/marksheet/print-batch", params=_scope(TERM1))
    assert merit.status_code == 200
    assert "Rahim" in merit.text
    assert "Karim" not in merit.text


def test_batch_rejects_unknown_sort(client):
    assert client.get("/api/v1/marksheet/batch", params=_scope(TERM1, sort_by="name")).status_code == 400


def test_edit_result_keeps_publication_and_recomputes_total(client, teacher_headers):
    _setup_class(client, teacher_headers)
    saved = _save(client, teacher_headers, "s1", TERM1, 40, 40)
    _publish_all(client, teacher_headers, TERM1)
    # subject dropped from the catalog after the result was saved
    client.delete(f"/api/v1/subjects/{CLASS}/ইংরেজি", headers=teacher_headers)

    resp = client.put(f"/api/v1/results/{saved['id']}", json={"marks": {"গণিত": 70}}, headers=teacher_headers)
    assert resp.status_code == 200
    edited = resp.json()
    assert edited["id"] == saved["id"]
    assert edited["isPublished"] is True
    assert edited["totalMarks"] == 110
    assert edited["grade"] == "B"
    assert edited["marks"] == [
        {"subjectName": "গণিত", "marks": 70.0},
        {"subjectName": "ইংরেজি", "marks": 40.0},
    ]

    body = client.get("/api/v1/marksheet/search", params=_scope(TERM1, roll="1")).json()
    assert body["marksheet"]["totals"]["current"] == 110

    resp = client.put(f"/api/v1/results/{saved['id']}", json={"marks": {"বাংলা": 10}}, headers=teacher_headers)
    assert resp.status_code == 400
    assert client.put("/api/v1/results/missing", json={"marks": {}}, headers=teacher_headers).status_code == 404


def test_rank_for_unranked_student(client, teacher_headers):
    _setup_class(client, teacher_headers)
    _save(client, teacher_headers, "s1", TERM1, 40, 40)
    _publish_all(client, teacher_headers, TERM1)

    assert client.get("/api/v1/marksheet/rank", params=_scope(TERM1, student_id="s1")).json() == {
        "studentId": "s1", "rank": 1, "score": 80.0,
    }
    assert client.get("/api/v1/marksheet/rank", params=_scope(TERM1, student_id="s2")).json() == {
        "studentId": "s2", "rank": None, "score": None,
    }


def test_notices_posted_in_same_millisecond_get_distinct_ids(client, teacher_headers, monkeypatch):
    monkeypatch.setattr(notices_router.time, "time", lambda: 1700000000.0)
    first = client.post("/api/v1/notices", data={"text": "Exam routine"}, headers=teacher_headers)
    second = client.post("/api/v1/notices", data={"text": "Holiday"}, headers=teacher_headers)
    assert first.status_code == 201
    assert second.status_code == 201
    assert first.json()["id"] == "1700000000000"
    assert second.json()["id"] == "1700000000001"


def test_store_failure_does_not_leak_database_detail(client, teacher_headers, monkeypatch):
    def failing_add(db, notice):
        raise StoreError("(sqlite3.IntegrityError) UNIQUE constraint failed [SQL: INSERT INTO notices]")

    monkeypatch.setattr(store, "add_notice", failing_add)
    resp = client.post("/api/v1/notices", data={"text": "Exam routine"}, headers=teacher_headers)
    assert resp.status_code == 500
    assert "SQL" not in resp.text
    assert resp.json() == {"detail": "Could not save changes, please try again"}
