from supplies.models import RequestStatus

from conftest import login


def _pen(store):
    return next(m for m in store.materials if m.name == "Blue pen")


def _pending(store):
    return next(r for r in store.requests if r.status is RequestStatus.PENDING)


def test_login_page(client):
    resp = client.get("/auth/login")
    assert resp.status_code == 200
    assert b"Log in" in resp.data


def test_bad_credentials_flash_one_message(client):
    resp = login(client, "admin", "wrong")
    assert b"Invalid username or password." in resp.data

    resp = login(client, "ghost", "123")
    assert b"Invalid username or password." in resp.data


def test_admin_lands_on_dashboard(client):
    resp = login(client)
    assert resp.status_code == 200
    assert b"Pending requests: 1" in resp.data


def test_user_lands_on_portal_and_is_kept_out_of_admin(client):
    resp = login(client, "somchai", "123")
    assert b"My requests" in resp.data

    resp = client.get("/admin/users", follow_redirects=True)
    assert b"You do not have permission" in resp.data

    resp = client.get("/requests", follow_redirects=True)
    assert b"You do not have permission" in resp.data


def test_anonymous_is_sent_to_login(client):
    resp = client.get("/materials")
    assert resp.status_code == 302
    assert "/auth/login" in resp.headers["Location"]


def test_logout(client):
    login(client)
    resp = client.get("/auth/logout", follow_redirects=True)
    assert b"You have been logged out." in resp.data
    assert client.get("/dashboard").status_code == 302


def test_approve_and_issue_through_the_queue(client, app_store):
    login(client)
    req = _pending(app_store)
    pen = _pen(app_store)

    resp = client.post(f"/requests/{req.id}/status", data={"status": "APPROVED"}, follow_redirects=True)
    assert f"Request #{req.id} marked APPROVED.".encode() in resp.data

    resp = client.post(f"/requests/{req.id}/status", data={"status": "ISSUED"}, follow_redirects=True)
    assert b"Issued 5 piece of Blue pen" in resp.data
    assert app_store.get_material(pen.id).stock == 95

    resp = client.post(f"/requests/{req.id}/status", data={"status": "ISSUED"}, follow_redirects=True)
    assert b"already issued" in resp.data
    assert app_store.get_material(pen.id).stock == 95


def test_issue_with_too_little_stock_flashes_numbers(app, client, app_store):
    login(client)
    req = _pending(app_store)
    with app.app_context():
        app_store.update_material(req.material_id, stock=3)

    resp = client.post(f"/requests/{req.id}/status", data={"status": "ISSUED"}, follow_redirects=True)
    assert b"Available: 3, requested: 5" in resp.data
    assert app_store.get_request(req.id).status is RequestStatus.PENDING


def test_material_crud_pages(client, app_store):
    login(client)
    resp = client.post(
        "/materials/new", data={"name": "Scissors", "stock": "6", "unit": "piece"}, follow_redirects=True
    )
    assert b"Scissors" in resp.data
    mat = next(m for m in app_store.materials if m.name == "Scissors")

    client.post(f"/materials/{mat.id}/edit", data={"name": "Scissors", "stock": "8", "unit": "pair"})
    assert app_store.get_material(mat.id).stock == 8
    assert app_store.get_material(mat.id).unit == "pair"

    client.post(f"/materials/{mat.id}/delete")
    assert app_store.get_material(mat.id) is None
    assert client.post(f"/materials/{mat.id}/delete").status_code == 404


def test_negative_stock_is_refused(client, app_store):
    login(client)
    resp = client.post(
        "/materials/new", data={"name": "Glue", "stock": "-2", "unit": "stick"}, follow_redirects=True
    )
    assert b"Stock cannot be negative." in resp.data
    assert all(m.name != "Glue" for m in app_store.materials)


def test_materials_filter_and_sort(client):
    login(client)
    resp = client.get("/materials?unit=piece&sort=stock&dir=desc")
    body = resp.data.decode()
    assert "Blue pen" in body and "Stapler" in body
    assert "A4 paper" not in body
    assert body.index("Blue pen") < body.index("Stapler")


def test_stock_page_for_users(client):
    login(client, "somsri", "123")
    resp = client.get("/stock")
    assert resp.status_code == 200
    assert b"Whiteboard marker" in resp.data
    assert b"Add material" not in resp.data


def test_user_submits_request(client, app_store):
    login(client, "somchai", "123")
    pen = _pen(app_store)
    before = len(app_store.requests)

    resp = client.post("/my-requests", data={"material_id": str(pen.id), "quantity": "500"}, follow_redirects=True)
    assert b"Request submitted." in resp.data
    assert len(app_store.requests) == before + 1
    assert b"500 piece" in resp.data

    resp = client.post("/my-requests", data={"material_id": str(pen.id), "quantity": "0"}, follow_redirects=True)
    assert b"Quantity must be at least 1." in resp.data
    assert len(app_store.requests) == before + 1


def test_duplicate_username_is_refused(client, app_store):
    login(client)
    before = len(app_store.users)
    resp = client.post(
        "/admin/users/new",
        data={"name": "Other", "department": "IT", "role": "USER", "username": "admin", "password": "x"},
        follow_redirects=True,
    )
    assert b"is already taken" in resp.data
    assert len(app_store.users) == before


def test_admin_accounts_cannot_be_deleted(client, app_store):
    login(client)
    admin = app_store.find_user_by_username("admin")
    resp = client.post(f"/admin/users/{admin.id}/delete", follow_redirects=True)
    assert b"Administrator accounts cannot be deleted." in resp.data
    assert app_store.get_user(admin.id) is not None

    somsri = app_store.find_user_by_username("somsri")
    client.post(f"/admin/users/{somsri.id}/delete")
    assert app_store.get_user(somsri.id) is None


def test_session_reflects_admin_edits(app, app_store):
    user_client = app.test_client()
    login(user_client, "somchai", "123")
    somchai = app_store.find_user_by_username("somchai")

    admin_client = app.test_client()
    login(admin_client)
    admin_client.post(
        f"/admin/users/{somchai.id}/edit",
        data={"name": "Somchai J.", "department": "Marketing", "role": "USER",
              "username": "somchai", "password": "123"},
    )

    resp = user_client.get("/my-requests")
    assert b"Marketing" in resp.data
    assert b"Somchai J." in resp.data


def test_login_does_not_carry_over_to_another_client(app):
    first = app.test_client()
    login(first, "somchai", "123")
    assert first.get("/my-requests").status_code == 200

    fresh = app.test_client()
    resp = fresh.get("/my-requests")
    assert resp.status_code == 302
    assert "/auth/login" in resp.headers["Location"]


def test_queue_shows_unknown_for_deleted_user(app, client, app_store):
    login(client)
    somsri = app_store.find_user_by_username("somsri")
    with app.app_context():
        app_store.delete_user(somsri.id)

    resp = client.get("/requests")
    assert resp.status_code == 200
    assert b"Unknown" in resp.data


def test_csv_reports(client):
    login(client)
    resp = client.get("/reports/materials.csv")
    assert resp.mimetype == "text/csv"
    text = resp.data.decode("utf-8")
    assert text.startswith("\ufeffID,Name,Stock,Unit\n")
    assert "attachment; filename=inventory_data.csv" in resp.headers["Content-Disposition"]

    resp = client.get("/reports/requests.csv")
    assert resp.data.decode("utf-8").startswith("\ufeffID,User,Department,Material,Quantity,Unit,Date,Status")


def test_spreadsheet_and_pdf_reports(client):
    login(client)
    assert client.get("/reports/materials.xlsx").status_code == 200
    assert client.get("/reports/requests.pdf").data.startswith(b"%PDF")


def test_reports_are_admin_only(client):
    login(client, "somsri", "123")
    resp = client.get("/reports/materials.csv")
    assert resp.status_code == 302
