"""Admin management: business, services, employees, schedules, appointments, dashboard."""

from tests.conftest import (
    API,
    MONDAY,
    auth_headers,
    availability,
    book,
    create_employee,
    create_service,
    register_owner,
    set_schedule,
)


def walk_in(client, shop, time, headers=None, email="walkin@example.com"):
    return client.post(
        f"{API}/admin/appointments",
        json={
            "service_id": shop["service"]["id"],
            "employee_id": shop["employee"]["id"],
            "date": MONDAY.isoformat(),
            "time": time,
            "client": {"full_name": "Marta Díaz", "email": email, "phone": "3015550000"},
            "notes": "llamó por teléfono",
        },
        headers=headers or shop["headers"],
    )


class TestBusinessProfile:
    def test_rename_regenerates_slug(self, client, admin_headers):
        resp = client.put(
            f"{API}/admin/business",
            json={"name": "Peluquería Sol", "address": "Calle 10 #5-20"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["slug"] == "peluqueria-sol"
        assert body["address"] == "Calle 10 #5-20"
        assert client.get(f"{API}/public/businesses/peluqueria-sol").status_code == 200

    def test_blank_name_rejected(self, client, admin_headers):
        resp = client.put(f"{API}/admin/business", json={"name": "  "}, headers=admin_headers)
        assert resp.status_code == 400

    def test_update_own_profile(self, client, admin_headers):
        resp = client.put(
            f"{API}/admin/profile",
            json={"full_name": "Laura G.", "phone": "3000000000"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["full_name"] == "Laura G."


class TestServices:
    def test_crud(self, client, admin_headers):
        first = create_service(client, admin_headers, name="Corte")
        second = create_service(client, admin_headers, name="Barba", duration=20, price=15000)
        listed = client.get(f"{API}/admin/services", headers=admin_headers).json()
        assert [s["id"] for s in listed] == [second["id"], first["id"]]

        patched = client.patch(
            f"{API}/admin/services/{first['id']}",
            json={"price": 30000},
            headers=admin_headers,
        ).json()
        assert patched["price"] == 30000
        assert patched["duration_minutes"] == 30

        assert client.delete(f"{API}/admin/services/{first['id']}", headers=admin_headers).status_code == 204
        assert len(client.get(f"{API}/admin/services", headers=admin_headers).json()) == 1

    def test_duration_must_be_positive(self, client, admin_headers):
        resp = client.post(
            f"{API}/admin/services",
            json={"name": "Nada", "price": 0, "duration_minutes": 0},
            headers=admin_headers,
        )
        assert resp.status_code == 422

    def test_other_business_cannot_touch(self, client, admin_headers):
        service = create_service(client, admin_headers)
        other = auth_headers(register_owner(client, email="rival@example.com", business_name="Rival")["access_token"])
        assert client.patch(f"{API}/admin/services/{service['id']}", json={"price": 1}, headers=other).status_code == 404
        assert client.delete(f"{API}/admin/services/{service['id']}", headers=other).status_code == 404
        assert client.get(f"{API}/admin/services", headers=other).json() == []


class TestEmployees:
    def test_create_update_delete(self, client, admin_headers):
        employee = create_employee(client, admin_headers)
        assert employee["role"] == "employee"

        resp = client.patch(
            f"{API}/admin/employees/{employee['id']}",
            json={"full_name": "Ana María Ruiz"},
            headers=admin_headers,
        )
        assert resp.json()["full_name"] == "Ana María Ruiz"

        assert client.delete(f"{API}/admin/employees/{employee['id']}", headers=admin_headers).status_code == 204
        assert client.get(f"{API}/admin/employees", headers=admin_headers).json() == []

    def test_duplicate_email(self, client, admin_headers):
        create_employee(client, admin_headers)
        resp = client.post(
            f"{API}/admin/employees",
            json={"full_name": "Otra", "email": "ana@example.com", "password": "secret1"},
            headers=admin_headers,
        )
        assert resp.status_code == 409

    def test_admin_is_not_listed_as_employee(self, client, admin_headers):
        assert client.get(f"{API}/admin/employees", headers=admin_headers).json() == []


class TestSchedules:
    def test_upsert_keeps_one_row_per_weekday(self, client, admin_headers):
        employee = create_employee(client, admin_headers)
        set_schedule(client, admin_headers, employee["id"], weekday=3, open_time="09:00", close_time="17:00")
        set_schedule(client, admin_headers, employee["id"], weekday=3, open_time="10:00", close_time="14:00")
        set_schedule(client, admin_headers, employee["id"], weekday=1)
        rows = client.get(f"{API}/admin/employees/{employee['id']}/schedule", headers=admin_headers).json()
        assert [r["weekday"] for r in rows] == [1, 3]
        assert (rows[1]["open_time"], rows[1]["close_time"]) == ("10:00", "14:00")

    def test_day_off_clears_times(self, client, admin_headers):
        employee = create_employee(client, admin_headers)
        row = set_schedule(client, admin_headers, employee["id"], weekday=7, open_time="09:00", close_time="12:00", day_off=True)
        assert row["is_day_off"] is True
        assert (row["open_time"], row["close_time"]) == ("00:00", "00:00")

    def test_open_must_precede_close(self, client, admin_headers):
        employee = create_employee(client, admin_headers)
        resp = client.put(
            f"{API}/admin/employees/{employee['id']}/schedule/2",
            json={"open_time": "18:00", "close_time": "09:00"},
            headers=admin_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Open time must be earlier than close time"

    def test_weekday_range(self, client, admin_headers):
        employee = create_employee(client, admin_headers)
        resp = client.put(
            f"{API}/admin/employees/{employee['id']}/schedule/8",
            json={"open_time": "09:00", "close_time": "10:00"},
            headers=admin_headers,
        )
        assert resp.status_code == 422

    def test_malformed_time(self, client, admin_headers):
        employee = create_employee(client, admin_headers)
        resp = client.put(
            f"{API}/admin/employees/{employee['id']}/schedule/1",
            json={"open_time": "9am", "close_time": "10:00"},
            headers=admin_headers,
        )
        assert resp.status_code == 422


class TestAppointmentsAndDashboard:
    def test_listing_status_changes_and_stats(self, client, shop):
        headers = shop["headers"]
        first = book(client, shop, MONDAY, "09:00").json()
        book(client, shop, MONDAY, "09:30", email="otra@example.com")

        listed = client.get(f"{API}/admin/appointments", headers=headers).json()
        assert [a["starts_at"] for a in listed] == ["2030-01-07T09:30:00", "2030-01-07T09:00:00"]
        assert listed[0]["client_email"] == "otra@example.com"
        assert listed[0]["employee_full_name"] == "Ana Ruiz"
        assert listed[0]["service_name"] == "Corte"

        cancel = client.patch(f"{API}/admin/appointments/{first['id']}", json={"status": "cancelled"}, headers=headers)
        assert cancel.status_code == 200
        back = client.patch(f"{API}/admin/appointments/{first['id']}", json={"status": "confirmed"}, headers=headers)
        assert back.status_code == 409

        cancelled = client.get(f"{API}/admin/appointments", params={"status": "cancelled"}, headers=headers).json()
        assert [a["id"] for a in cancelled] == [first["id"]]

        stats = client.get(f"{API}/admin/dashboard", headers=headers).json()
        assert stats["total_appointments"] == 2
        assert stats["confirmed_appointments"] == 1
        assert stats["cancelled_appointments"] == 1
        assert stats["total_revenue"] == 25000
        assert stats["revenue_this_month"] == 25000
        assert stats["most_popular_service"] == "Corte"
        assert stats["top_employee"] == "Ana Ruiz"

    def test_empty_dashboard(self, client, admin_headers):
        stats = client.get(f"{API}/admin/dashboard", headers=admin_headers).json()
        assert stats["total_appointments"] == 0
        assert stats["total_revenue"] == 0
        assert stats["most_popular_service"] is None
        assert stats["top_employee"] is None

    def test_delete_appointment(self, client, shop):
        appointment = book(client, shop, MONDAY, "09:00").json()
        url = f"{API}/admin/appointments/{appointment['id']}"
        assert client.delete(url, headers=shop["headers"]).status_code == 204
        assert client.delete(url, headers=shop["headers"]).status_code == 404

    def test_employee_sees_own_appointments_and_schedule(self, client, shop):
        book(client, shop, MONDAY, "09:30")
        login = client.post(f"{API}/auth/login", json={"email": "ana@example.com", "password": "secret1"})
        headers = auth_headers(login.json()["access_token"])

        mine = client.get(f"{API}/employee/appointments", headers=headers).json()
        assert [a["starts_at"] for a in mine] == ["2030-01-07T09:30:00"]
        later = client.get(f"{API}/employee/appointments", params={"from_date": "2030-02-01"}, headers=headers).json()
        assert later == []

        schedule = client.get(f"{API}/employee/schedule", headers=headers).json()
        assert [(r["weekday"], r["open_time"], r["close_time"]) for r in schedule] == [(1, "09:00", "10:00")]

    def test_deleting_employee_removes_their_bookings(self, client, shop):
        book(client, shop, MONDAY, "09:00")
        other = create_employee(client, shop["headers"], email="leo@example.com", full_name="Leo")
        set_schedule(client, shop["headers"], other["id"], weekday=1)
        client.delete(f"{API}/admin/employees/{shop['employee']['id']}", headers=shop["headers"])
        assert client.get(f"{API}/admin/appointments", headers=shop["headers"]).json() == []

    def test_another_service_can_be_added_after_bookings(self, client, shop):
        book(client, shop, MONDAY, "09:00")
        create_service(client, shop["headers"], name="Cejas", duration=15, price=8000)
        page = client.get(f"{API}/public/businesses/{shop['slug']}").json()
        assert [s["name"] for s in page["services"]] == ["Cejas", "Corte"]


def test_service_duration_defaults_to_thirty_minutes(client, admin_headers):
    resp = client.post(f"{API}/admin/services", json={"name": "Manicure", "price": 20000}, headers=admin_headers)
    assert resp.status_code == 201
    assert resp.json()["duration_minutes"] == 30


class TestAdminBooking:
    def test_admin_books_for_a_client(self, client, shop):
        resp = walk_in(client, shop, "09:30")
        assert resp.status_code == 201, resp.text
        body = resp.json()
        assert body["status"] == "confirmed"
        assert body["client_full_name"] == "Marta Díaz"
        assert body["notes"] == "llamó por teléfono"
        assert body["ends_at"] == "2030-01-07T10:00:00"
        assert availability(client, shop, MONDAY)["slots"] == ["09:00"]

    def test_taken_or_off_grid_time_conflicts(self, client, shop):
        assert book(client, shop, MONDAY, "09:00").status_code == 201
        assert walk_in(client, shop, "09:00").status_code == 409
        assert walk_in(client, shop, "09:10").status_code == 409

    def test_employee_cannot_book_through_admin_route(self, client, shop):
        login = client.post(f"{API}/auth/login", json={"email": "ana@example.com", "password": "secret1"})
        headers = auth_headers(login.json()["access_token"])
        assert walk_in(client, shop, "09:00", headers=headers).status_code == 403


class TestTenantIsolation:
    def test_rival_admin_gets_404_on_foreign_rows(self, client, shop):
        appointment = book(client, shop, MONDAY, "09:00").json()
        employee_id = shop["employee"]["id"]
        rival = auth_headers(register_owner(client, email="rival@example.com", business_name="Rival")["access_token"])

        url = f"{API}/admin/appointments/{appointment['id']}"
        assert client.patch(url, json={"status": "cancelled"}, headers=rival).status_code == 404
        assert client.delete(url, headers=rival).status_code == 404
        assert client.get(f"{API}/admin/appointments", headers=rival).json() == []

        assert client.get(f"{API}/admin/employees/{employee_id}/schedule", headers=rival).status_code == 404
        resp = client.put(
            f"{API}/admin/employees/{employee_id}/schedule/1",
            json={"open_time": "08:00", "close_time": "18:00"},
            headers=rival,
        )
        assert resp.status_code == 404
        assert client.patch(f"{API}/admin/employees/{employee_id}", json={"full_name": "X"}, headers=rival).status_code == 404
        assert client.delete(f"{API}/admin/employees/{employee_id}", headers=rival).status_code == 404
        assert walk_in(client, shop, "09:30", headers=rival).status_code == 404

        # untouched for the owner
        owned = client.get(f"{API}/admin/appointments", headers=shop["headers"]).json()
        assert [(a["id"], a["status"]) for a in owned] == [(appointment["id"], "confirmed")]
        assert availability(client, shop, MONDAY)["slots"] == ["09:30"]


def test_dashboard_ties_go_to_the_oldest_row(client, shop):
    barba = create_service(client, shop["headers"], name="Barba")
    aaron = create_employee(client, shop["headers"], email="aaron@example.com", full_name="Aaron")
    set_schedule(client, shop["headers"], aaron["id"], weekday=1)

    assert book(client, shop, MONDAY, "09:00").status_code == 201
    assert book(client, {**shop, "employee": aaron}, MONDAY, "09:30", service_id=barba["id"]).status_code == 201

    stats = client.get(f"{API}/admin/dashboard", headers=shop["headers"]).json()
    assert stats["most_popular_service"] == "Corte"
    assert stats["top_employee"] == "Ana Ruiz"
