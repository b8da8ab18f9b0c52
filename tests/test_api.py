"""Tests for API endpoints."""

import pytest
from datetime import timedelta

from rxengine.models.reminder import PrescriptionReminder
from rxengine.services.auth_service import create_access_token
from rxengine.utils.timezone import utcnow


class TestHealthEndpoint:
    """Test health check endpoint."""

    def test_health_check(self, client):
        """Test health check returns healthy status."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data
        assert "environment" in data


class TestAuthentication:
    """Test token checks on prescription endpoints."""

    def test_missing_token(self, client):
        response = client.get("/api/prescriptions")
        assert response.status_code == 401

    def test_invalid_token(self, client):
        response = client.get("/api/prescriptions", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"

    def test_token_from_cookie(self, client):
        client.cookies.set("access_token", create_access_token("customer-9", "c9@example.com"))
        response = client.get("/api/prescriptions")
        assert response.status_code == 200
        assert response.json()["total"] == 0

    def test_customer_cannot_use_admin_endpoints(self, client, customer_headers):
        response = client.get("/api/admin/prescriptions", headers=customer_headers)
        assert response.status_code == 403


class TestPrescriptionEndpoints:
    """Test customer prescription endpoints."""

    def test_create_prescription(self, client, customer_headers, sample_upload):
        response = client.post("/api/prescriptions", json=sample_upload, headers=customer_headers)
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "PENDING"
        assert data["derived_status"] == "PENDING"
        assert data["is_reorderable"] is False
        assert data["user_id"] == "customer-1"
        assert data["reference_number"].startswith("RX")
        assert len(data["items"]) == 2

    def test_create_writes_audit_event(self, client, customer_headers, admin_headers, sample_upload):
        created = client.post("/api/prescriptions", json=sample_upload, headers=customer_headers).json()

        response = client.get(f"/api/admin/prescriptions/{created['id']}/audit", headers=admin_headers)
        assert response.status_code == 200
        events = response.json()["events"]
        assert [e["action"] for e in events] == ["CREATE"]
        assert events[0]["details"]["reference_number"] == created["reference_number"]

    def test_create_requires_prescription_date(self, client, customer_headers, sample_upload):
        del sample_upload["prescription_date"]
        response = client.post("/api/prescriptions", json=sample_upload, headers=customer_headers)
        assert response.status_code == 422

    def test_list_only_own_prescriptions(self, client, customer_headers, make_prescription):
        now = utcnow()
        make_prescription(status="APPROVED", prescription_date=now - timedelta(days=10))
        make_prescription(status="APPROVED", prescription_date=now - timedelta(days=200))
        make_prescription(user_id="customer-2")

        response = client.get("/api/prescriptions", headers=customer_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        statuses = sorted(p["derived_status"] for p in data["prescriptions"])
        assert statuses == ["ACTIVE", "EXPIRED"]
        for p in data["prescriptions"]:
            assert p["is_reorderable"] == (p["derived_status"] == "ACTIVE")

    def test_list_newest_first(self, client, customer_headers, make_prescription):
        now = utcnow()
        older = make_prescription(created_at=now - timedelta(days=3))
        newer = make_prescription(created_at=now - timedelta(days=1))

        data = client.get("/api/prescriptions", headers=customer_headers).json()
        assert [p["id"] for p in data["prescriptions"]] == [newer.id, older.id]

    def test_get_other_users_prescription(self, client, customer_headers, make_prescription):
        prescription = make_prescription(user_id="customer-2")
        response = client.get(f"/api/prescriptions/{prescription.id}", headers=customer_headers)
        assert response.status_code == 404

    def test_get_prescription(self, client, customer_headers, make_prescription):
        prescription = make_prescription(status="APPROVED", prescription_date=utcnow() - timedelta(days=170))
        response = client.get(f"/api/prescriptions/{prescription.id}", headers=customer_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["derived_status"] == "EXPIRING"
        assert data["is_reorderable"] is True
        assert data["days_left"] in (9, 10, 11)
        assert data["expires_at"] is not None


class TestReorderEndpoint:
    """Test reorder requests."""

    def test_reorder_active(self, client, customer_headers, make_prescription, sample_items):
        prescription = make_prescription(
            status="APPROVED",
            prescription_date=utcnow() - timedelta(days=10),
            items=sample_items
        )

        response = client.post(f"/api/prescriptions/{prescription.id}/reorder", headers=customer_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["prescription_id"] == prescription.id
        assert [i["product_id"] for i in data["items"]] == ["prod-napa-500", "prod-seclo-20"]
        assert data["message"] == "2 medicine(s) ready to add to your cart"

    def test_reorder_expired(self, client, customer_headers, make_prescription, sample_items):
        prescription = make_prescription(
            status="APPROVED",
            prescription_date=utcnow() - timedelta(days=200),
            items=sample_items
        )

        response = client.post(f"/api/prescriptions/{prescription.id}/reorder", headers=customer_headers)
        assert response.status_code == 403
        data = response.json()
        assert data["code"] == "EXPIRED"
        assert data["prescription_id"] == prescription.id

    def test_reorder_pending(self, client, customer_headers, make_prescription):
        prescription = make_prescription()

        response = client.post(f"/api/prescriptions/{prescription.id}/reorder", headers=customer_headers)
        assert response.status_code == 403
        assert response.json()["code"] == "NOT_APPROVED"

    def test_reorder_without_medicines(self, client, customer_headers, make_prescription):
        prescription = make_prescription(status="APPROVED", prescription_date=utcnow() - timedelta(days=10))

        response = client.post(f"/api/prescriptions/{prescription.id}/reorder", headers=customer_headers)
        assert response.status_code == 200
        assert response.json()["items"] == []
        assert response.json()["message"] == "No medicines are listed on this prescription"


class TestReminderEndpoint:
    """Test reminder requests."""

    def test_schedule_with_default_lead_time(self, client, db, customer_headers, make_prescription):
        prescription = make_prescription(status="APPROVED", prescription_date=utcnow() - timedelta(days=10))

        response = client.post(
            f"/api/prescriptions/{prescription.id}/reminder",
            json={},
            headers=customer_headers
        )
        assert response.status_code == 200
        data = response.json()
        assert data["channel"] == "email"
        assert data["prescription_id"] == prescription.id

        reminder = db.query(PrescriptionReminder).filter(PrescriptionReminder.id == data["reminder_id"]).first()
        assert reminder.notify_before_days == 3

    def test_window_too_large(self, client, customer_headers, make_prescription):
        prescription = make_prescription(status="APPROVED", prescription_date=utcnow() - timedelta(days=170))

        response = client.post(
            f"/api/prescriptions/{prescription.id}/reminder",
            json={"notify_before_days": 20},
            headers=customer_headers
        )
        assert response.status_code == 422
        assert response.json()["code"] == "INVALID_WINDOW"

    def test_pending_not_eligible(self, client, customer_headers, make_prescription):
        prescription = make_prescription()

        response = client.post(
            f"/api/prescriptions/{prescription.id}/reminder",
            json={"notify_before_days": 3, "channel": "sms"},
            headers=customer_headers
        )
        assert response.status_code == 409
        assert response.json()["code"] == "NOT_ELIGIBLE"


class TestAdminEndpoints:
    """Test admin review endpoints."""

    def test_list_pending_oldest_first(self, client, admin_headers, make_prescription):
        now = utcnow()
        newer = make_prescription(created_at=now - timedelta(hours=1))
        older = make_prescription(created_at=now - timedelta(hours=5))
        make_prescription(status="APPROVED")

        response = client.get("/api/admin/prescriptions", headers=admin_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["page"] == 1
        assert data["total_pages"] == 1
        assert [p["id"] for p in data["prescriptions"]] == [older.id, newer.id]

    def test_list_all_paginated(self, client, admin_headers, make_prescription):
        for status in ["PENDING", "APPROVED", "REJECTED"]:
            make_prescription(status=status)

        response = client.get("/api/admin/prescriptions?status=ALL&limit=2&page=2", headers=admin_headers)
        data = response.json()
        assert data["total"] == 3
        assert data["total_pages"] == 2
        assert len(data["prescriptions"]) == 1

    def test_list_matches_status_case_insensitively(self, client, admin_headers, make_prescription):
        prescription = make_prescription(status="pending")

        data = client.get("/api/admin/prescriptions", headers=admin_headers).json()
        assert [p["id"] for p in data["prescriptions"]] == [prescription.id]
        assert data["prescriptions"][0]["derived_status"] == "PENDING"

    def test_list_rejects_unknown_status(self, client, admin_headers):
        response = client.get("/api/admin/prescriptions?status=EXPIRED", headers=admin_headers)
        assert response.status_code == 422

    def test_review_reject_then_again(self, client, admin_headers, make_prescription):
        prescription = make_prescription()
        url = f"/api/admin/prescriptions/{prescription.id}/review"

        response = client.post(url, json={"decision": "REJECT", "notes": "invalid image"}, headers=admin_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["audit_logged"] is True
        assert data["warning"] is None
        assert data["prescription"]["status"] == "REJECTED"
        assert data["prescription"]["derived_status"] == "REJECTED"
        assert data["prescription"]["admin_notes"] == "invalid image"
        assert data["prescription"]["reviewed_by"] == "pharmacist@example.com"

        response = client.post(url, json={"decision": "APPROVE"}, headers=admin_headers)
        assert response.status_code == 409
        assert response.json()["code"] == "ALREADY_FINAL"

        events = client.get(f"/api/admin/prescriptions/{prescription.id}/audit", headers=admin_headers).json()
        assert events["total"] == 1
        assert events["events"][0]["details"]["new_status"] == "REJECTED"

    def test_review_approve_makes_reorderable(self, client, admin_headers, make_prescription):
        prescription = make_prescription(prescription_date=utcnow() - timedelta(days=1))

        response = client.post(
            f"/api/admin/prescriptions/{prescription.id}/review",
            json={"decision": "APPROVE"},
            headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["prescription"]["derived_status"] == "ACTIVE"
        assert response.json()["prescription"]["is_reorderable"] is True

    def test_reject_without_notes(self, client, admin_headers, make_prescription):
        prescription = make_prescription()

        response = client.post(
            f"/api/admin/prescriptions/{prescription.id}/review",
            json={"decision": "REJECT"},
            headers=admin_headers
        )
        assert response.status_code == 422

    def test_review_missing_date(self, client, admin_headers, make_prescription):
        prescription = make_prescription(prescription_date=None)

        response = client.post(
            f"/api/admin/prescriptions/{prescription.id}/review",
            json={"decision": "APPROVE"},
            headers=admin_headers
        )
        assert response.status_code == 422
        assert response.json()["code"] == "MISSING_PRESCRIPTION_DATE"

    def test_review_not_found(self, client, admin_headers):
        response = client.post(
            "/api/admin/prescriptions/does-not-exist/review",
            json={"decision": "APPROVE"},
            headers=admin_headers
        )
        assert response.status_code == 404

    def test_audit_not_found(self, client, admin_headers):
        response = client.get("/api/admin/prescriptions/does-not-exist/audit", headers=admin_headers)
        assert response.status_code == 404


class TestAdminConfigEndpoints:
    """Test runtime configuration endpoints."""

    def test_list_configs(self, client, admin_headers):
        response = client.get("/api/admin/config", headers=admin_headers)
        assert response.status_code == 200
        data = response.json()
        keys = {c["key"] for c in data["configs"]}
        assert {"AUDIT_LOG_ENABLED", "REMINDER_DEFAULT_CHANNEL", "DEFAULT_NOTIFY_BEFORE_DAYS", "ADMIN_PAGE_SIZE"} <= keys
        assert data["categories"] == ["admin", "compliance", "reminders"]

    def test_customer_cannot_change_config(self, client, customer_headers):
        response = client.put(
            "/api/admin/config/AUDIT_LOG_ENABLED",
            json={"value": "false"},
            headers=customer_headers
        )
        assert response.status_code == 403

    def test_update_default_lead_time_used_by_reminders(self, client, db, admin_headers, customer_headers, make_prescription):
        response = client.put(
            "/api/admin/config/DEFAULT_NOTIFY_BEFORE_DAYS",
            json={"value": "7"},
            headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["value"] == 7

        prescription = make_prescription(status="APPROVED", prescription_date=utcnow() - timedelta(days=10))
        data = client.post(
            f"/api/prescriptions/{prescription.id}/reminder",
            json={},
            headers=customer_headers
        ).json()

        reminder = db.query(PrescriptionReminder).filter(PrescriptionReminder.id == data["reminder_id"]).first()
        assert reminder.notify_before_days == 7

        item = client.get("/api/admin/config/DEFAULT_NOTIFY_BEFORE_DAYS", headers=admin_headers).json()
        assert item == {"key": "DEFAULT_NOTIFY_BEFORE_DAYS", "value": 7}

    def test_update_records_admin(self, client, admin_headers):
        client.put("/api/admin/config/REMINDER_DEFAULT_CHANNEL", json={"value": "sms"}, headers=admin_headers)

        configs = client.get("/api/admin/config?category=reminders", headers=admin_headers).json()["configs"]
        channel = next(c for c in configs if c["key"] == "REMINDER_DEFAULT_CHANNEL")
        assert channel["value"] == "sms"
        assert channel["source"] == "database"
        assert channel["updated_by"] == "pharmacist@example.com"

    @pytest.mark.parametrize("key,value", [
        ("ADMIN_PAGE_SIZE", "0"),
        ("ADMIN_PAGE_SIZE", "ten"),
        ("AUDIT_LOG_ENABLED", "maybe"),
        ("REMINDER_DEFAULT_CHANNEL", "pigeon"),
    ])
    def test_invalid_values_rejected(self, client, admin_headers, key, value):
        response = client.put(f"/api/admin/config/{key}", json={"value": value}, headers=admin_headers)
        assert response.status_code == 422

    def test_unknown_key(self, client, admin_headers):
        response = client.put("/api/admin/config/NO_SUCH_KEY", json={"value": "1"}, headers=admin_headers)
        assert response.status_code == 404
