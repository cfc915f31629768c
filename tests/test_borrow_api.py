from sqlalchemy.exc import OperationalError

from lendify.models.borrow_record import BorrowRecord, STATUS_RETURNED
from lendify.models.item import Item
from lendify.repositories.borrow_record_repo import BorrowRecordRepo
from lendify.services.ledger_service import LedgerService


class TestBorrowEndpoint:
    def test_borrow_returns_record(self, client, student, make_item, headers):
        item = make_item(stock=2, name="Projector")

        response = client.post("/borrow/", json={"item_id": item.id}, headers=headers(student))

        assert response.status_code == 201
        data = response.get_json()["data"]
        assert data["item_id"] == item.id
        assert data["item_name"] == "Projector"
        assert data["user_id"] == student.id
        assert data["status"] == "Borrowed"
        assert item.stock == 1

    def test_out_of_stock_is_409(self, client, student, make_item, headers):
        item = make_item(stock=0)

        response = client.post("/borrow/", json={"item_id": item.id}, headers=headers(student))

        assert response.status_code == 409
        body = response.get_json()
        assert body["success"] is False
        assert body["item_id"] == item.id
        assert body["available"] == 0

    def test_unknown_item_is_404(self, client, student, headers):
        response = client.post("/borrow/", json={"item_id": 42}, headers=headers(student))
        assert response.status_code == 404
        assert response.get_json()["item_id"] == 42

    def test_item_id_required(self, client, student, headers):
        response = client.post("/borrow/", json={"item_id": "abc"}, headers=headers(student))
        assert response.status_code == 400

    def test_requires_token(self, client, make_item):
        item = make_item(stock=1)
        response = client.post("/borrow/", json={"item_id": item.id})
        assert response.status_code == 401

    def test_admin_borrows_for_student(self, client, admin, student, make_item, headers):
        item = make_item(stock=1)

        response = client.post(
            "/borrow/", json={"item_id": item.id, "user_id": student.id}, headers=headers(admin)
        )

        assert response.status_code == 201
        assert response.get_json()["data"]["user_id"] == student.id

    def test_student_cannot_borrow_for_others(self, client, student, make_user, make_item, headers):
        other = make_user()
        item = make_item(stock=1)

        response = client.post(
            "/borrow/", json={"item_id": item.id, "user_id": other.id}, headers=headers(student)
        )

        assert response.status_code == 403
        assert item.stock == 1


class TestReturnEndpoint:
    def test_return_then_return_again(self, client, student, make_item, headers):
        item = make_item(stock=1)
        record = LedgerService.borrow(student.id, item.id)

        first = client.put(f"/borrow/return/{record.id}", headers=headers(student))
        second = client.put(f"/borrow/return/{record.id}", headers=headers(student))

        assert first.status_code == 200
        assert first.get_json()["data"]["status"] == STATUS_RETURNED
        assert second.status_code == 404
        assert second.get_json()["record_id"] == record.id
        assert item.stock == 1

    def test_cannot_return_someone_elses_record(self, client, student, make_user, make_item, headers):
        owner = make_user()
        item = make_item(stock=1)
        record = LedgerService.borrow(owner.id, item.id)

        response = client.put(f"/borrow/return/{record.id}", headers=headers(student))

        assert response.status_code == 403
        assert item.stock == 0

    def test_admin_can_return_any_record(self, client, admin, student, make_item, headers):
        item = make_item(stock=1)
        record = LedgerService.borrow(student.id, item.id)

        response = client.put(f"/borrow/return/{record.id}", headers=headers(admin))

        assert response.status_code == 200
        assert item.stock == 1


class TestBatchEndpoints:
    def test_batch_borrow(self, client, student, make_item, headers):
        a = make_item(stock=4)
        b = make_item(stock=2)

        response = client.post("/borrow/batch", json={
            "items": [{"item_id": a.id, "quantity": 3}, {"item_id": b.id, "quantity": 2}],
            "usage_location": "Auditorium",
            "occasion": "Graduation",
        }, headers=headers(student))

        assert response.status_code == 201
        assert response.get_json()["created_count"] == 5
        assert a.stock == 1
        assert b.stock == 0

    def test_batch_borrow_insufficient_is_409_and_changes_nothing(self, client, student, make_item, headers):
        a = make_item(stock=4)
        b = make_item(stock=1)

        response = client.post("/borrow/batch", json={
            "items": [{"item_id": a.id, "quantity": 1}, {"item_id": b.id, "quantity": 2}],
            "usage_location": "Auditorium",
            "occasion": "Graduation",
        }, headers=headers(student))

        assert response.status_code == 409
        body = response.get_json()
        assert body["item_id"] == b.id
        assert body["requested"] == 2
        assert body["available"] == 1
        assert a.stock == 4
        assert BorrowRecord.query.count() == 0

    def test_batch_borrow_bad_quantity_is_400(self, client, student, make_item, headers):
        a = make_item(stock=4)
        response = client.post("/borrow/batch", json={
            "items": [{"item_id": a.id, "quantity": 0}],
            "usage_location": "Auditorium",
            "occasion": "Graduation",
        }, headers=headers(student))
        assert response.status_code == 400

    def test_batch_borrow_duplicate_entries_are_400(self, client, student, make_item, headers):
        a = make_item(stock=4)
        response = client.post("/borrow/batch", json={
            "items": [{"item_id": a.id, "quantity": 1}, {"item_id": a.id, "quantity": 1}],
            "usage_location": "Auditorium",
            "occasion": "Graduation",
        }, headers=headers(student))
        assert response.status_code == 400
        assert a.stock == 4

    def test_batch_return_with_invalid_ids(self, client, student, make_item, headers):
        item = make_item(stock=2)
        record = LedgerService.borrow(student.id, item.id)

        response = client.post(
            "/borrow/return/batch", json={"record_ids": [record.id, 9999]}, headers=headers(student)
        )

        assert response.status_code == 404
        assert response.get_json()["invalid_ids"] == [9999]
        assert item.stock == 1

    def test_batch_return(self, client, student, make_item, headers):
        item = make_item(stock=2)
        ids = [LedgerService.borrow(student.id, item.id).id for _ in range(2)]

        response = client.post("/borrow/return/batch", json={"record_ids": ids}, headers=headers(student))

        assert response.status_code == 200
        assert response.get_json()["returned_count"] == 2
        assert item.stock == 2


class TestListings:
    def test_my_records_only_mine(self, client, student, make_user, make_item, headers):
        other = make_user()
        item = make_item(stock=3)
        LedgerService.borrow(student.id, item.id)
        LedgerService.borrow(other.id, item.id)

        response = client.get("/borrow/my", headers=headers(student))

        data = response.get_json()["data"]
        assert len(data) == 1
        assert data[0]["user_id"] == student.id

    def test_all_records_admin_only(self, client, admin, student, make_item, headers):
        item = make_item(stock=3)
        LedgerService.borrow(student.id, item.id)

        assert client.get("/borrow/records", headers=headers(student)).status_code == 403

        response = client.get("/borrow/records", headers=headers(admin))
        assert response.status_code == 200
        data = response.get_json()["data"]
        assert len(data) == 1
        assert data[0]["user_name"] == student.name
        assert data[0]["item_name"] == item.name


class TestFailureEnvelope:
    def test_store_failure_is_500_and_writes_nothing(self, client, student, make_item, headers, monkeypatch):
        item = make_item(stock=1)

        def broken_add(record):
            raise OperationalError("INSERT INTO borrow_records", {}, Exception("database is locked"))

        monkeypatch.setattr(BorrowRecordRepo, "add", staticmethod(broken_add))

        response = client.post("/borrow/", json={"item_id": item.id}, headers=headers(student))

        assert response.status_code == 500
        body = response.get_json()
        assert body["success"] is False
        assert "database" in body["message"]
        assert item.stock == 1
        assert BorrowRecord.query.count() == 0

    def test_unexpected_error_keeps_json_envelope(self, app, client, student, make_item, headers, monkeypatch):
        app.config["PROPAGATE_EXCEPTIONS"] = False
        item = make_item(stock=1)

        def broken_delta(self, delta):
            raise ValueError("stock bookkeeping broke")

        monkeypatch.setattr(Item, "apply_stock_delta", broken_delta)

        response = client.post("/borrow/", json={"item_id": item.id}, headers=headers(student))

        assert response.status_code == 500
        assert response.get_json() == {"success": False, "message": "Internal server error"}
        assert BorrowRecord.query.count() == 0
