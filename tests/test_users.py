from database.db import db
from flows import feedback
from models import Booking, Payment, PaymentService, Rating, Review, Service, User
from conftest import CARD_NUMBER, auth_header


def settle(client, customer, booking):
    return client.post('/api/payments/process', headers=auth_header(customer), json={
        "paymentMethod": "bank",
        "paymentProvider": "City Bank",
        "cardNumber": CARD_NUMBER,
        "amount": booking.total_amount,
        "requiredAmount": booking.total_amount,
        "services": [{"serviceId": booking.service_id, "bookingId": booking.id}],
    })


def test_list_users_admin_only(client, make_user):
    admin = make_user("admin")
    make_user()
    make_user("vendor")

    assert client.get('/api/users', headers=auth_header(make_user())).status_code == 403

    res = client.get('/api/users', headers=auth_header(admin))
    assert res.status_code == 200
    assert len(res.get_json()) == 4

    vendors = client.get('/api/users?role=vendor', headers=auth_header(admin)).get_json()
    assert [u["role"] for u in vendors] == ["vendor"]


def test_delete_vendor_removes_everything_that_references_them(client, make_user, make_service, make_booking):
    admin = make_user("admin")
    vendor = make_user("vendor")
    customer = make_user()
    first = make_service(vendor)
    second = make_service(vendor, category="Music")
    make_booking(customer, first)
    paid = make_booking(customer, second)
    make_booking(make_user(), first)
    assert settle(client, customer, paid).get_json()["success"] is True
    feedback.submit_review(customer.id, first.id, vendor.id, "Nice")
    feedback.submit_rating(customer.id, first.id, vendor.id, 5)

    # unrelated data that must survive
    other_vendor = make_user("vendor")
    kept_service = make_service(other_vendor)
    make_booking(customer, kept_service)

    res = client.delete(f'/api/users/{vendor.id}', headers=auth_header(admin))
    assert res.status_code == 200
    body = res.get_json()
    assert body["msg"] == "User deleted successfully"
    assert body["deleted"] == {"payments": 1, "bookings": 3, "reviews": 1, "ratings": 1, "services": 2}

    assert db.session.get(User, vendor.id) is None
    assert Service.query.filter_by(vendor_id=vendor.id).count() == 0
    assert Booking.query.filter_by(vendor_id=vendor.id).count() == 0
    assert Review.query.count() == 0
    assert Rating.query.count() == 0
    assert Payment.query.count() == 0
    assert PaymentService.query.count() == 0
    assert Service.query.count() == 1
    assert Booking.query.count() == 1


def test_delete_customer_removes_their_data_only(client, make_user, make_service, make_booking):
    admin = make_user("admin")
    vendor = make_user("vendor")
    customer = make_user()
    bystander = make_user()
    service = make_service(vendor)
    paid = make_booking(customer, service)
    settle(client, customer, paid)
    make_booking(bystander, service)
    feedback.submit_review(customer.id, service.id, vendor.id, "Great")
    feedback.submit_rating(customer.id, service.id, vendor.id, 4)
    feedback.submit_rating(bystander.id, service.id, vendor.id, 2)

    res = client.delete(f'/api/users/{customer.id}', headers=auth_header(admin))
    assert res.status_code == 200
    assert res.get_json()["deleted"] == {"payments": 1, "bookings": 1, "reviews": 1, "ratings": 1}

    assert db.session.get(User, customer.id) is None
    assert db.session.get(Service, service.id) is not None
    assert [b.customer_id for b in Booking.query.all()] == [bystander.id]
    assert [r.customer_id for r in Rating.query.all()] == [bystander.id]
    assert Payment.query.count() == 0


def test_admin_accounts_cannot_be_deleted(client, make_user):
    admin = make_user("admin")
    other_admin = make_user("admin")
    res = client.delete(f'/api/users/{other_admin.id}', headers=auth_header(admin))
    assert res.status_code == 400
    assert res.get_json() == {"msg": "Cannot delete admin accounts"}
    assert db.session.get(User, other_admin.id) is not None


def test_delete_unknown_user(client, make_user):
    res = client.delete('/api/users/999', headers=auth_header(make_user("admin")))
    assert res.status_code == 404
    assert res.get_json() == {"msg": "User not found"}


def test_delete_requires_admin(client, make_user):
    vendor = make_user("vendor")
    res = client.delete(f'/api/users/{vendor.id}', headers=auth_header(vendor))
    assert res.status_code == 403
    assert db.session.get(User, vendor.id) is not None


def test_cleanup_orphaned(client, make_user, make_service, make_booking):
    admin = make_user("admin")
    vendor = make_user("vendor")
    customer = make_user()
    kept = make_service(make_user("vendor"))
    orphaned = make_service(vendor)
    make_booking(customer, orphaned)
    make_booking(customer, kept)
    feedback.submit_rating(customer.id, orphaned.id, vendor.id, 5)
    feedback.submit_review(customer.id, orphaned.id, vendor.id, "Fine")

    # remove the vendor row alone, leaving its rows behind
    db.session.delete(db.session.get(User, vendor.id))
    db.session.commit()

    res = client.post('/api/users/cleanup-orphaned', headers=auth_header(admin))
    assert res.status_code == 200
    assert res.get_json()["deleted"] == {"services": 1, "bookings": 1, "reviews": 1, "ratings": 1}
    assert [s.id for s in Service.query.all()] == [kept.id]
    assert Booking.query.count() == 1

    again = client.post('/api/users/cleanup-orphaned', headers=auth_header(admin))
    assert again.get_json()["deleted"] == {"services": 0, "bookings": 0, "reviews": 0, "ratings": 0}
