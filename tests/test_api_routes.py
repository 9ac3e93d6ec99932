"""
Test JSON API routes and error mapping.
"""

import pytest


def _booking_payload(**overrides):
    payload = {
        'name': 'Ravi Kumar',
        'mobile': '9876543210',
        'aadhar': '123412341234',
        'date_of_booking': '2025-06-01',
        'room_type': 'NON AC',
        'number_of_rooms': 1,
        'advance_amount': 500,
        'payment_mode': 'cash',
        'rooms': [{'room_id': 1, 'price': 1500, 'persons': 2}],
    }
    payload.update(overrides)
    return payload


def _house_payload(**overrides):
    payload = {
        'guest_name': 'Anita Shah',
        'phone_number': '9123456780',
        'id_number': 'ID-4455',
        'number_of_guests': 2,
        'stay_type': 'days',
        'days_of_stay': 3,
        'rent': 3000,
        'initial_payment': 1000,
        'payment_mode': 'cash',
    }
    payload.update(overrides)
    return payload


class TestRoomRoutes:
    """Test room and availability endpoints."""

    def test_list_rooms(self, client):
        response = client.get('/api/rooms')
        assert response.status_code == 200
        assert len(response.get_json()['data']['rooms']) == 10

    def test_create_room(self, client):
        response = client.post('/api/rooms', json={
            'room_number': 301, 'floor': '3', 'room_type': 'AC'
        })
        assert response.status_code == 201
        assert response.get_json()['data']['room']['room_number'] == 301

    def test_create_room_invalid(self, client):
        response = client.post('/api/rooms', json={'room_number': 'x', 'room_type': 'AC'})
        assert response.status_code == 400
        assert response.get_json()['success'] is False

    def test_create_room_requires_body(self, client):
        response = client.post('/api/rooms')
        assert response.status_code == 400

    def test_update_status(self, client):
        response = client.put('/api/rooms/1/status', json={'status': 'maintenance'})
        assert response.status_code == 200
        assert response.get_json()['data']['room']['status'] == 'maintenance'

    def test_update_status_unknown_room(self, client):
        response = client.put('/api/rooms/999/status', json={'status': 'cleaning'})
        assert response.status_code == 404

    def test_available_rooms(self, client):
        response = client.get('/api/rooms/available?date=2025-06-01&room_type=NON%20AC')
        data = response.get_json()
        assert response.status_code == 200
        assert [r['room_number'] for r in data['data']['rooms']] == [101, 102, 103, 201, 202]
        assert 'message' not in data

    def test_no_rooms_available_message(self, client):
        response = client.get('/api/rooms/available?date=2025-06-01&room_type=Suite')
        data = response.get_json()
        assert response.status_code == 200
        assert data['data']['rooms'] == []
        assert data['message'] == 'No rooms available for the selected date and type'

    def test_available_bad_date(self, client):
        response = client.get('/api/rooms/available?date=01-06-2025')
        assert response.status_code == 400


class TestAdvanceBookingRoutes:
    """Test advance booking endpoints."""

    def test_create_and_fetch(self, client):
        response = client.post('/api/advance-bookings', json=_booking_payload())
        data = response.get_json()

        assert response.status_code == 201
        assert data['booking_id'] == data['data']['booking']['id']
        assert data['data']['booking']['status'] == 'active'

        detail = client.get(f"/api/advance-bookings/{data['booking_id']}")
        assert detail.status_code == 200
        assert detail.get_json()['data']['booking']['payments'][0]['type'] == 'advance'

    def test_room_no_longer_available(self, client):
        client.post('/api/advance-bookings', json=_booking_payload())
        response = client.post('/api/advance-bookings', json=_booking_payload(name='Other'))
        assert response.status_code == 409

    def test_validation_error(self, client):
        response = client.post('/api/advance-bookings', json=_booking_payload(mobile=''))
        assert response.status_code == 400
        assert 'mobile' in response.get_json()['error']

    def test_cancel_with_refund(self, client):
        booking_id = client.post('/api/advance-bookings', json=_booking_payload()).get_json()['booking_id']

        response = client.post(f'/api/advance-bookings/{booking_id}/cancel', json={'refund_amount': 200})
        assert response.status_code == 200
        booking = response.get_json()['data']['booking']
        assert booking['status'] == 'cancelled'
        assert booking['payments'][-1]['amount'] == -200

        again = client.post(f'/api/advance-bookings/{booking_id}/cancel', json={'refund_amount': 0})
        assert again.status_code == 409

    def test_cancel_refund_too_large(self, client):
        booking_id = client.post('/api/advance-bookings', json=_booking_payload()).get_json()['booking_id']
        response = client.post(f'/api/advance-bookings/{booking_id}/cancel', json={'refund_amount': 600})
        assert response.status_code == 400

    def test_complete(self, client):
        booking_id = client.post('/api/advance-bookings', json=_booking_payload()).get_json()['booking_id']
        response = client.post(f'/api/advance-bookings/{booking_id}/complete')
        assert response.get_json()['data']['booking']['status'] == 'completed'

    def test_list_with_search(self, client):
        client.post('/api/advance-bookings', json=_booking_payload())
        response = client.get('/api/advance-bookings?search=ravi')
        data = response.get_json()['data']
        assert data['total'] == 1
        assert data['items'][0]['name'] == 'Ravi Kumar'

    def test_unknown_booking(self, client):
        assert client.get('/api/advance-bookings/999').status_code == 404
        assert client.post('/api/advance-bookings/999/cancel', json={'refund_amount': 0}).status_code == 404


class TestCheckinRoutes:
    """Test room check-in endpoints."""

    def test_check_in_pay_and_checkout(self, client):
        response = client.post('/api/checkins', json={
            'room_id': 4, 'guest_name': 'Anita Shah', 'phone_number': '9123456780',
            'id_number': 'ID-1', 'days_of_stay': 2, 'rent': 2000,
            'initial_payment': 500, 'payment_mode': 'gpay'
        })
        assert response.status_code == 201
        checkin_id = response.get_json()['data']['checkin']['id']

        assert len(client.get('/api/checkins').get_json()['data']['checkins']) == 1

        paid = client.post(f'/api/checkins/{checkin_id}/payments', json={'amount': 1500, 'mode': 'cash'})
        assert paid.status_code == 201
        assert len(paid.get_json()['data']['checkin']['payments']) == 2

        out = client.post(f'/api/checkins/{checkin_id}/checkout')
        assert out.status_code == 200
        assert out.get_json()['data']['checkin']['is_checked_out'] == 1

    def test_unknown_checkin(self, client):
        assert client.get('/api/checkins/999').status_code == 404


class TestHouseRoutes:
    """Test house rental endpoints."""

    def test_houses_list(self, client):
        response = client.get('/api/houses')
        assert len(response.get_json()['data']['houses']) == 4

    def test_full_stay(self, client):
        response = client.post('/api/houses/guest-house/check-in', json=_house_payload())
        assert response.status_code == 201
        booking = response.get_json()['data']['booking']
        booking_id = booking['id']

        fee = client.post(f'/api/house-bookings/{booking_id}/extra-fees', json={
            'description': 'Electricity', 'amount': 500, 'version': booking['version']
        })
        assert fee.status_code == 200
        booking = fee.get_json()['data']['booking']
        assert (booking['rent'], booking['pending_amount']) == (3500, 2500)

        extended = client.post(f'/api/house-bookings/{booking_id}/extend', json={
            'additional_days': 5, 'rent_for_days': 1200, 'version': booking['version']
        })
        booking = extended.get_json()['data']['booking']
        assert (booking['rent'], booking['pending_amount']) == (4700, 3700)

        paid = client.post(f'/api/house-bookings/{booking_id}/payments', json={
            'amount': 3700, 'mode': 'gpay'
        })
        assert paid.get_json()['data']['booking']['pending_amount'] == 0

        out = client.post(f'/api/house-bookings/{booking_id}/checkout')
        assert out.get_json()['data']['booking']['is_checked_out'] == 1

    def test_stale_version_is_409(self, client):
        booking_id = client.post(
            '/api/houses/guest-house/check-in', json=_house_payload()
        ).get_json()['data']['booking']['id']

        client.post(f'/api/house-bookings/{booking_id}/extra-fees',
                    json={'description': 'Cleaning', 'amount': 100, 'version': 1})
        response = client.post(f'/api/house-bookings/{booking_id}/extend',
                               json={'additional_days': 1, 'rent_for_days': 500, 'version': 1})
        assert response.status_code == 409

    def test_house_already_booked(self, client):
        client.post('/api/houses/guest-house/check-in', json=_house_payload())
        response = client.post('/api/houses/guest-house/check-in', json=_house_payload())
        assert response.status_code == 409

    def test_unknown_house(self, client):
        response = client.post('/api/houses/treehouse/check-in', json=_house_payload())
        assert response.status_code == 404


class TestPaymentRoutes:
    """Test payment log endpoints."""

    def test_payment_log_with_totals(self, client):
        client.post('/api/advance-bookings', json=_booking_payload())
        client.post('/api/houses/guest-house/check-in', json=_house_payload(payment_mode='gpay'))

        response = client.get('/api/payments')
        data = response.get_json()['data']
        assert response.status_code == 200
        assert len(data['payments']) == 2
        assert data['totals'] == {'cash_total': 500, 'gpay_total': 1000, 'count': 2}

        filtered = client.get('/api/payments?type=advance').get_json()['data']
        assert [p['type'] for p in filtered['payments']] == ['advance']

    def test_invalid_sort(self, client):
        assert client.get('/api/payments?sort=mode').status_code == 400

    def test_export(self, client):
        client.post('/api/advance-bookings', json=_booking_payload())
        response = client.get('/api/payments/export')

        assert response.status_code == 200
        assert response.mimetype == 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        assert 'payments_' in response.headers['Content-Disposition']


class TestDashboardRoute:
    """Test dashboard endpoint."""

    def test_dashboard(self, client):
        response = client.get('/api/dashboard')
        data = response.get_json()['data']
        assert response.status_code == 200
        assert data['rooms']['total'] == 10
        assert len(data['daily_revenue']) == 7
        assert 'today_cash' in data['payments']


class TestRequestBodies:
    """Bodies that are valid JSON but not objects are rejected with 400."""

    @pytest.mark.parametrize('url', [
        '/api/rooms',
        '/api/checkins',
        '/api/advance-bookings',
        '/api/houses/guest-house/check-in',
    ])
    def test_create_routes_reject_list_body(self, client, url):
        response = client.post(url, json=[1, 2])
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Request body required'

    def test_mutation_routes_reject_list_body(self, client):
        booking_id = client.post(
            '/api/advance-bookings', json=_booking_payload()
        ).get_json()['booking_id']
        house_booking_id = client.post(
            '/api/houses/guest-house/check-in', json=_house_payload()
        ).get_json()['data']['booking']['id']
        checkin_id = client.post('/api/checkins', json={
            'room_id': 4, 'guest_name': 'Anita Shah', 'phone_number': '9123456780',
            'id_number': 'ID-1', 'days_of_stay': 2, 'rent': 2000,
            'initial_payment': 500, 'payment_mode': 'gpay'
        }).get_json()['data']['checkin']['id']

        urls = [
            ('put', '/api/rooms/1/status'),
            ('post', f'/api/advance-bookings/{booking_id}/cancel'),
            ('post', f'/api/checkins/{checkin_id}/payments'),
            ('post', f'/api/house-bookings/{house_booking_id}/extend'),
            ('post', f'/api/house-bookings/{house_booking_id}/extra-fees'),
            ('post', f'/api/house-bookings/{house_booking_id}/payments'),
            ('post', f'/api/house-bookings/{house_booking_id}/checkout'),
        ]
        for method, url in urls:
            response = getattr(client, method)(url, json=['x'])
            assert response.status_code == 400, url
            assert response.get_json()['error'] == 'Request body must be a JSON object'

    def test_rejected_body_writes_nothing(self, client):
        from database import get_db

        client.post('/api/advance-bookings', json=[1, 2])
        db = get_db()
        assert db.execute('SELECT COUNT(*) FROM advance_bookings').fetchone()[0] == 0
        assert db.execute('SELECT COUNT(*) FROM payments').fetchone()[0] == 0
