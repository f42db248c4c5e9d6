"""
API tests for seat booking, including the gender-privacy seating flow
"""

from datetime import date, timedelta

import pytest

from conftest import API, seat_payload

BOOKINGS = f'{API}/bookings/'


def _booking_body(bus, route, journey_date, *seats):
    return {
        'bus_id': bus.id,
        'route_id': route.id,
        'journey_date': journey_date.isoformat(),
        'seats': list(seats),
        'boarding_point': 'Majestic',
        'dropping_point': 'Koyambedu',
    }


def _seat_map(client, bus, route, journey_date):
    response = client.get(
        f'{API}/buses/{bus.id}/seats',
        params={'route_id': route.id, 'journey_date': journey_date.isoformat()},
    )
    assert response.status_code == 200, response.text
    return response.json()


@pytest.mark.integration
class TestGenderPrivacySeating:
    def test_neighbour_restriction_end_to_end(
        self, client, traveller_headers, another_traveller_headers, bus, route, journey_date
    ):
        # Seater bus with 40 seats; seat 3 is booked by a man asking for privacy
        seat_map = _seat_map(client, bus, route, journey_date)
        assert seat_map['total_seats'] == 40
        assert seat_map['available_seats'] == 40

        response = client.post(
            BOOKINGS,
            json=_booking_body(bus, route, journey_date, seat_payload('3', 'Male', preference=True)),
            headers=traveller_headers,
        )
        assert response.status_code == 201, response.text

        # Seat 4 is now reserved for male passengers
        seats = {seat['seat_number']: seat for seat in _seat_map(client, bus, route, journey_date)['seats']}
        assert seats['3']['is_booked'] is True
        assert seats['3']['booked_by_gender'] == 'Male'
        assert seats['4']['is_booked'] is False
        assert seats['4']['gender_restriction'] == 'Male'
        assert seats['4']['restricted_by'] == '3'
        assert seats['4']['adjacent_booked_seats'] == [
            {'seat_number': '3', 'gender': 'Male', 'has_gender_preference': True}
        ]
        assert seats['5']['gender_restriction'] == 'Any'

        # A female passenger cannot take seat 4
        response = client.post(
            BOOKINGS,
            json=_booking_body(bus, route, journey_date, seat_payload('4', 'Female')),
            headers=another_traveller_headers,
        )
        assert response.status_code == 400
        detail = response.json()['detail']
        assert detail['seat_number'] == '4'
        assert detail['restricted_by'] == '3'
        assert detail['restricted_gender'] == 'Male'
        assert 'Seat 4 is restricted' in detail['message']

        # A male passenger can
        response = client.post(
            BOOKINGS,
            json=_booking_body(bus, route, journey_date, seat_payload('4', 'Male')),
            headers=another_traveller_headers,
        )
        assert response.status_code == 201, response.text
        assert response.json()['seats'][0]['seat_number'] == '4'

        assert _seat_map(client, bus, route, journey_date)['available_seats'] == 38


@pytest.mark.integration
class TestBookingAPI:
    def test_booking_requires_login(self, client, bus, route, journey_date):
        response = client.post(BOOKINGS, json=_booking_body(bus, route, journey_date, seat_payload('1')))
        assert response.status_code == 401

    def test_create_booking(self, client, traveller, traveller_headers, bus, route, journey_date):
        response = client.post(
            BOOKINGS,
            json=_booking_body(bus, route, journey_date, seat_payload('1'), seat_payload('2', 'Female')),
            headers=traveller_headers,
        )

        assert response.status_code == 201, response.text
        data = response.json()
        assert data['user_id'] == traveller.id
        assert data['booking_status'] == 'pending'
        assert float(data['total_amount']) == 1600.0
        assert data['bus']['bus_number'] == 'KA01AB1234'
        assert data['route']['source'] == 'Bangalore'

    def test_double_booking_is_rejected(
        self, client, traveller_headers, another_traveller_headers, bus, route, journey_date
    ):
        body = _booking_body(bus, route, journey_date, seat_payload('10'))
        assert client.post(BOOKINGS, json=body, headers=traveller_headers).status_code == 201

        response = client.post(BOOKINGS, json=body, headers=another_traveller_headers)

        assert response.status_code == 400
        assert response.json()['detail'] == 'Seats 10 are already booked'

    @pytest.mark.parametrize(
        'seats,message',
        [
            ([], 'At least one seat is required'),
            ([seat_payload('1'), seat_payload('1')], 'same seat'),
            ([seat_payload(str(n)) for n in range(1, 12)], 'Maximum 10 seats'),
        ],
    )
    def test_seat_list_validation(self, client, traveller_headers, bus, route, journey_date, seats, message):
        response = client.post(
            BOOKINGS, json=_booking_body(bus, route, journey_date, *seats), headers=traveller_headers
        )
        assert response.status_code == 422
        assert message in response.text

    def test_unknown_bus_is_not_found(self, client, traveller_headers, route, journey_date):
        body = {
            'bus_id': 4242,
            'route_id': route.id,
            'journey_date': journey_date.isoformat(),
            'seats': [seat_payload('1')],
        }
        response = client.post(BOOKINGS, json=body, headers=traveller_headers)
        assert response.status_code == 404

    def test_my_bookings_and_access(
        self, client, traveller_headers, another_traveller_headers, admin_headers, bus, route, journey_date
    ):
        created = client.post(
            BOOKINGS, json=_booking_body(bus, route, journey_date, seat_payload('1')), headers=traveller_headers
        ).json()

        mine = client.get(f'{BOOKINGS}me', headers=traveller_headers).json()
        assert [b['id'] for b in mine] == [created['id']]
        assert client.get(f'{BOOKINGS}me', headers=another_traveller_headers).json() == []

        assert client.get(f"{BOOKINGS}{created['id']}", headers=traveller_headers).status_code == 200
        assert client.get(f"{BOOKINGS}{created['id']}", headers=another_traveller_headers).status_code == 403
        assert client.get(f"{BOOKINGS}{created['id']}", headers=admin_headers).status_code == 200
        assert client.get(f'{BOOKINGS}9999', headers=traveller_headers).status_code == 404

    def test_payment_refund_preview_and_cancel(self, client, traveller_headers, bus, route):
        journey_date = date.today() + timedelta(days=5)
        created = client.post(
            BOOKINGS, json=_booking_body(bus, route, journey_date, seat_payload('1')), headers=traveller_headers
        ).json()
        booking_url = f"{BOOKINGS}{created['id']}"

        paid = client.post(
            f'{booking_url}/payment', json={'payment_method': 'upi'}, headers=traveller_headers
        )
        assert paid.status_code == 200
        assert paid.json()['payment_status'] == 'completed'

        preview = client.get(f'{booking_url}/refund', headers=traveller_headers).json()
        assert preview['refund_percentage'] == 90
        assert float(preview['refund_amount']) == 720.0

        cancelled = client.put(f'{booking_url}/cancel', json={'reason': 'Trip postponed'}, headers=traveller_headers)
        assert cancelled.status_code == 200, cancelled.text
        result = cancelled.json()
        assert result['booking']['booking_status'] == 'cancelled'
        assert result['refund']['status'] == 'pending'
        assert float(result['refund']['refund_amount']) == 720.0

        again = client.put(f'{booking_url}/cancel', json={}, headers=traveller_headers)
        assert again.status_code == 400

    def test_ticket_has_qr_code(self, client, traveller_headers, bus, route, journey_date):
        created = client.post(
            BOOKINGS,
            json=_booking_body(bus, route, journey_date, seat_payload('1', name='Asha'), seat_payload('2')),
            headers=traveller_headers,
        ).json()

        response = client.get(f"{BOOKINGS}{created['id']}/ticket", headers=traveller_headers)

        assert response.status_code == 200
        ticket = response.json()
        assert ticket['booking_reference'] == created['booking_reference']
        assert ticket['seat_numbers'] == ['1', '2']
        assert 'Asha' in ticket['passenger_names']
        assert ticket['qr_code_image'].startswith('data:image/png;base64,')
