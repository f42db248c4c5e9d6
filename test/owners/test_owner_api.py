"""
API tests for the bus owner dashboard
"""

from decimal import Decimal

import pytest

from conftest import API, auth_headers, make_booking, make_bus, make_route, make_user
from src.bookings.ticket_service import TicketService

OWNERS = f'{API}/owners'


def _bus_body(bus_number='KA02XY1111', seat_type='Sleeper'):
    return {
        'name': 'Moonlight Express',
        'bus_number': bus_number,
        'bus_type': 'Volvo',
        'seat_type': seat_type,
        'operator': 'Sunrise Travels',
        'amenities': ['WiFi', 'Charging Point'],
        'days': ['Friday', 'Saturday', 'Sunday'],
    }


@pytest.fixture
def other_owner(db_session):
    return make_user(db_session, 'rival@travels.com', role='bus_owner', name='Rival Owner')


@pytest.mark.integration
class TestOwnerBuses:
    def test_add_bus_generates_seat_map(self, client, bus_owner, bus_owner_headers):
        response = client.post(f'{OWNERS}/buses', json=_bus_body(), headers=bus_owner_headers)

        assert response.status_code == 201, response.text
        data = response.json()
        assert data['owner_id'] == bus_owner.id
        assert data['seat_type'] == 'Sleeper'
        assert data['total_seats'] == 34

        layout = client.get(f"{API}/buses/{data['id']}/layout").json()
        assert layout['layout'] == '1x2'
        assert len(layout['seats']) == 34

    def test_unknown_seat_type(self, client, bus_owner_headers):
        response = client.post(
            f'{OWNERS}/buses', json=_bus_body(seat_type='Double-Decker'), headers=bus_owner_headers
        )

        assert response.status_code == 400
        assert response.json()['detail'] == 'Invalid seat type: Double-Decker'

    def test_duplicate_bus_number(self, client, bus, bus_owner_headers):
        response = client.post(
            f'{OWNERS}/buses', json=_bus_body(bus_number=bus.bus_number), headers=bus_owner_headers
        )
        assert response.status_code == 400

    def test_owner_sees_only_own_buses(self, client, db_session, bus, other_owner):
        make_bus(db_session, owner_id=other_owner.id, bus_number='KA09ZZ0009')

        response = client.get(f'{OWNERS}/buses', headers=auth_headers(other_owner))

        assert [b['bus_number'] for b in response.json()] == ['KA09ZZ0009']
        assert client.get(f'{OWNERS}/buses/{bus.id}', headers=auth_headers(other_owner)).status_code == 404

    def test_update_bus(self, client, bus, bus_owner_headers):
        response = client.put(
            f'{OWNERS}/buses/{bus.id}', json={'name': 'Night Rider Plus', 'amenities': ['TV']},
            headers=bus_owner_headers,
        )

        assert response.status_code == 200
        assert response.json()['name'] == 'Night Rider Plus'
        assert response.json()['amenities'] == ['TV']

    @pytest.mark.parametrize('body', [{'name': None}, {'bus_type': None}, {'days': None}, {'operator': ''}])
    def test_bus_fields_cannot_be_cleared(self, client, db_session, bus, bus_owner_headers, body):
        response = client.put(f'{OWNERS}/buses/{bus.id}', json=body, headers=bus_owner_headers)

        assert response.status_code == 422
        db_session.refresh(bus)
        assert bus.name == 'Night Rider'

    def test_cannot_delete_bus_with_upcoming_bookings(
        self, client, db_session, traveller, bus, route, journey_date, bus_owner_headers
    ):
        make_booking(db_session, traveller.id, bus, route, journey_date)

        response = client.delete(f'{OWNERS}/buses/{bus.id}', headers=bus_owner_headers)

        assert response.status_code == 400
        assert 'active bookings' in response.json()['detail']

    def test_delete_unused_bus(self, client, bus, bus_owner_headers):
        assert client.delete(f'{OWNERS}/buses/{bus.id}', headers=bus_owner_headers).status_code == 204
        assert client.get(f'{API}/buses/{bus.id}').status_code == 404


@pytest.mark.integration
class TestOwnerRoutes:
    def test_create_route_for_own_bus(self, client, bus, bus_owner_headers):
        response = client.post(f'{OWNERS}/routes', headers=bus_owner_headers, json={
            'bus_id': bus.id,
            'source': 'Bangalore',
            'destination': 'Hyderabad',
            'departure_time': '20:00',
            'arrival_time': '06:30',
            'price': '1100.00',
            'boarding_points': ['Hebbal'],
        })

        assert response.status_code == 201, response.text
        assert response.json()['destination'] == 'Hyderabad'

        routes = client.get(f'{OWNERS}/buses/{bus.id}/routes', headers=bus_owner_headers).json()
        assert [r['destination'] for r in routes] == ['Hyderabad']

    def test_cannot_add_route_to_another_owners_bus(self, client, bus, other_owner):
        response = client.post(f'{OWNERS}/routes', headers=auth_headers(other_owner), json={
            'bus_id': bus.id,
            'source': 'Bangalore',
            'destination': 'Mysore',
            'departure_time': '08:00',
            'arrival_time': '11:00',
            'price': '300.00',
        })
        assert response.status_code == 403

    def test_invalid_time_format(self, client, bus, bus_owner_headers):
        response = client.post(f'{OWNERS}/routes', headers=bus_owner_headers, json={
            'bus_id': bus.id,
            'source': 'Bangalore',
            'destination': 'Mysore',
            'departure_time': '8am',
            'arrival_time': '11:00',
            'price': '300.00',
        })
        assert response.status_code == 422

    def test_update_and_delete_route(self, client, route, bus_owner_headers):
        response = client.put(
            f'{OWNERS}/routes/{route.id}', json={'price': '850.00'}, headers=bus_owner_headers
        )
        assert Decimal(response.json()['price']) == Decimal('850.00')

        assert client.delete(f'{OWNERS}/routes/{route.id}', headers=bus_owner_headers).status_code == 204
        assert client.get(f'{OWNERS}/routes', headers=bus_owner_headers).json() == []

    @pytest.mark.parametrize('body', [
        {'source': None},
        {'price': None},
        {'departure_time': None},
        {'destination': ''},
    ])
    def test_required_route_fields_cannot_be_cleared(self, client, db_session, route, bus_owner_headers, body):
        response = client.put(f'{OWNERS}/routes/{route.id}', json=body, headers=bus_owner_headers)

        assert response.status_code == 422
        db_session.refresh(route)
        assert route.source == 'Bangalore'
        assert route.destination == 'Chennai'

    def test_optional_route_fields_can_be_cleared(self, client, route, bus_owner_headers):
        response = client.put(
            f'{OWNERS}/routes/{route.id}', json={'duration': None, 'distance': None}, headers=bus_owner_headers
        )

        assert response.status_code == 200
        assert response.json()['duration'] is None
        assert response.json()['distance'] is None


@pytest.mark.integration
class TestOwnerBookings:
    def test_verify_payment_confirms_booking(
        self, client, db_session, traveller, bus, route, journey_date, bus_owner_headers
    ):
        booking = make_booking(db_session, traveller.id, bus, route, journey_date)

        listed = client.get(f'{OWNERS}/bookings', headers=bus_owner_headers).json()
        assert [b['id'] for b in listed] == [booking.id]

        response = client.post(f'{OWNERS}/bookings/{booking.id}/verify-payment', headers=bus_owner_headers)

        assert response.status_code == 200
        assert response.json()['booking_status'] == 'confirmed'
        assert response.json()['payment_status'] == 'completed'

        again = client.post(f'{OWNERS}/bookings/{booking.id}/verify-payment', headers=bus_owner_headers)
        assert again.status_code == 400

    def test_other_owner_cannot_verify(self, client, db_session, traveller, bus, route, journey_date, other_owner):
        booking = make_booking(db_session, traveller.id, bus, route, journey_date)

        response = client.post(
            f'{OWNERS}/bookings/{booking.id}/verify-payment', headers=auth_headers(other_owner)
        )

        assert response.status_code == 403

    def test_statistics(self, client, db_session, traveller, bus, route, journey_date, bus_owner_headers):
        make_booking(db_session, traveller.id, bus, route, journey_date, seats=('1', '2'), booking_status='confirmed')
        make_booking(db_session, traveller.id, bus, route, journey_date, seats=('5',), booking_status='cancelled')

        data = client.get(f'{OWNERS}/statistics', headers=bus_owner_headers).json()

        assert data['total_buses'] == 1
        assert data['total_routes'] == 1
        assert data['total_bookings'] == 2
        assert data['confirmed_bookings'] == 1
        assert Decimal(data['total_revenue']) == Decimal('1600.00')

    def test_manifest_lists_confirmed_passengers(
        self, client, db_session, traveller, bus, route, journey_date, bus_owner_headers
    ):
        make_booking(db_session, traveller.id, bus, route, journey_date, seats=('7', '8'), booking_status='confirmed')
        make_booking(db_session, traveller.id, bus, route, journey_date, seats=('9',))

        response = client.get(
            f'{OWNERS}/manifest', headers=bus_owner_headers,
            params={'route_id': route.id, 'journey_date': journey_date.isoformat()},
        )

        assert response.status_code == 200
        entries = response.json()
        assert sorted(e['seat_number'] for e in entries) == ['7', '8']
        assert entries[0]['contact_email'] == traveller.email
        assert Decimal(entries[0]['fare']) == Decimal('800.00')

    def test_manifest_of_another_owners_route(self, client, route, journey_date, other_owner):
        response = client.get(
            f'{OWNERS}/manifest', headers=auth_headers(other_owner),
            params={'route_id': route.id, 'journey_date': journey_date.isoformat()},
        )
        assert response.status_code == 403


@pytest.mark.integration
class TestTicketScan:
    def _qr(self, booking):
        return TicketService().generate_eticket(booking).qr_code_data

    def test_confirmed_ticket_is_valid(self, client, db_session, traveller, bus, route, journey_date, bus_owner_headers):
        booking = make_booking(db_session, traveller.id, bus, route, journey_date, seats=('3', '4'),
                               booking_status='confirmed')

        response = client.post(
            f'{OWNERS}/tickets/scan', json={'qr_code_data': self._qr(booking)}, headers=bus_owner_headers
        )

        data = response.json()
        assert data['valid'] is True
        assert data['booking_reference'] == booking.booking_reference
        assert sorted(data['seat_numbers']) == ['3', '4']

    def test_pending_ticket_is_not_valid(self, client, db_session, traveller, bus, route, journey_date,
                                         bus_owner_headers):
        booking = make_booking(db_session, traveller.id, bus, route, journey_date)

        data = client.post(
            f'{OWNERS}/tickets/scan', json={'qr_code_data': self._qr(booking)}, headers=bus_owner_headers
        ).json()

        assert data['valid'] is False
        assert data['message'] == 'Booking is pending'

    def test_ticket_for_another_owners_bus(self, client, db_session, traveller, bus, route, journey_date,
                                           other_owner):
        booking = make_booking(db_session, traveller.id, bus, route, journey_date, booking_status='confirmed')

        data = client.post(
            f'{OWNERS}/tickets/scan', json={'qr_code_data': self._qr(booking)}, headers=auth_headers(other_owner)
        ).json()

        assert data['valid'] is False
        assert data['booking_reference'] is None

    def test_garbage_qr_code(self, client, bus_owner_headers):
        data = client.post(
            f'{OWNERS}/tickets/scan', json={'qr_code_data': 'not-a-ticket'}, headers=bus_owner_headers
        ).json()

        assert data == {
            'valid': False,
            'booking_reference': None,
            'seat_numbers': [],
            'booking_status': None,
            'message': 'QR code is not a valid ticket',
        }
