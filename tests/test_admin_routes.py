"""
Unit tests for admin routes and bearer-token authentication
"""
import pytest
from datetime import timedelta

from bizconnect.auction.errors import (
    SaleAlreadyFinalizedError,
    SaleCancelledError,
    SaleNotFoundError,
)
from bizconnect.web.auth import create_admin_token, get_password_hash


@pytest.mark.unit
class TestAdminAuth:
    """Admin endpoints refuse requests without a valid token"""

    @pytest.mark.parametrize("method,path", [
        ("get", "/api/admin/quick-sales"),
        ("put", "/api/admin/quick-sales/3f2b8c1e-6d4a-4f6b-9a7e-2c5d1e8f9a01"),
        ("post", "/api/admin/quick-sales/3f2b8c1e-6d4a-4f6b-9a7e-2c5d1e8f9a01/finalize"),
        ("delete", "/api/admin/quick-sales/3f2b8c1e-6d4a-4f6b-9a7e-2c5d1e8f9a01"),
    ])
    def test_missing_token(self, client, mock_store, method, path):
        response = getattr(client, method)(path)
        assert response.status_code == 401
        assert response.get_json()['code'] == 'UNAUTHORIZED'
        mock_store.finalize_sale.assert_not_called()

    def test_garbage_token(self, client):
        response = client.get('/api/admin/quick-sales', headers={'Authorization': 'Bearer nope'})
        assert response.status_code == 401
        assert response.get_json()['error'] == 'Invalid admin token'

    def test_expired_token(self, client):
        token = create_admin_token({'id': 'a1', 'username': 'admin'}, expires_delta=timedelta(seconds=-5))
        response = client.get('/api/admin/quick-sales', headers={'Authorization': f'Bearer {token}'})
        assert response.status_code == 401
        assert 'expired' in response.get_json()['error']

    def test_wrong_scheme(self, client, admin_token):
        response = client.get('/api/admin/quick-sales', headers={'Authorization': f'Token {admin_token}'})
        assert response.status_code == 401


@pytest.mark.unit
class TestAdminLogin:
    def test_login_success(self, client, mock_store):
        """
        GIVEN an active admin with a bcrypt password hash
        WHEN correct credentials are posted
        THEN a token is returned and the hash is not
        """
        mock_store.get_admin_by_username.return_value = {
            'id': 'a1', 'username': 'admin', 'password_hash': get_password_hash('s3cret'),
            'full_name': 'Admin', 'email': None, 'is_active': True,
        }

        response = client.post('/api/admin/login', json={'username': 'admin', 'password': 's3cret'})

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['token']
        assert 'password_hash' not in data['user']

        token = data['token']
        mock_store.list_sales.return_value = []
        listed = client.get('/api/admin/quick-sales', headers={'Authorization': f'Bearer {token}'})
        assert listed.status_code == 200

    def test_login_wrong_password(self, client, mock_store):
        mock_store.get_admin_by_username.return_value = {
            'id': 'a1', 'username': 'admin', 'password_hash': get_password_hash('s3cret'), 'is_active': True,
        }
        response = client.post('/api/admin/login', json={'username': 'admin', 'password': 'guess'})
        assert response.status_code == 401
        assert response.get_json()['error'] == 'Invalid credentials'

    def test_login_unknown_user(self, client, mock_store):
        mock_store.get_admin_by_username.return_value = None
        response = client.post('/api/admin/login', json={'username': 'ghost', 'password': 'x'})
        assert response.status_code == 401

    def test_login_inactive(self, client, mock_store):
        mock_store.get_admin_by_username.return_value = {
            'id': 'a1', 'username': 'admin', 'password_hash': get_password_hash('s3cret'), 'is_active': False,
        }
        response = client.post('/api/admin/login', json={'username': 'admin', 'password': 's3cret'})
        assert response.status_code == 401
        assert 'inactive' in response.get_json()['error']

    def test_login_missing_fields(self, client):
        response = client.post('/api/admin/login', json={'username': 'admin'})
        assert response.status_code == 400


@pytest.mark.unit
class TestAdminSales:
    def test_admin_detail_shows_contacts(self, client, mock_store, admin_headers, sample_sale, make_bid, sale_id):
        bid = make_bid("60.00", contact_number="0201112233")
        mock_store.get_sale_detail.return_value = {
            **sample_sale, 'products': [], 'bids': [bid], 'highest_bid': bid
        }

        response = client.get(f'/api/admin/quick-sales/{sale_id}', headers=admin_headers)

        assert response.status_code == 200
        assert response.get_json()['data']['bids'][0]['contact_number'] == '0201112233'

    def test_status_override(self, client, mock_store, admin_headers, sample_sale, sale_id):
        mock_store.update_sale.return_value = {**sample_sale, 'status': 'cancelled'}

        response = client.put(f'/api/admin/quick-sales/{sale_id}', json={'status': 'cancelled'},
                              headers=admin_headers)

        assert response.status_code == 200
        assert response.get_json()['data']['status'] == 'cancelled'
        mock_store.update_sale.assert_called_once_with(sale_id, {'status': 'cancelled'})
        mock_store.finalize_sale.assert_not_called()

    def test_override_array_body(self, client, mock_store, admin_headers, sale_id):
        response = client.put(f'/api/admin/quick-sales/{sale_id}', json=[{'status': 'ended'}],
                              headers=admin_headers)
        assert response.status_code == 400
        mock_store.update_sale.assert_not_called()

    def test_reactivate_finalized_conflict(self, client, mock_store, admin_headers, sale_id):
        mock_store.update_sale.side_effect = SaleAlreadyFinalizedError(sale_id)
        response = client.put(f'/api/admin/quick-sales/{sale_id}', json={'status': 'active'},
                              headers=admin_headers)
        assert response.status_code == 409

    def test_finalize(self, client, mock_store, admin_headers, sample_sale, make_bid, sale_id):
        """
        GIVEN a sale with a winning bid
        WHEN an admin finalizes it
        THEN the outcome and winning bid are returned
        """
        bid = make_bid("75.00")
        mock_store.finalize_sale.return_value = {
            'sale': {**sample_sale, 'status': 'ended', 'winning_bid_id': bid['id']},
            'outcome': 'winner',
            'winning_bid': bid,
            'already_finalized': False,
        }

        response = client.post(f'/api/admin/quick-sales/{sale_id}/finalize', headers=admin_headers)

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['outcome'] == 'winner'
        assert data['winning_bid']['bid_amount'] == '75.00'
        assert data['sale']['winning_bid_id'] == bid['id']

    def test_finalize_repeat_is_ok(self, client, mock_store, admin_headers, sample_sale, sale_id):
        mock_store.finalize_sale.return_value = {
            'sale': {**sample_sale, 'status': 'ended'},
            'outcome': 'no_bids',
            'winning_bid': None,
            'already_finalized': True,
        }
        response = client.post(f'/api/admin/quick-sales/{sale_id}/finalize', headers=admin_headers)
        assert response.status_code == 200
        assert response.get_json()['data']['already_finalized'] is True

    def test_finalize_cancelled(self, client, mock_store, admin_headers, sale_id):
        mock_store.finalize_sale.side_effect = SaleCancelledError(sale_id)
        response = client.post(f'/api/admin/quick-sales/{sale_id}/finalize', headers=admin_headers)
        assert response.status_code == 409

    def test_delete(self, client, mock_store, admin_headers, sale_id):
        response = client.delete(f'/api/admin/quick-sales/{sale_id}', headers=admin_headers)
        assert response.status_code == 200
        mock_store.delete_sale.assert_called_once_with(sale_id)

    def test_delete_missing(self, client, mock_store, admin_headers, sale_id):
        mock_store.delete_sale.side_effect = SaleNotFoundError(sale_id)
        response = client.delete(f'/api/admin/quick-sales/{sale_id}', headers=admin_headers)
        assert response.status_code == 404
