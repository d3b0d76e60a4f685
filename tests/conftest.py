"""
Pytest fixtures and configuration for BizConnect tests
"""
import pytest
from unittest.mock import MagicMock
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from bizconnect.config import settings


SALE_ID = "3f2b8c1e-6d4a-4f6b-9a7e-2c5d1e8f9a01"
NOW = datetime.now(timezone.utc).replace(microsecond=0)


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Keep password hashing cheap in tests"""
    monkeypatch.setattr(settings, 'BCRYPT_ROUNDS', 4)


@pytest.fixture
def now():
    """Fixed 'current time' shared by sale fixtures"""
    return NOW


@pytest.fixture
def sale_id():
    return SALE_ID


@pytest.fixture
def sample_sale():
    """An active sale row ending in one hour, reserve 50.00"""
    return {
        'id': SALE_ID,
        'title': 'Hostel move-out sale',
        'description': 'Everything must go before vacation',
        'seller_name': 'Kojo Mensah',
        'seller_contact': '0241234567',
        'seller_email': 'kojo@st.knust.edu.gh',
        'reserve_price': Decimal('50.00'),
        'starts_at': NOW - timedelta(hours=1),
        'ends_at': NOW + timedelta(hours=1),
        'status': 'active',
        'winning_bid_id': None,
        'finalize_outcome': None,
        'finalized_at': None,
        'created_at': NOW - timedelta(hours=1),
        'updated_at': NOW - timedelta(hours=1),
    }


@pytest.fixture
def make_bid():
    """Factory for bid rows"""
    counter = {'n': 0}

    def _make_bid(amount, bidder_name='Ama Owusu', contact_number='0201112233', **overrides):
        counter['n'] += 1
        bid = {
            'id': f"b{counter['n']:07d}-0000-4000-8000-000000000000",
            'sale_id': SALE_ID,
            'bidder_name': bidder_name,
            'bid_amount': Decimal(str(amount)).quantize(Decimal('0.01')),
            'contact_number': contact_number,
            'created_at': NOW - timedelta(minutes=30) + timedelta(seconds=counter['n']),
        }
        bid.update(overrides)
        return bid

    return _make_bid


@pytest.fixture
def sample_sale_payload():
    """Sale creation request body"""
    return {
        "title": "Hostel move-out sale",
        "description": "Everything must go",
        "seller_name": "Kojo Mensah",
        "seller_contact": "0241234567",
        "seller_email": "kojo@st.knust.edu.gh",
        "ends_at": (NOW + timedelta(days=2)).isoformat(),
        "reserve_price": "50.00",
        "products": [
            {"title": "Mini fridge", "description": "Works fine", "condition": "good",
             "images": ["https://cdn.example.com/fridge.jpg"]},
            {"name": "Study lamp", "condition": "like_new"},
        ],
    }


@pytest.fixture
def db_config():
    """Test database configuration"""
    return {
        'host': 'localhost',
        'port': '5432',
        'database': 'test_bizconnect',
        'user': 'test_user',
        'password': 'test_password'
    }


@pytest.fixture
def mock_cursor():
    """Mock database cursor"""
    cursor = MagicMock()
    cursor.execute = MagicMock()
    cursor.fetchone = MagicMock()
    cursor.fetchall = MagicMock()
    cursor.__enter__ = MagicMock(return_value=cursor)
    cursor.__exit__ = MagicMock(return_value=None)
    return cursor


@pytest.fixture
def mock_db_connection(mock_cursor):
    """Mock database connection handing out mock_cursor"""
    mock_conn = MagicMock()
    mock_conn.cursor = MagicMock(return_value=mock_cursor)
    mock_conn.commit = MagicMock()
    mock_conn.rollback = MagicMock()
    mock_conn.close = MagicMock()
    return mock_conn


@pytest.fixture
def mock_store():
    """Mock QuickSaleStore used by the Flask app"""
    return MagicMock()


@pytest.fixture
def app(mock_store):
    from bizconnect.web.app import create_app

    app = create_app(store_factory=lambda: mock_store)
    app.testing = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_token():
    from bizconnect.web.auth import create_admin_token
    return create_admin_token({'id': 'a0000000-0000-4000-8000-000000000001', 'username': 'admin'})


@pytest.fixture
def admin_headers(admin_token):
    return {'Authorization': f'Bearer {admin_token}'}
