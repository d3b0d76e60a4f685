"""
Quick sale store for BizConnect
Manages sales, products, bids and admin accounts in PostgreSQL.

Bids and finalize both take a row lock on the sale (SELECT ... FOR UPDATE)
so concurrent writers on one sale are serialized by the database, which
keeps the rules correct across several stateless server instances.
"""
import logging
from datetime import datetime
from importlib import resources
from typing import Dict, List, Optional

import psycopg2
from psycopg2.extras import Json, RealDictCursor

from ..auction.bidding import (
    decide_outcome,
    ensure_biddable,
    ensure_bid_clears,
    utcnow,
    validate_bid_input,
)
from ..auction.errors import (
    BizConnectError,
    SaleAlreadyFinalizedError,
    SaleCancelledError,
    SaleNotFoundError,
    ValidationError,
)
from ..auction.sales import validate_new_sale, validate_sale_changes
from ..config import settings
from .models import FinalizeOutcome, FinalizeResult, SaleStatus

logger = logging.getLogger(__name__)

HIGHEST_BID_SQL = """
    SELECT * FROM quick_sale_bids
    WHERE sale_id = %s
    ORDER BY bid_amount DESC, created_at ASC, id ASC
    LIMIT 1
"""

LOCK_SALE_SQL = "SELECT * FROM quick_sales WHERE id = %s FOR UPDATE"


class QuickSaleStore:
    """Persists quick sales and enforces the bidding rules transactionally"""

    def __init__(self, db_config: Optional[Dict] = None):
        """
        Initialize database connection

        Args:
            db_config: Dict with keys: host, port, database, user, password
                      If None, uses configuration from settings
        """
        if db_config is None:
            db_config = settings.db_config

        self.db_config = db_config
        self.conn = None
        self.connect()

    def connect(self):
        """Establish database connection"""
        try:
            self.conn = psycopg2.connect(**self.db_config)
            logger.debug("Connected to database %s", self.db_config['database'])
        except psycopg2.Error as e:
            logger.error("Database connection error: %s", e)
            raise

    def close(self):
        """Close database connection"""
        if self.conn:
            self.conn.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def init_schema(self):
        """Create tables and indexes if they do not exist"""
        ddl = resources.files('bizconnect.database').joinpath('schema.sql').read_text(encoding='utf-8')
        try:
            with self.conn.cursor() as cur:
                cur.execute(ddl)
            self.conn.commit()
        except psycopg2.Error:
            self.conn.rollback()
            raise

    # ==================== SALES ====================

    def list_sales(self, status: Optional[str] = None) -> List[Dict]:
        """
        List sales, newest first, with product/bid counts and highest bid

        Args:
            status: Optional status filter ('active', 'ended', 'cancelled')
        """
        if status is not None and status not in SaleStatus.values():
            raise ValidationError(
                f"Status must be one of: {', '.join(SaleStatus.values())}", field='status'
            )

        with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute("""
                SELECT s.*,
                       COUNT(DISTINCT p.id) AS products_count,
                       COUNT(DISTINCT b.id) AS bids_count,
                       MAX(b.bid_amount) AS highest_bid
                FROM quick_sales s
                LEFT JOIN quick_sale_products p ON p.sale_id = s.id
                LEFT JOIN quick_sale_bids b ON b.sale_id = s.id
                WHERE (%s IS NULL OR s.status = %s)
                GROUP BY s.id
                ORDER BY s.created_at DESC
            """, (status, status))
            return [dict(row) for row in cur.fetchall()]

    def get_sale(self, sale_id: str) -> Optional[Dict]:
        """Get a sale row by ID, or None"""
        with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute("SELECT * FROM quick_sales WHERE id = %s", (sale_id,))
            row = cur.fetchone()
            return dict(row) if row else None

    def get_products(self, sale_id: str) -> List[Dict]:
        with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute("""
                SELECT * FROM quick_sale_products
                WHERE sale_id = %s
                ORDER BY created_at ASC
            """, (sale_id,))
            return [dict(row) for row in cur.fetchall()]

    def get_bids(self, sale_id: str) -> List[Dict]:
        """All bids for a sale, highest first (earliest wins ties)"""
        with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute("""
                SELECT * FROM quick_sale_bids
                WHERE sale_id = %s
                ORDER BY bid_amount DESC, created_at ASC, id ASC
            """, (sale_id,))
            return [dict(row) for row in cur.fetchall()]

    def get_highest_bid(self, sale_id: str) -> Optional[Dict]:
        with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute(HIGHEST_BID_SQL, (sale_id,))
            row = cur.fetchone()
            return dict(row) if row else None

    def get_sale_detail(self, sale_id: str) -> Dict:
        """
        Get a sale with its products and bids

        Raises:
            SaleNotFoundError if the sale does not exist
        """
        sale = self.get_sale(sale_id)
        if sale is None:
            raise SaleNotFoundError(sale_id)

        bids = self.get_bids(sale_id)
        sale['products'] = self.get_products(sale_id)
        sale['bids'] = bids
        sale['highest_bid'] = bids[0] if bids else None
        return sale

    def create_sale(self, data: Dict, now: Optional[datetime] = None) -> Dict:
        """
        Validate and insert a sale with its products in one transaction

        Args:
            data: Sale fields plus a 'products' list (or JSON string)
            now: Creation time (defaults to UTC now)

        Returns:
            The created sale with its products
        """
        sale, products = validate_new_sale(data, now)

        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("""
                    INSERT INTO quick_sales (
                        title, description, seller_name, seller_contact, seller_email,
                        reserve_price, starts_at, ends_at, status
                    )
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING *
                """, (
                    sale['title'],
                    sale['description'],
                    sale['seller_name'],
                    sale['seller_contact'],
                    sale['seller_email'],
                    sale['reserve_price'],
                    sale['starts_at'],
                    sale['ends_at'],
                    sale['status'],
                ))
                created = dict(cur.fetchone())

                created['products'] = []
                for product in products:
                    cur.execute("""
                        INSERT INTO quick_sale_products (sale_id, title, description, condition, images)
                        VALUES (%s, %s, %s, %s, %s)
                        RETURNING *
                    """, (
                        created['id'],
                        product['title'],
                        product['description'],
                        product['condition'],
                        Json(product['images']),
                    ))
                    created['products'].append(dict(cur.fetchone()))

            self.conn.commit()
            logger.info("Created quick sale %s with %d products", created['id'], len(products))
            return created
        except psycopg2.Error as e:
            logger.error("Error creating quick sale: %s", e)
            self.conn.rollback()
            raise

    def update_sale(self, sale_id: str, changes: Dict) -> Dict:
        """
        Admin edit / status override. Never touches the finalize result.

        Raises:
            SaleNotFoundError, ValidationError, SaleAlreadyFinalizedError
        """
        cleaned = validate_sale_changes(changes)

        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(LOCK_SALE_SQL, (sale_id,))
                sale = cur.fetchone()
                if sale is None:
                    raise SaleNotFoundError(sale_id)

                if cleaned.get('status') == SaleStatus.ACTIVE.value and sale['finalized_at'] is not None:
                    raise SaleAlreadyFinalizedError(sale_id)

                # Column names come from the EDITABLE_FIELDS whitelist
                assignments = ', '.join(f"{field} = %s" for field in cleaned)
                cur.execute(f"""
                    UPDATE quick_sales
                    SET {assignments}, updated_at = NOW()
                    WHERE id = %s
                    RETURNING *
                """, (*cleaned.values(), sale_id))
                updated = dict(cur.fetchone())

            self.conn.commit()
            logger.info("Updated quick sale %s fields=%s", sale_id, sorted(cleaned))
            return updated
        except (BizConnectError, psycopg2.Error):
            self.conn.rollback()
            raise

    def delete_sale(self, sale_id: str) -> None:
        """Delete a sale; products and bids go with it"""
        try:
            with self.conn.cursor() as cur:
                cur.execute("DELETE FROM quick_sales WHERE id = %s RETURNING id", (sale_id,))
                if cur.fetchone() is None:
                    raise SaleNotFoundError(sale_id)
            self.conn.commit()
            logger.info("Deleted quick sale %s", sale_id)
        except (BizConnectError, psycopg2.Error):
            self.conn.rollback()
            raise

    # ==================== BIDDING ====================

    def place_bid(self, sale_id: str, bid: Dict, now: Optional[datetime] = None) -> Dict:
        """
        Record a bid if it beats the current highest bid

        Args:
            sale_id: The quick sale ID
            bid: Dict with bidder_name, bid_amount, contact_number
            now: Server time used for the end-time check (defaults to UTC now)

        Returns:
            The created bid row

        Raises:
            ValidationError / InvalidBidAmountError / BidTooLowError (400)
            SaleNotFoundError (404)
            SaleNotActiveError / SaleEndedError / BidConflictError (409)
        """
        cleaned = validate_bid_input(bid)
        amount = cleaned['bid_amount']

        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                # What the bidder could have seen before we queued on the lock
                cur.execute(HIGHEST_BID_SQL, (sale_id,))
                observed = cur.fetchone()

                cur.execute(LOCK_SALE_SQL, (sale_id,))
                sale = cur.fetchone()
                if sale is None:
                    raise SaleNotFoundError(sale_id)

                ensure_biddable(sale, now or utcnow())

                cur.execute(HIGHEST_BID_SQL, (sale_id,))
                highest = cur.fetchone()

                ensure_bid_clears(
                    amount,
                    highest['bid_amount'] if highest else None,
                    observed['bid_amount'] if observed else None,
                )

                cur.execute("""
                    INSERT INTO quick_sale_bids (sale_id, bidder_name, bid_amount, contact_number)
                    VALUES (%s, %s, %s, %s)
                    RETURNING *
                """, (sale_id, cleaned['bidder_name'], amount, cleaned['contact_number']))
                created = dict(cur.fetchone())

            self.conn.commit()
            logger.info("Accepted bid %s on sale %s amount=%s", created['id'], sale_id, amount)
            return created
        except BizConnectError as e:
            self.conn.rollback()
            logger.info("Rejected bid on sale %s amount=%s: %s", sale_id, amount, e.code)
            raise
        except psycopg2.Error as e:
            logger.error("Error placing bid on sale %s: %s", sale_id, e)
            self.conn.rollback()
            raise

    def finalize_sale(self, sale_id: str) -> FinalizeResult:
        """
        Pick the winning bid and close the sale. Idempotent: a finalized
        sale returns its stored result and nothing is written.

        Raises:
            SaleNotFoundError (404), SaleCancelledError (409)
        """
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(LOCK_SALE_SQL, (sale_id,))
                sale = cur.fetchone()
                if sale is None:
                    raise SaleNotFoundError(sale_id)
                sale = dict(sale)

                if sale['finalized_at'] is not None:
                    winning_bid = None
                    if sale['winning_bid_id']:
                        cur.execute("SELECT * FROM quick_sale_bids WHERE id = %s", (sale['winning_bid_id'],))
                        row = cur.fetchone()
                        winning_bid = dict(row) if row else None
                    self.conn.rollback()
                    return {
                        'sale': sale,
                        'outcome': sale['finalize_outcome'],
                        'winning_bid': winning_bid,
                        'already_finalized': True,
                    }

                if sale['status'] == SaleStatus.CANCELLED.value:
                    raise SaleCancelledError(sale_id)

                cur.execute(HIGHEST_BID_SQL, (sale_id,))
                row = cur.fetchone()
                highest = dict(row) if row else None

                outcome = decide_outcome(highest, sale['reserve_price'])
                winning_bid = highest if outcome == FinalizeOutcome.WINNER else None

                cur.execute("""
                    UPDATE quick_sales
                    SET status = %s,
                        winning_bid_id = %s,
                        finalize_outcome = %s,
                        finalized_at = NOW(),
                        updated_at = NOW()
                    WHERE id = %s
                    RETURNING *
                """, (
                    SaleStatus.ENDED.value,
                    winning_bid['id'] if winning_bid else None,
                    outcome.value,
                    sale_id,
                ))
                updated = dict(cur.fetchone())

            self.conn.commit()
            logger.info("Finalized sale %s outcome=%s", sale_id, outcome.value)
            return {
                'sale': updated,
                'outcome': outcome.value,
                'winning_bid': winning_bid,
                'already_finalized': False,
            }
        except (BizConnectError, psycopg2.Error):
            self.conn.rollback()
            raise

    # ==================== ADMIN USERS ====================

    def get_admin_by_username(self, username: str) -> Optional[Dict]:
        with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute("SELECT * FROM admin_users WHERE username = %s", (username,))
            row = cur.fetchone()
            return dict(row) if row else None

    def create_admin(self, username: str, password_hash: str,
                     full_name: Optional[str] = None, email: Optional[str] = None) -> Dict:
        """Insert an admin account (password must already be hashed)"""
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("""
                    INSERT INTO admin_users (username, password_hash, full_name, email)
                    VALUES (%s, %s, %s, %s)
                    RETURNING id, username, full_name, email, is_active, created_at
                """, (username, password_hash, full_name, email))
                created = dict(cur.fetchone())
            self.conn.commit()
            return created
        except psycopg2.IntegrityError:
            self.conn.rollback()
            raise ValidationError(f"Admin '{username}' already exists", field='username')
        except psycopg2.Error:
            self.conn.rollback()
            raise
