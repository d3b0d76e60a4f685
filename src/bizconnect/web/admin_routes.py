"""
Admin API routes
Sale management, status override and finalize
"""
import logging

from flask import request

from ..auction.errors import BizConnectError, InternalError
from .auth import admin_required, authenticate_admin
from .context import get_store, json_body, parse_sale_id
from .serializers import error_response, sale_detail, success_response

logger = logging.getLogger(__name__)


def register_admin_routes(app):
    """Register all admin routes with the Flask app"""

    @app.route('/api/admin/login', methods=['POST'])
    def admin_login():
        """Exchange admin credentials for a bearer token"""
        try:
            body = json_body({})
            token, admin = authenticate_admin(get_store(), body.get('username'), body.get('password'))
            return success_response({
                "message": "Login successful",
                "token": token,
                "user": admin,
            })
        except BizConnectError as e:
            return error_response(e)
        except Exception:
            logger.exception("Admin login error")
            return error_response(InternalError())

    @app.route('/api/admin/quick-sales', methods=['GET'])
    @admin_required
    def admin_list_sales(admin):
        try:
            status = request.args.get('status', '').strip() or None
            return success_response(get_store().list_sales(status))
        except BizConnectError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error listing quick sales for admin %s", admin.username)
            return error_response(InternalError("Failed to get quick sales"))

    @app.route('/api/admin/quick-sales/<sale_id>', methods=['GET'])
    @admin_required
    def admin_get_sale(sale_id, admin):
        """Sale detail with unmasked bidder contacts"""
        try:
            sale = get_store().get_sale_detail(parse_sale_id(sale_id))
            return success_response(sale_detail(sale, public=False))
        except BizConnectError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error getting quick sale %s", sale_id)
            return error_response(InternalError("Failed to get quick sale"))

    @app.route('/api/admin/quick-sales/<sale_id>', methods=['PUT'])
    @admin_required
    def admin_update_sale(sale_id, admin):
        """
        Edit sale fields or override status directly.
        This is the manual escape hatch; it never picks a winner.
        """
        try:
            sale = get_store().update_sale(parse_sale_id(sale_id), json_body({}))
            logger.info("Admin %s updated sale %s", admin.username, sale_id)
            return success_response(sale)
        except BizConnectError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error updating quick sale %s", sale_id)
            return error_response(InternalError("Failed to update quick sale"))

    @app.route('/api/admin/quick-sales/<sale_id>/finalize', methods=['POST'])
    @admin_required
    def admin_finalize_sale(sale_id, admin):
        """Compute the winner and close the sale; repeat calls return the first result"""
        try:
            result = get_store().finalize_sale(parse_sale_id(sale_id))
            logger.info(
                "Admin %s finalized sale %s outcome=%s already_finalized=%s",
                admin.username, sale_id, result['outcome'], result['already_finalized']
            )
            return success_response(result)
        except BizConnectError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error finalizing quick sale %s", sale_id)
            return error_response(InternalError("Failed to finalize quick sale"))

    @app.route('/api/admin/quick-sales/<sale_id>', methods=['DELETE'])
    @admin_required
    def admin_delete_sale(sale_id, admin):
        try:
            get_store().delete_sale(parse_sale_id(sale_id))
            logger.info("Admin %s deleted sale %s", admin.username, sale_id)
            return success_response({"message": "Quick sale deleted", "id": sale_id})
        except BizConnectError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error deleting quick sale %s", sale_id)
            return error_response(InternalError("Failed to delete quick sale"))
