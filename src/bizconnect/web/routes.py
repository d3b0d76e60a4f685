"""
Public API routes
Quick sale browsing, creation and bidding
"""
import logging

from flask import jsonify, request

from ..auction.errors import BizConnectError, InternalError
from ..config import settings
from .context import get_store, json_body, parse_sale_id
from .serializers import error_response, sale_detail, success_response

logger = logging.getLogger(__name__)


def register_routes(app):
    """Register all public routes with the Flask app"""

    @app.route('/api')
    def api_docs():
        """API documentation endpoint"""
        return jsonify({
            "name": "BizConnect Quick Sales API",
            "version": "1.0",
            "endpoints": {
                "list_sales": {
                    "path": "/api/quick-sales",
                    "method": "GET",
                    "description": "List quick sales with bid counts and highest bid",
                    "parameters": {
                        "status": "Optional filter: active, ended or cancelled"
                    },
                    "example": "/api/quick-sales?status=active"
                },
                "create_sale": {
                    "path": "/api/quick-sales",
                    "method": "POST",
                    "description": f"Create a quick sale with 1-{settings.MAX_PRODUCTS_PER_SALE} products"
                },
                "sale_detail": {
                    "path": "/api/quick-sales/<sale_id>",
                    "method": "GET",
                    "description": "Sale detail with products, bids and time remaining"
                },
                "place_bid": {
                    "path": "/api/quick-sales/<sale_id>/bids",
                    "method": "POST",
                    "description": "Place a bid (bidder_name, bid_amount, contact_number)"
                },
                "admin": {
                    "path": "/api/admin/quick-sales",
                    "method": "GET, PUT, POST, DELETE",
                    "description": "Admin management; requires a bearer token from /api/admin/login"
                },
                "health": {
                    "path": "/health",
                    "method": "GET",
                    "description": "Health check endpoint"
                }
            }
        })

    @app.route('/health', methods=['GET'])
    def health_check():
        """Health check endpoint"""
        return jsonify({
            "status": "healthy",
            "service": "bizconnect-quick-sales"
        }), 200

    @app.route('/api/quick-sales', methods=['GET'])
    def list_sales():
        """
        List quick sales

        Query Parameters:
            status: active, ended or cancelled (optional)
        """
        try:
            status = request.args.get('status', '').strip() or None
            sales = get_store().list_sales(status)
            return success_response(sales)
        except BizConnectError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error listing quick sales")
            return error_response(InternalError("Failed to get quick sales"))

    @app.route('/api/quick-sales', methods=['POST'])
    def create_sale():
        """
        Create a quick sale

        Accepts a JSON body, or a form post where 'products' is a JSON string.
        """
        try:
            data = json_body()
            if data is None:
                data = request.form.to_dict()
            sale = get_store().create_sale(data)
            return success_response(sale, 201)
        except BizConnectError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error creating quick sale")
            return error_response(InternalError("Failed to create quick sale"))

    @app.route('/api/quick-sales/<sale_id>', methods=['GET'])
    def get_sale(sale_id):
        """Sale detail including products, bids and countdown fields"""
        try:
            sale = get_store().get_sale_detail(parse_sale_id(sale_id))
            return success_response(sale_detail(sale))
        except BizConnectError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error getting quick sale %s", sale_id)
            return error_response(InternalError("Failed to get quick sale"))

    @app.route('/api/quick-sales/<sale_id>/bids', methods=['POST'])
    def place_bid(sale_id):
        """
        Place a bid

        Body:
            bidder_name, bid_amount (decimal string), contact_number
        """
        try:
            bid = get_store().place_bid(parse_sale_id(sale_id), json_body({}))
            return success_response(bid, 201)
        except BizConnectError as e:
            return error_response(e)
        except Exception:
            logger.exception("Error placing bid on %s", sale_id)
            return error_response(InternalError("Failed to place bid"))
