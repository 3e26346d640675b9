from flask import Blueprint

from api.errors import error_response
from api.responses import api_response
from models import storage

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    """
    Health check
    ---
    tags:
      - Health
    responses:
      200:
        description: API and database are up
      503:
        description: Database unreachable
    """
    if not storage.ping():
        return error_response("Database unreachable", 503)
    return api_response({"status": "ok", "database": True, "version": "1.0.0"}, "OK")
