from flask import jsonify


def api_response(data=None, message: str = "Success", status: int = 200):
    """Uniform success envelope: {statusCode, data, message, success}."""
    payload = {
        "statusCode": status,
        "data": data if data is not None else {},
        "message": message,
        "success": status < 400,
    }
    return jsonify(payload), status
