"""API response helper functions."""
import io

from flask import jsonify, send_file

GCODE_MIMETYPE = 'text/plain'


def success_response(data=None):
    """Return a successful API response."""
    response = {"status": "ok"}
    if data is not None:
        response["data"] = data
    return jsonify(response), 200


def error_response(message, status_code=400, grid=None):
    """
    Return an error API response.

    A rejected probe grid is echoed back so clients can show how far over
    the controller limit the request is.
    """
    response = {"status": "error", "message": message}
    if grid is not None:
        response["grid"] = grid
    return jsonify(response), status_code


def gcode_file_response(gcode: str, filename: str):
    """Return a generated program as a file download."""
    buffer = io.BytesIO(gcode.encode('utf-8'))
    return send_file(
        buffer,
        mimetype=GCODE_MIMETYPE,
        as_attachment=True,
        download_name=filename
    )
