"""API routes - JSON endpoints for autolevel generation."""
import logging

from flask import Blueprint, request

from autoleveller.probe_grid import GridCapacityError
from web.services.autolevel_service import AutolevelService
from web.utils.responses import success_response, error_response, gcode_file_response

logger = logging.getLogger(__name__)

api_bp = Blueprint('api', __name__)

# Request errors reported back as 400s: missing keys, short points, bad values
REQUEST_ERRORS = (KeyError, IndexError, TypeError, ValueError)


@api_bp.route('/dialects')
def list_dialects():
    """List supported controller dialects."""
    return success_response(data=AutolevelService.list_dialects())


@api_bp.route('/autolevel', methods=['POST'])
def generate_autolevel():
    """Generate an autoleveled program from toolpaths and settings."""
    data = request.get_json(silent=True)
    if not data:
        return error_response('No data provided')

    try:
        result = AutolevelService.generate(data)
    except GridCapacityError as e:
        return error_response(str(e), grid=AutolevelService.grid_to_dict(e.grid))
    except REQUEST_ERRORS as e:
        logger.info("Rejected autolevel request: %s", e)
        return error_response(f"Invalid request: {e}")

    return success_response(data=result)


@api_bp.route('/autolevel/download', methods=['POST'])
def download_autolevel():
    """Download the autoleveled program as an .ngc file."""
    data = request.get_json(silent=True)
    if not data:
        return error_response('No data provided')

    try:
        result = AutolevelService.generate(data)
    except GridCapacityError as e:
        return error_response(str(e), grid=AutolevelService.grid_to_dict(e.grid))
    except REQUEST_ERRORS as e:
        return error_response(f"Invalid request: {e}")

    filename = f"{data.get('name') or 'toolpaths'}_autolevel.ngc"
    return gcode_file_response(result['gcode'], filename)


@api_bp.route('/autolevel/grid', methods=['POST'])
def plan_grid():
    """Plan the probe grid only."""
    data = request.get_json(silent=True)
    if not data:
        return error_response('No data provided')

    try:
        result = AutolevelService.plan(data)
    except REQUEST_ERRORS as e:
        return error_response(f"Invalid request: {e}")

    return success_response(data=result)
