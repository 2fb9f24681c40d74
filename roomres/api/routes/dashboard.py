from flask import Blueprint, jsonify
from roomres.services.report_service import ReportService
from roomres.utils.clock import local_now
from roomres.utils.decorators import reservation_errors

dashboard_bp = Blueprint('dashboard', __name__)

@dashboard_bp.route('/stats', methods=['GET'])
@reservation_errors
def get_stats():
    return jsonify(ReportService.dashboard_stats(local_now().date()))

@dashboard_bp.route('/stats/today', methods=['GET'])
@reservation_errors
def get_stats_today():
    return jsonify(ReportService.stats_today(local_now().date()))

@dashboard_bp.route('/lecturer/<lecturer_id>', methods=['GET'])
@reservation_errors
def get_lecturer_dashboard(lecturer_id):
    return jsonify(ReportService.lecturer_dashboard(lecturer_id, local_now().date()))
