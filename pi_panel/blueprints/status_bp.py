from flask import Blueprint, current_app, jsonify


bp = Blueprint("status", __name__)


@bp.route("/status_data", methods=["GET"])
def status_data():
    """
    Return a health snapshot for the dashboard.

    Blocks for one sample window (SAMPLE_INTERVAL_MS) to measure CPU load and
    network throughput.

    Returns:
        JSON: { temperature, memory?: {total, free}, cores: [pct]|null,
                net_traffic: {time, traffic: [rx, tx]}|null }
    """
    st = current_app.extensions["state"]
    report = st.sampler.sample_status()
    return jsonify(report.to_dict())
