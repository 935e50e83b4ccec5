#!/usr/bin/env python3
"""Flask web app for the Skills Boost points calculator."""

import os
from io import BytesIO

from flask import Flask, request, jsonify, send_file, current_app
from dotenv import load_dotenv
from werkzeug.exceptions import HTTPException

from points_engine.cohort.export import export_csv, export_json
from points_engine.cohort.runner import CohortRun
from points_engine.enrollment.normalize import extract_profile_id
from points_engine.enrollment.registry import EnrollmentRegistry
from points_engine.errors import InternalError, PointsEngineError, ValidationError
from points_engine.scoring.policy import load_scoring_policy
from points_engine.utils import iso_now
from skills_tracker.audit import audit_log, setup_app_logging
from skills_tracker.cohort_pdf import generate_cohort_pdf
from skills_tracker.service import ScoringService

load_dotenv()

log = setup_app_logging()

SERVICE_NAME = "Cloud Skills Boost Calculator"


def _is_development() -> bool:
    return os.environ.get("APP_ENV", "").strip().lower() == "development"


def _test_mode() -> bool:
    return request.args.get("test", "").strip().lower() in ("1", "true", "yes")


def _service() -> ScoringService:
    return current_app.config["SCORING_SERVICE"]


def _lookup_label(data) -> str:
    email = data.get("email") if isinstance(data, dict) else None
    return "email" if isinstance(email, str) and email.strip() else "profileUrl"


def create_app(service: ScoringService | None = None) -> Flask:
    """Build the app. Without a service, the registry and policy load from config (env overridable)."""
    if service is None:
        registry = EnrollmentRegistry().load()
        service = ScoringService(registry, load_scoring_policy())

    app = Flask(__name__)
    app.config["SCORING_SERVICE"] = service
    _register_routes(app)
    _register_error_handlers(app)
    return app


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(PointsEngineError)
    def handle_engine_error(e: PointsEngineError):
        body = {"success": False, "error": e.message}
        if e.status_code in (403, 404):
            body["enrolled"] = False
        if e.details and _is_development():
            body["details"] = e.details
        return jsonify(body), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        if e.code == 404:
            return jsonify({"success": False, "error": "Endpoint not found"}), 404
        if e.code == 405:
            return jsonify({"success": False, "error": "Method not allowed"}), 405
        return jsonify({"success": False, "error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        log.exception("Unhandled error")
        err = InternalError("Internal server error", details=str(e))
        body = {"success": False, "error": err.message}
        if _is_development():
            body["details"] = err.details
        return jsonify(body), err.status_code


def _register_routes(app: Flask) -> None:
    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({
            "status": "OK",
            "timestamp": iso_now(),
            "service": SERVICE_NAME,
            "participants": len(_service().registry),
        })

    @app.route("/api/calculate-points", methods=["POST"])
    def api_calculate_points():
        """Verify enrollment by email or profile URL, then fetch and score the profile."""
        data = request.get_json(silent=True) or {}
        lookup = _lookup_label(data)
        log.info("Calculate points started (lookup=%s)", lookup)
        try:
            result = _service().calculate(data)
        except PointsEngineError as e:
            audit_log(action="calculate_points", status="error", lookup=lookup, error=e.message,
                      extra={"status_code": e.status_code})
            log.warning("Calculate points failed (%d): %s", e.status_code, e.message)
            raise
        except Exception as e:
            audit_log(action="calculate_points", status="error", lookup=lookup, error=str(e))
            log.exception("Calculate points failed")
            raise InternalError("Failed to calculate points. Please try again later.", details=str(e)) from e

        audit_log(action="calculate_points", status="success", lookup=lookup, profile_id=result["profileId"])
        log.info("Calculate points complete: profile=%s badges=%d games=%d",
                 result["profileId"], result["breakdown"]["badges"]["count"], result["breakdown"]["games"]["count"])
        return jsonify(result)

    @app.route("/api/participants", methods=["GET"])
    def api_participants():
        """Cohort listing; ?test=true returns the reduced test subset."""
        return jsonify(_service().list_participants(test_mode=_test_mode()))

    @app.route("/api/enrollment-list", methods=["GET"])
    def api_enrollment_list():
        participants = [e.to_record() for e in _service().registry.entries]
        return jsonify({"success": True, "count": len(participants), "participants": participants})

    @app.route("/api/enrollment", methods=["POST"])
    def api_add_enrollment():
        """Administrative add. Body is a participant record or {"profileUrl": ...} only."""
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Participant record must be a JSON object")
        profile_id = data.get("profileId") or extract_profile_id(data.get("profileUrl"))
        if not isinstance(profile_id, str):
            raise ValidationError("Invalid profile URL format")
        added = _service().registry.add(data)
        audit_log(action="add_participant", status="success" if added else "skipped", profile_id=profile_id)
        return jsonify({"success": True, "added": added}), 201 if added else 200

    @app.route("/api/scoring-config", methods=["GET"])
    def api_scoring_config():
        return jsonify({"success": True, "config": _service().policy.to_dict()})

    def _cohort_report() -> tuple[dict, CohortRun]:
        test_mode = _test_mode()
        service = _service()
        run = service.run_cohort(test_mode=test_mode)
        report = {"success": True, "testMode": test_mode, **run.report(service.policy.completion_baseline)}
        audit_log(action="analytics", status="success", test_mode=test_mode,
                  extra={"total_participants": run.total_participants, "failed": len(run.failures)})
        return report, run

    @app.route("/api/analytics", methods=["GET"])
    def api_analytics():
        """Run a cohort pass and return summary, distribution and leaderboard."""
        report, _ = _cohort_report()
        return jsonify(report)

    @app.route("/api/analytics/export", methods=["GET"])
    def api_analytics_export():
        fmt = request.args.get("format", "json").strip().lower()
        if fmt not in ("json", "csv", "pdf"):
            raise ValidationError("format must be one of json, csv, pdf")
        report, run = _cohort_report()
        day = run.generated_at.split("T")[0]
        if fmt == "json":
            body = export_json(run.samples, run.generated_at).encode("utf-8")
            mimetype = "application/json"
        elif fmt == "csv":
            body = export_csv(run.samples).encode("utf-8")
            mimetype = "text/csv"
        else:
            body = generate_cohort_pdf(report)
            mimetype = "application/pdf"
        return send_file(
            BytesIO(body),
            mimetype=mimetype,
            as_attachment=True,
            download_name=f"analytics-{day}.{fmt}",
        )


app = create_app()


if __name__ == "__main__":
    port = int(os.environ.get("PORT") or 3000)
    log.info(
        "%s starting on http://127.0.0.1:%d | participants: %d | Logs: logs/app.log | Audit: logs/audit.log",
        SERVICE_NAME,
        port,
        len(app.config["SCORING_SERVICE"].registry),
    )
    app.run(debug=_is_development(), port=port)
