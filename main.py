from flask import Flask, request, jsonify
from flask_cors import CORS
from settlement import AgencyConfig, SettlementProcessor
import os
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)

# Enable CORS for all routes (dashboards and report generators call the API)
CORS(app)

# Initialize the settlement processor
processor = SettlementProcessor(AgencyConfig.from_env())


@app.route("/api", methods=["GET"])
def api_info():
    """API information endpoint"""
    return jsonify({
        "status": "ok",
        "message": "Revenue-Split Settlement API",
        "version": "1.0",
        "endpoints": {
            "summary": "/summary [POST]",
            "closing": "/closing [POST]",
            "settlement": "/settlement [POST]",
            "health": "/health [GET]"
        }
    }), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check for monitoring"""
    return jsonify({"status": "healthy"}), 200


def _handle(operation, label):
    try:
        input_data = request.get_json(force=True, silent=True)

        if input_data is None:
            return jsonify({
                "error": "No input data provided",
                "status": "failed"
            }), 400

        logger.info(f"Processing {label} request")

        result = operation(input_data)

        logger.info(f"{label.capitalize()} processed successfully")

        return jsonify(result), 200

    except (ValueError, KeyError, TypeError) as e:
        # Malformed request shape
        logger.error(f"Validation error: {str(e)}")
        return jsonify({
            "error": str(e),
            "status": "validation_failed"
        }), 400

    except Exception as e:
        # Unexpected errors
        logger.error(f"Processing error: {str(e)}", exc_info=True)
        return jsonify({
            "error": str(e),
            "status": "failed"
        }), 500


@app.route("/summary", methods=["POST"])
def summary():
    """
    Summarize bookings for a period, optionally filtered to one provider
    """
    return _handle(processor.summarize_from_dict, "summary")


@app.route("/closing", methods=["POST"])
def closing():
    """Build a provider's period closing statement"""
    return _handle(processor.closing_from_dict, "closing")


@app.route("/settlement", methods=["POST"])
def settlement():
    """Settle a single booking"""
    return _handle(processor.settle_from_dict, "settlement")


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=False)
