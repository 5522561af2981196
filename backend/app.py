# backend/app.py
from flask import Flask, request, jsonify
from flask_cors import CORS
from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from config import Config
from logs import configure_logging, get_logger
from schemas import CreateExpense, ExpenseIn
from settlement import compute_settlement
from store import ExpenseStore, db
from summary import filter_by_group, summarize

log = get_logger(__name__)

calculate_payload = TypeAdapter(list[ExpenseIn])


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    # Balances are returned in first-seen order, keep it
    app.json.sort_keys = False

    configure_logging(app.config["LOG_LEVEL"])

    CORS(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})  # lets the frontend talk to this backend

    db.init_app(app)
    with app.app_context():
        db.create_all()

    register_error_handlers(app)
    register_routes(app)
    return app


def _validation_details(error):
    return [
        {"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]}
        for e in error.errors(include_url=False, include_context=False, include_input=False)
    ]


def register_error_handlers(app):
    @app.errorhandler(ValidationError)
    def validation_failed(e):
        return jsonify({"error": "validation_failed", "details": _validation_details(e)}), 400

    @app.errorhandler(SQLAlchemyError)
    def storage_failed(e):
        db.session.rollback()
        log.error("storage_error", error=str(e))
        return jsonify({"error": "storage_unavailable"}), 503

    @app.errorhandler(HTTPException)
    def http_error(e):
        return jsonify({"error": e.name.lower().replace(" ", "_")}), e.code


def _json_body(expected_type):
    data = request.get_json(silent=True)
    if not isinstance(data, expected_type):
        return None
    return data


def _load_expenses(store):
    # Newest first, as stored
    expenses = [row.to_expense() for row in store.list_all()]
    return filter_by_group(expenses, request.args.get("group"))


def register_routes(app):
    store = ExpenseStore()

    # --- HEALTH CHECK ---
    @app.route('/api', methods=['GET'])
    def health_check():
        return jsonify({"status": "healthy", "message": "Backend is running!"})

    # --- EXPENSES ---
    @app.route('/api/expenses', methods=['POST'])
    def create_expense():
        data = _json_body(dict)
        if data is None:
            return jsonify({"error": "invalid_json"}), 400

        expense = CreateExpense.model_validate(data)
        row = store.create(expense)
        log.info("expense_created", id=row.id, payer=row.payer_name, amount=str(row.amount))
        return jsonify(row.to_dict()), 201

    @app.route('/api/expenses', methods=['GET'])
    def list_expenses():
        rows = filter_by_group(store.list_all(), request.args.get("group"))
        return jsonify([row.to_dict() for row in rows])

    @app.route('/api/expenses', methods=['DELETE'])
    def clear_expenses():
        removed = store.clear_all()
        log.info("expenses_cleared", removed=removed)
        return '', 204

    @app.route('/api/expenses/<int:expense_id>', methods=['DELETE'])
    def delete_expense(expense_id):
        if not store.delete(expense_id):
            return jsonify({"error": "not_found"}), 404
        log.info("expense_deleted", id=expense_id)
        return '', 204

    @app.route('/api/expenses/settlements', methods=['GET'])
    def settlements():
        expenses = _load_expenses(store)
        result = compute_settlement(expenses)
        log.info("settlement_computed", expenses=len(expenses), transfers=len(result.transfers))
        return jsonify(result.to_dict())

    @app.route('/api/expenses/summary', methods=['GET'])
    def expenses_summary():
        return jsonify(summarize(_load_expenses(store)))

    # --- STATELESS CALCULATION ---
    @app.route('/api/calculate', methods=['POST'])
    def calculate():
        data = _json_body(list)
        if data is None:
            return jsonify({"error": "invalid_json"}), 400

        # Convert JSON data into our Python objects
        expenses_list = [item.to_expense() for item in calculate_payload.validate_python(data)]

        result = compute_settlement(expenses_list)
        log.info("settlement_computed", expenses=len(expenses_list), transfers=len(result.transfers))
        return jsonify(result.to_dict())


if __name__ == '__main__':
    app = create_app()
    app.run(debug=True, port=app.config["PORT"])
