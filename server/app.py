"""Minimal Flask API serving complete dealing plans."""
from __future__ import annotations

import logging
from typing import Any, Dict

from flask import Flask, jsonify, request

from scripts.config import ConfigError, DealConfig, coerce_size
from scripts.deal import plan
from scripts.deck import generate_permutation, resolve_seed

MAX_CARDS = 10_000

LOGGER = logging.getLogger("server")

app = Flask(__name__)


def _validate_payload(payload: Dict[str, Any]) -> DealConfig:
    config = DealConfig.from_dict(payload)
    if config.size > MAX_CARDS:
        raise ConfigError(f"At most {MAX_CARDS} cards can be planned")
    return config


@app.post("/api/plan")
def create_plan():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "Payload must be a JSON object"}), 400
    try:
        config = _validate_payload(payload)
    except ConfigError as exc:
        return jsonify({"error": str(exc)}), 400

    seed = resolve_seed(config.seed)
    permutation = generate_permutation(config.size, seed)
    driver, lines = plan(config.group_sizes, permutation)
    LOGGER.info("Planned %d cards with seed %d", config.size, seed)

    return jsonify(
        {
            "seed": seed,
            "size": config.size,
            "group_sizes": config.group_sizes,
            "instructions": lines,
            "transfers": len(driver.transfers),
            "cards_moved": driver.cards_moved,
        }
    )


@app.get("/api/permutation/<size>")
def get_permutation(size: str):
    try:
        count = coerce_size(size)
    except ConfigError as exc:
        return jsonify({"error": str(exc)}), 400
    if count > MAX_CARDS:
        return jsonify({"error": f"At most {MAX_CARDS} cards can be planned"}), 400

    seed_value = request.args.get("seed")
    try:
        seed = resolve_seed(int(seed_value) if seed_value is not None else None)
    except ValueError:
        return jsonify({"error": "Seed must be an integer."}), 400

    return jsonify({"seed": seed, "permutation": generate_permutation(count, seed)})


if __name__ == "__main__":  # pragma: no cover - manual execution helper
    app.run(host="0.0.0.0", port=5000, debug=True)
