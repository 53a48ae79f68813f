"""
Flask web application for the court rotation engine.
"""
import logging

from flask import Flask, jsonify, request

import storage
from rotation.engine import REGISTER_MODES, REPLACE
from rotation.models import Location
from rotation.snapshot import to_snapshot

app = Flask(__name__)

# One engine per server process; disabled courts live only as long as it does.
_engine = None


def get_engine():
    """Return the process engine, loading it from the state file on first use."""
    global _engine
    if _engine is None:
        _engine = storage.load_engine()
        app.logger.info(f'Loaded rotation state from {storage.STATE_FILE}')
    return _engine


def reset_engine():
    """Drop the in-process engine so the next request reloads from disk."""
    global _engine
    _engine = None


def _state_payload(engine) -> dict:
    state = to_snapshot(engine)
    for court in state['courts']:
        court['disabled'] = engine.is_disabled(court['id'])
    state['stats'] = engine.stats()
    state['eligible_count'] = engine.eligible_count
    state['can_form'] = engine.can_form
    return state


def _run_command(command):
    """Apply ``command`` to the engine under the data lock, then persist."""
    with storage.data_lock():
        engine = get_engine()
        result = command(engine)
        if not storage.save_engine(engine):
            app.logger.warning('Rotation state was not saved')
    return jsonify({'success': bool(result), 'state': _state_payload(engine)})


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@app.route('/api/state', methods=['GET'])
def api_state():
    """Current rotation state with stats and formation availability."""
    return jsonify(_state_payload(get_engine()))


@app.route('/api/players', methods=['POST'])
def api_register_players():
    """Register players from free text (one name per line) or a list."""
    data = _json_body()
    mode = data.get('mode', REPLACE)
    if mode not in REGISTER_MODES:
        return jsonify({'error': f'Unknown mode: {mode}'}), 400
    text = data.get('text')
    names = data.get('names')
    if isinstance(text, str):
        names = storage.parse_names(text)
    elif not isinstance(names, list) or not all(isinstance(n, str) for n in names):
        return jsonify({'error': 'Provide "text" or a list of "names".'}), 400

    def command(engine):
        if isinstance(text, str):
            engine.last_input = text
        return engine.register_players(names, mode)

    return _run_command(command)


@app.route('/api/players/rest', methods=['POST'])
def api_toggle_rest():
    """Toggle a player's one-round rest."""
    name = str(_json_body().get('name', '')).strip()
    if not name:
        return jsonify({'error': 'Player name is required.'}), 400
    return _run_command(lambda engine: engine.toggle_rest_once(name))


@app.route('/api/players/remove', methods=['POST'])
def api_remove_player():
    """Remove a player from the waiting list."""
    name = str(_json_body().get('name', '')).strip()
    if not name:
        return jsonify({'error': 'Player name is required.'}), 400
    return _run_command(lambda engine: engine.remove_player(name))


@app.route('/api/players/move', methods=['POST'])
def api_move_player():
    """Move a player between waiting list, priority list, queue and courts."""
    data = _json_body()
    name = str(data.get('name', '')).strip()
    try:
        source = Location.from_dict(data['source'])
        target = Location.from_dict(data['target'])
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        return jsonify({'error': f'Invalid move: {e}'}), 400
    if not name:
        return jsonify({'error': 'Player name is required.'}), 400
    return _run_command(lambda engine: engine.move_player(name, source, target))


@app.route('/api/courts/count', methods=['POST'])
def api_set_court_count():
    """Resize the court list."""
    try:
        count = int(_json_body().get('count'))
    except (TypeError, ValueError):
        return jsonify({'error': 'Court count must be an integer.'}), 400
    return _run_command(lambda engine: engine.set_court_count(count))


@app.route('/api/courts/<int:court_id>/toggle', methods=['POST'])
def api_toggle_court(court_id):
    """Enable or disable a court."""
    return _run_command(lambda engine: engine.toggle_court_disabled(court_id))


@app.route('/api/courts/<int:court_id>/rename', methods=['POST'])
def api_rename_court(court_id):
    """AJAX endpoint for editing court name."""
    name = str(_json_body().get('name', ''))
    return _run_command(lambda engine: engine.rename_court(court_id, name))


@app.route('/api/courts/<int:court_id>/finish', methods=['POST'])
def api_finish_court(court_id):
    """Mark the match on a court as finished."""
    return _run_command(lambda engine: engine.finish_court(court_id))


@app.route('/api/formation', methods=['POST'])
def api_run_formation():
    """Form new groups and seat them."""
    return _run_command(lambda engine: engine.run_formation())


@app.route('/api/reset', methods=['POST'])
def api_reset_all():
    """Reset all rotation data. Requires explicit confirmation."""
    if _json_body().get('confirm') is not True:
        return jsonify({'error': 'Reset must be confirmed.'}), 400
    with storage.data_lock():
        engine = get_engine()
        engine.reset_all()
        storage.clear_state()
    app.logger.info('Rotation state reset')
    return jsonify({'success': True, 'state': _state_payload(engine)})


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    app.run(debug=True, port=5000)
