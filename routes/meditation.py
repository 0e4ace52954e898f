# routes/meditation.py
from flask import Blueprint, current_app, jsonify, request
import logging

from utils.meditation import handle_meditation_request
from utils.verse_lookup import load_bible_data

lumi_bp = Blueprint('lumi', __name__)
logger = logging.getLogger(__name__)

@lumi_bp.route('/lumi', methods=['POST'])
def create_meditation():
    """Generate a meditation for the submitted verse reference"""
    bible_data = load_bible_data(current_app.config['BIBLE_DATA_PATH'])
    payload, status = handle_meditation_request(
        request.get_data(as_text=True),
        current_app.config,
        bible_data
    )
    if payload.get('success'):
        logger.info(f"Meditation ready for {payload['data']['verseInput']} (fallback={payload.get('fallback', False)})")
    return jsonify(payload), status
