# app.py
from flask import Flask, jsonify, request, g
from flask_cors import CORS
from routes.meditation import lumi_bp
from utils.verse_lookup import load_bible_data
from config import Config
import os
import logging
import time
import sys
from werkzeug.middleware.proxy_fix import ProxyFix

# Configure logging to output to stdout
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)
app.config.from_object(Config)

# Use ProxyFix to handle proxy headers properly
app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

app.json.sort_keys = False  # Preserve order of keys in JSON responses
app.json.ensure_ascii = False  # Korean text stays readable in responses
app.json.compact = True
app.config['MAX_CONTENT_LENGTH'] = 64 * 1024  # A verse reference never needs more
app.config['CORS_HEADERS'] = 'Content-Type'

CORS(app, resources={
    r"/api/*": {
        "origins": "*",
        "methods": ["POST", "OPTIONS"],
        "allow_headers": ["Content-Type"],
        "expose_headers": ["Content-Type"]
    }
})

# Ensure URLs with or without trailing slashes are handled the same way
app.url_map.strict_slashes = False

# Load the static verse table once at startup
bible_data = load_bible_data(app.config['BIBLE_DATA_PATH'])

if not app.config.get('OPENAI_API_KEY'):
    logger.warning("OPENAI_API_KEY is not set; /api/lumi will answer with the example meditation")

app.register_blueprint(lumi_bp, url_prefix='/api')

@app.before_request
def before_request():
    g.start_time = time.time()

@app.after_request
def after_request(response):
    # Log request duration
    duration = time.time() - g.get('start_time', time.time())
    logger.info(f"Request to {request.path} took {duration:.2f} seconds")
    return response

@app.route('/health', methods=['GET'])
def health():
    """Health check endpoint that also reports verse table and credential status"""
    return jsonify({
        'status': 'healthy',
        'verses_loaded': len(bible_data),
        'openai': 'configured' if app.config.get('OPENAI_API_KEY') else 'fallback',
        'timestamp': time.time()
    })

if __name__ == '__main__':
    print("Starting Flask server...")
    port = int(os.getenv('PORT', 5001))
    app.run(debug=True, port=port)
