#!/usr/bin/env python3
"""
Flask Web Application for CPU Profile Analyzer
Provides a REST API endpoint for aggregating CPU profile time under locators.
"""

from flask import Flask, request, jsonify
from werkzeug.utils import secure_filename
import os
import tempfile
import json
from profile_analyzer import ProfileAnalyzer
from profile_analyzer.core.errors import ProfileAnalyzerError
from profile_analyzer.web import prepare_results

app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = 500 * 1024 * 1024
app.config['UPLOAD_FOLDER'] = tempfile.gettempdir()

ALLOWED_EXTENSIONS = {'json', 'cpuprofile'}

def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def parse_window(value):
    return float(value) if value not in (None, '') else -1


@app.route('/api/analyze', methods=['POST'])
def analyze_api():
    """
    API endpoint to analyze a CPU profile.
    Accepts: multipart/form-data with fields:
      - 'file': .cpuprofile or trace JSON file
      - 'locators': JSON array of {functionName, moduleName} (required)
      - 'categories': JSON object of category -> locators (optional)
      - 'min' / 'max': sample window bounds (optional, default: -1)
      - 'collapse': 'true'|'false' (optional, default: 'true')
    Returns: JSON with analysis results
    """
    if 'file' not in request.files:
        return jsonify({'error': 'No file provided'}), 400

    file = request.files['file']

    if not file.filename:
        return jsonify({'error': 'No file selected'}), 400

    if not allowed_file(file.filename):
        return jsonify({'error': 'Invalid file type. Only JSON and .cpuprofile files are allowed.'}), 400

    try:
        locators = json.loads(request.form.get('locators', ''))
        categories = json.loads(request.form.get('categories', '{}'))
        window_min = parse_window(request.form.get('min'))
        window_max = parse_window(request.form.get('max'))
    except ValueError as e:
        return jsonify({'error': f'Invalid form field: {e}'}), 400

    collapse = request.form.get('collapse', 'true').lower() == 'true'

    filepath = None
    try:
        analyzer = ProfileAnalyzer(
            locators,
            categories=categories,
            window_min=window_min,
            window_max=window_max,
            collapse_call_frames=collapse
        )

        filename = secure_filename(file.filename)
        filepath = os.path.join(app.config['UPLOAD_FOLDER'], filename)
        file.save(filepath)

        analyzer.process_profile_file(filepath)

        results = prepare_results(analyzer)

        return jsonify(results)

    except ProfileAnalyzerError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        return jsonify({'error': str(e)}), 500
    finally:
        if filepath and os.path.exists(filepath):
            os.remove(filepath)


if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5001)
