#!/usr/bin/env python3
"""
Flask Web Application for Build Trace Analyzer
Provides a REST API endpoint for analyzing clang -ftime-trace files.
"""

from flask import Flask, request, jsonify
from werkzeug.utils import secure_filename
from build_trace_analyzer import AnalysisConfig, BuildAnalyzer, NoEventsError
from build_trace_analyzer.web import prepare_results

app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = 500 * 1024 * 1024

ALLOWED_EXTENSIONS = {'json'}

COUNT_FIELDS = (
    'file_parse_count',
    'file_codegen_count',
    'template_count',
    'function_count',
    'header_count',
    'header_chain_count',
)


def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def config_from_form(form):
    """Build an AnalysisConfig from optional form fields."""
    config = AnalysisConfig()
    for name in COUNT_FIELDS:
        value = form.get(name)
        if value is not None and value.strip():
            setattr(config, name, int(value))
    if 'only_root_headers' in form:
        config.only_root_headers = form.get('only_root_headers', 'true').lower() == 'true'
    return config


@app.route('/api/analyze', methods=['POST'])
def analyze_api():
    """
    API endpoint to analyze one or more trace files.
    Accepts: multipart/form-data with fields:
      - 'files': one or more clang -ftime-trace JSON files ('file' also accepted)
      - '<view>_count': optional integer overrides for the top-N sizes
      - 'only_root_headers': 'true'|'false' (optional, default: 'true')
    Returns: JSON with analysis results
    """
    files = request.files.getlist('files') + request.files.getlist('file')
    files = [f for f in files if f.filename]

    if not files:
        return jsonify({'error': 'No file provided'}), 400

    try:
        config = config_from_form(request.form)
    except ValueError:
        return jsonify({'error': 'Count fields must be integers'}), 400

    analyzer = BuildAnalyzer(config)
    for file in files:
        filename = secure_filename(file.filename)
        if not allowed_file(filename):
            analyzer.skipped_files[filename or file.filename] = 'invalid file type, only JSON files are allowed'
            continue
        analyzer.process_trace_data(filename, file.read())

    try:
        report = analyzer.analyze()
    except NoEventsError as e:
        return jsonify({
            'error': str(e),
            'skipped_files': analyzer.skipped_files,
            'empty_files': analyzer.empty_files
        }), 422

    return jsonify(prepare_results(report, analyzer))


if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5001)
