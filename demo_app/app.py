#!/usr/bin/env python3
"""
Demo Web Application - Statement Console

A small web front-end that feeds statements to a PocketDB database
and returns the results as JSON.

Endpoints:
- GET  /                    HTML form for typing statements
- POST /api/execute         {"sql": "..."} -> result
- GET  /api/tables          table names with row counts
- GET  /api/tables/<name>   table schema

Run:
    pip install flask
    python app.py

Then visit: http://localhost:5000
"""

import os
import sys

from flask import Flask, jsonify, render_template_string, request

# Add parent directory to path to import pocketdb
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pocketdb import Database
from pocketdb.core.errors import NotFoundError


CONSOLE_PAGE = """<!doctype html>
<html>
<head><title>PocketDB Console</title></head>
<body>
  <h1>PocketDB Console</h1>
  <form method="post" action="{{ url_for('console') }}">
    <textarea name="sql" rows="4" cols="80">{{ sql }}</textarea><br>
    <button type="submit">Run</button>
  </form>
  {% if output is not none %}<pre>{{ output }}</pre>{% endif %}
  <h2>Tables</h2>
  <ul>
  {% for table in tables %}<li>{{ table.name }} ({{ table.rows }} rows)</li>{% endfor %}
  </ul>
</body>
</html>
"""


def create_app(db=None, seed=True):
    """Build the console app around a database."""
    app = Flask(__name__)
    db = db or Database()
    if seed:
        db.seed_defaults()
    app.config['DATABASE'] = db

    def table_summary():
        return [{'name': name, 'rows': db.count(name)} for name in db.tables()]

    @app.route('/', methods=['GET', 'POST'])
    def console():
        """Statement form with the rendered result."""
        sql = ''
        output = None
        if request.method == 'POST':
            sql = request.form.get('sql', '').strip()
            if sql:
                output = db.execute_sql(sql)
        return render_template_string(CONSOLE_PAGE, sql=sql, output=output,
                                      tables=table_summary())

    @app.route('/api/execute', methods=['POST'])
    def api_execute():
        """Execute one statement."""
        payload = request.get_json(silent=True) or {}
        sql = payload.get('sql')
        if not isinstance(sql, str) or not sql.strip():
            return jsonify({'error': "Request body must contain a 'sql' string."}), 400

        result = db.execute(sql)
        app.logger.debug("Executed %r -> ok=%s", sql, result.ok)
        body = result.to_dict()
        body['output'] = result.render()
        return jsonify(body)

    @app.route('/api/tables')
    def api_tables():
        return jsonify({'tables': table_summary()})

    @app.route('/api/tables/<name>')
    def api_describe(name):
        try:
            return jsonify(db.describe(name))
        except NotFoundError as e:
            return jsonify({'error': str(e)}), 404

    return app


if __name__ == '__main__':
    print("\n" + "="*60)
    print("PocketDB Demo - Statement Console")
    print("="*60)
    print("Starting server at http://localhost:5000")
    print("\nPress Ctrl+C to stop the server.\n")

    create_app().run(debug=True, host='0.0.0.0', port=5000)
