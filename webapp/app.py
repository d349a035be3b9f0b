"""
Flask web application serving the Special:Bucket page.

Demonstrates the full rendering path:
- query proxying through the in-process "bucket" API action
- result tables with typed value formatting
- pagination buttons that keep the active query
- escaped error messages for failed queries
"""

from flask import Flask, render_template, request, jsonify, abort
from markupsafe import Markup
from html import unescape
import re
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from bucket_page.api.dispatcher import ApiDispatcher
from bucket_page.api.memory import BucketStore, register_store
from bucket_page.formatter import get_result_table, print_error
from bucket_page.pagination import get_page_links
from bucket_page.query import run_query
from bucket_page.utils.exceptions import BucketError
from bucket_page.utils.messages import MessageResolver
from bucket_page.utils.title import Title

SPECIAL_PAGE = "Special:Bucket"

DEFAULT_CONFIG = {
    'BUCKET_DEFAULT_LIMIT': 20,
    'BUCKET_MAX_LIMIT': 500,
    'BUCKET_SCRIPT_PATH': '/index.php',
    'BUCKET_FIXTURE': os.path.join(os.path.dirname(__file__), 'sample_buckets.json'),
}

_LINK_RE = re.compile(r'\[\[:([^\]|]+)\]\]')
_ITALIC_RE = re.compile(r"''(.+?)''")


def wikitext_to_html(text):
    """
    Turn the wikitext constructs the formatter emits into HTML.

    Only page links and italics are produced by the formatter; everything
    else in its output is already HTML or entity-escaped text.
    """
    def link(match):
        target = match.group(1)
        # link text is entity-escaped wikitext; the href needs the bare title
        href = Title(unescape(target)).get_article_path()
        return f'<a href="{href}">{target}</a>'

    html = _LINK_RE.sub(link, text)
    html = _ITALIC_RE.sub(r'<i>\1</i>', html)
    return Markup(html)


def _int_arg(name, default, maximum):
    """Read a non-negative integer query argument, clamped to maximum."""
    value = request.args.get(name, '')
    try:
        number = int(value)
    except ValueError:
        return default
    return max(0, min(number, maximum))


def create_app(store=None, config=None):
    """
    Create the Flask app.

    Args:
        store: BucketStore to query (a fresh one, optionally loaded from
            BUCKET_FIXTURE, if omitted)
        config: Config overrides
    """
    app = Flask(__name__)
    app.config.update(DEFAULT_CONFIG)
    app.config.from_prefixed_env()
    if config:
        app.config.update(config)

    dispatcher = ApiDispatcher()
    if store is None:
        store = BucketStore()
        if app.config['BUCKET_FIXTURE']:
            store.load_json(app.config['BUCKET_FIXTURE'])
    register_store(dispatcher, store)

    messages = MessageResolver()
    app.extensions['bucket_dispatcher'] = dispatcher
    app.extensions['bucket_store'] = store
    app.jinja_env.filters['wikitext'] = wikitext_to_html

    def special_page():
        """Render a query form, its result table and paging controls."""
        bucket = request.args.get('bucket', '').strip()
        select = request.args.get('select', '').strip()
        where = request.args.get('where', '').strip()
        max_limit = app.config['BUCKET_MAX_LIMIT']
        limit = _int_arg('limit', app.config['BUCKET_DEFAULT_LIMIT'], max_limit)
        offset = _int_arg('offset', 0, sys.maxsize)

        context = {
            'messages': messages,
            'buckets': store.list_buckets(),
            'bucket': bucket,
            'select': select,
            'where': where,
            'table': '',
            'error': '',
            'links': None,
            'query': None,
            'empty': False,
        }

        if bucket:
            try:
                result = run_query(request, bucket, select, where, limit, offset,
                                   dispatcher=dispatcher)
            except BucketError as e:
                app.logger.warning("Bucket query failed: %s", e)
                context['error'] = print_error(str(e))
            else:
                if result.error:
                    context['error'] = print_error(result.error)
                else:
                    context['table'] = get_result_table(result.schema, result.fields, result.rows)
                    context['query'] = result.data.get('bucketQuery')
                    context['empty'] = not result.rows
                    extra = {key: value for key, value in
                             (('bucket', bucket), ('select', select), ('where', where)) if value}
                    title = Title(SPECIAL_PAGE, script_path=app.config['BUCKET_SCRIPT_PATH'])
                    context['links'] = get_page_links(title, limit, offset, extra,
                                                      has_next=result.has_next,
                                                      messages=messages)

        return render_template('bucket.html', **context)

    @app.route('/wiki/Special:Bucket')
    def special_bucket():
        return special_page()

    @app.route('/index.php')
    def index_php():
        """Script entry point; only the bucket special page lives here."""
        title = Title(request.args.get('title', ''))
        if title != Title(SPECIAL_PAGE):
            abort(404)
        return special_page()

    @app.route('/api.php', methods=['GET'])
    def api():
        """JSON proxy to the in-process API actions."""
        try:
            return jsonify(dispatcher.execute(request.args.to_dict()))
        except BucketError as e:
            app.logger.warning("API request failed: %s", e)
            return jsonify({'error': str(e)}), 400

    return app


if __name__ == '__main__':
    app = create_app()
    print("\n" + "="*60)
    print("Bucket Special Page Running!")
    print("Open http://localhost:5000/wiki/Special:Bucket in your browser")
    print("="*60 + "\n")
    app.run(debug=True, port=5000)
