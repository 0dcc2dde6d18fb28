from flask import Blueprint, current_app, send_from_directory

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return send_from_directory(current_app.config['PUBLIC_DIR'], 'index.html')


@main.route('/<path:filename>')
def public_file(filename):
    """Serve the built client; hashed assets under static/ are cached long-term."""
    max_age = None
    if filename.startswith('static/'):
        max_age = current_app.config['STATIC_CACHE_MAX_AGE']
    return send_from_directory(current_app.config['PUBLIC_DIR'], filename, max_age=max_age)
