from flask import Flask, current_app, send_file
from flask_restx import Api, Resource

from . import __version__
from .config import load_settings
from .logging_setup import setup_logging
from .parsers import render_parser
from .quadtree import InvalidGeometry, render_image
from .utils import ImageLoadError, decode_rgba, encode_png, validate_image

# Averaged channels can't sum past 3 * 255
MAX_COLOR_THRESHOLD = 765


def create_app(settings=None):
    settings = settings or load_settings()

    app = Flask(__name__)
    app.config['COLOR_THRESHOLD'] = settings.color_threshold
    app.config['MIN_RECT_SIZE'] = settings.min_rect_size

    api = Api(app, version=__version__, title='qtmosaic', description='Quadtree outline mosaics of uploaded images')
    ns = api.namespace('quadtree', description='Quadtree rendering')

    # Returns version number
    @ns.route('/version')
    class Version(Resource):
        def get(self):
            return api.version

    # Render an uploaded image
    # Return - the mosaic as a PNG
    @ns.route('/render')
    class Render(Resource):
        @api.expect(render_parser)
        def post(self):
            args = render_parser.parse_args()
            file = args['file']
            threshold = args['threshold']
            min_rect_size = args['min_rect_size']

            if threshold is None:
                threshold = current_app.config['COLOR_THRESHOLD']
            if min_rect_size is None:
                min_rect_size = current_app.config['MIN_RECT_SIZE']

            if file.filename == '':
                return "No selected file", 400

            if threshold < 0 or threshold > MAX_COLOR_THRESHOLD:
                return f"Threshold must be between 0 and {MAX_COLOR_THRESHOLD}.", 400

            if min_rect_size < 1:
                return "Minimum rectangle size must be at least 1.", 400

            valid, message = validate_image(file)
            if not valid:
                return message, 400

            try:
                pixels, width, height = decode_rgba(file.read())
                output = render_image(pixels, width, height, threshold, min_rect_size)
            except (ImageLoadError, InvalidGeometry) as e:
                current_app.logger.warning(f"Render of {file.filename} failed: {e}")
                return str(e), 400

            current_app.logger.info(f"Rendered {file.filename} ({width}x{height}) threshold {threshold} min rect {min_rect_size}")
            return send_file(encode_png(output, width, height), mimetype='image/png',
                             download_name='quadtree.png')

    return app


def main():
    settings = load_settings()
    setup_logging(settings.log_level, settings.log_folder)
    app = create_app(settings)
    app.run(host='0.0.0.0', port=8000)


if __name__ == '__main__':
    main()
