from flask_restx import reqparse
from werkzeug.datastructures import FileStorage

render_parser = reqparse.RequestParser()
render_parser.add_argument('file', location='files', type=FileStorage, required=True, help='Image file to render')
render_parser.add_argument('threshold', location='values', type=int, required=False, help='Color-sum threshold for outlining a region', default=None)
render_parser.add_argument('min_rect_size', location='values', type=int, required=False, help='Smallest rectangle side that is still split', default=None)
