import io

import pytest
from PIL import Image

from qtmosaic import __version__
from qtmosaic.app import create_app
from qtmosaic.config import Settings


@pytest.fixture
def client():
    app = create_app(Settings())
    app.config['TESTING'] = True
    return app.test_client()


def post_image(client, data, filename='white.png', **params):
    form = {'file': (io.BytesIO(data), filename)}
    form.update(params)
    return client.post('/quadtree/render', data=form, content_type='multipart/form-data')


def test_version(client):
    response = client.get('/quadtree/version')
    assert response.status_code == 200
    assert response.get_json() == __version__


def test_render_returns_png(client, white_png):
    response = post_image(client, white_png)

    assert response.status_code == 200
    assert response.mimetype == 'image/png'
    with Image.open(io.BytesIO(response.data)) as image:
        assert image.size == (4, 4)
        assert image.getpixel((0, 0)) == (255, 255, 255)
        assert image.getpixel((3, 3)) == (0, 0, 0)


def test_render_uses_threshold_argument(client, white_png):
    response = post_image(client, white_png, threshold='765')

    assert response.status_code == 200
    with Image.open(io.BytesIO(response.data)) as image:
        assert image.getpixel((0, 0)) == (0, 0, 0)


@pytest.mark.parametrize("params", [{'threshold': '-1'}, {'threshold': '766'}, {'min_rect_size': '0'}])
def test_render_rejects_bad_parameters(client, white_png, params):
    assert post_image(client, white_png, **params).status_code == 400


def test_render_rejects_unsupported_file(client):
    response = post_image(client, b'hello', filename='notes.txt')
    assert response.status_code == 400
    assert "Unsupported file extension" in response.get_data(as_text=True)


def test_render_rejects_corrupt_image(client):
    assert post_image(client, b'garbage', filename='broken.png').status_code == 400
