import io

import pytest
from PIL import Image


@pytest.fixture
def white_png():
    image_buffer = io.BytesIO()
    Image.new('RGBA', (4, 4), (255, 255, 255, 255)).save(image_buffer, format='PNG')
    return image_buffer.getvalue()


@pytest.fixture
def clean_env(monkeypatch):
    for name in ('QTMOSAIC_COLOR_THRESHOLD', 'QTMOSAIC_MIN_RECT_SIZE', 'QTMOSAIC_LOG_LEVEL', 'QTMOSAIC_LOG_FOLDER'):
        monkeypatch.delenv(name, raising=False)
    # No .env lookups from the test runner's directory
    monkeypatch.setattr('qtmosaic.config.load_dotenv', lambda *args, **kwargs: False)
