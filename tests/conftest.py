# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
from unittest.mock import Mock

import pytest

from csv_link_editor.api import create_app
from csv_link_editor.engine.session import EditorSession
from csv_link_editor.logging.init import reset_logging
from csv_link_editor.sync.sheets_client import SheetValues, SheetsClient


SAMPLE_CSV = (
    "Title,Content,Content 2,Notes\n"
    'Intro,"<p>See <a href=""https://example.com/a"">A</a></p>",,plain\n'
    "Middle,no links here,,\n"
    "Outro,,\"<a class='x' href='https://example.com/b'>B</a> and <a href=\"\"/c\"\">C</a>\",done\n"
)


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        # keep env overrides from the developer shell out of the tests
        for var in ("EDITOR_HOST", "EDITOR_PORT", "EDITOR_LOG_LEVEL", "GOOGLE_ACCESS_TOKEN"):
            monkeypatch.delenv(var, raising=False)
        yield p


@pytest.fixture()
def sample_csv() -> str:
    return SAMPLE_CSV


@pytest.fixture()
def sample_csv_file(temp_workdir: Path, sample_csv: str) -> Path:
    f = temp_workdir / "data" / "pages.csv"
    f.write_text(sample_csv, encoding="utf-8")
    return f


@pytest.fixture()
def sample_config_yaml() -> str:
    return """server:
  host: 0.0.0.0
  port: 8080
  cors_origins: ["http://localhost:5173"]
editor:
  page_size: 2
  default_link_columns: [Content, Content 2]
sheets:
  header_rows: 1
logging:
  level: INFO
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "editor.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def session(sample_csv: str) -> EditorSession:
    s = EditorSession()
    s.load_document(sample_csv, "pages.csv")
    return s


@pytest.fixture()
def fake_sheets_client() -> Mock:
    client = Mock(spec=SheetsClient)
    client.get_sheet_name.return_value = "Pages"
    client.get_values.return_value = SheetValues(
        headers=["Title", "Content"],
        rows=[
            ["Intro", '<a href="https://example.com/a">A</a>'],
            ["Short"],
        ],
    )
    client.batch_update.side_effect = lambda spreadsheet_id, sheet_name, updates: len(updates)
    return client


@pytest.fixture()
def app(fake_sheets_client: Mock):
    flask_app = create_app(sheets_client_factory=lambda token: fake_sheets_client)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def clean_logging():
    reset_logging()
    yield
    reset_logging()
