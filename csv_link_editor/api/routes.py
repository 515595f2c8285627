"""
Flask routes for the CSV link editor API.
"""

from __future__ import annotations

import logging

from flask import Blueprint, Response, current_app, jsonify, request

from ..engine.errors import ValidationError
from ..engine.session import EditorSession, LoadSummary, UpdateResult

# Create blueprint
api = Blueprint("api", __name__)

logger = logging.getLogger(__name__)


def _session() -> EditorSession:
    return current_app.extensions["csv_link_editor"]


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("JSON object body is required")
    return data


def _access_token() -> str | None:
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        token = header[7:].strip()
        if token:
            return token
    return current_app.config["EDITOR_CONFIG"].sheets.access_token


def _load_response(summary: LoadSummary) -> dict:
    body = {
        "success": True,
        "totalRows": summary.row_count,
        "columns": summary.columns,
        "fileName": summary.source_name,
    }
    if summary.remote is not None:
        body.update({
            "googleSpreadsheetId": summary.remote.spreadsheet_id,
            "googleSheetGid": summary.remote.gid,
            "googleSheetName": summary.remote.sheet_name,
        })
    return body


def _update_response(result: UpdateResult) -> dict:
    return {"success": True, "isDirty": result.is_dirty, "dirtyCount": result.dirty_count}


def _download_name(source_name: str) -> str:
    if not source_name:
        return "export-modified.csv"
    if source_name.lower().endswith(".csv"):
        return source_name[:-4] + "-modified.csv"
    return source_name + "-modified.csv"


@api.route("/health")
def health():
    """Health check endpoint."""
    meta = _session().metadata()
    return jsonify({"status": "ok", "fileName": meta.source_name, "totalRows": meta.row_count})


# --- DOCUMENT ---

@api.route("/api/upload", methods=["POST"])
def upload():
    """Load CSV content sent as JSON ``{content, fileName}``."""
    data = _json_body()
    content = data.get("content")
    if not content or not isinstance(content, str):
        return jsonify({"error": "content is required"}), 400
    file_name = data.get("fileName") or "uploaded.csv"
    summary = _session().load_document(content, str(file_name))
    return jsonify(_load_response(summary))


@api.route("/api/set-link-columns", methods=["POST"])
def set_link_columns():
    data = _json_body()
    index = _session().designate_link_columns(data.get("columns") or [])
    return jsonify({
        "success": True,
        "totalLinksRows": len(index),
        "linkColumns": list(index.columns),
    })


@api.route("/api/metadata")
def metadata():
    return jsonify(_session().metadata().to_dict())


@api.route("/api/rows")
def get_rows():
    page_size = current_app.config["EDITOR_CONFIG"].editor.page_size
    start = request.args.get("start", default=0, type=int)
    count = request.args.get("count", default=page_size, type=int)
    return jsonify([r.to_dict() for r in _session().get_rows(start, count)])


@api.route("/api/row/<int(signed=True):index>")
def get_row(index: int):
    return jsonify({"index": index, "data": _session().get_row(index)})


@api.route("/api/row/<int(signed=True):index>", methods=["PATCH"])
def update_row(index: int):
    data = _json_body()
    column = data.get("column")
    value = data.get("value")
    if not column or value is None:
        return jsonify({"error": "column and value are required"}), 400
    if not isinstance(column, str) or not isinstance(value, str):
        return jsonify({"error": "column and value must be strings"}), 400
    result = _session().update_cell(index, column, value)
    return jsonify(_update_response(result))


@api.route("/api/row/<int(signed=True):index>/links")
def get_cell_links(index: int):
    column = request.args.get("column", "")
    if not column:
        return jsonify({"error": "column is required"}), 400
    links = _session().links_in_cell(index, column)
    return jsonify({"index": index, "column": column, "links": [link.to_dict() for link in links]})


@api.route("/api/row/<int(signed=True):index>/links/<int(signed=True):ordinal>", methods=["PATCH"])
def replace_cell_link(index: int, ordinal: int):
    data = _json_body()
    column = data.get("column")
    href = data.get("href")
    if not isinstance(column, str) or not column or not isinstance(href, str):
        return jsonify({"error": "column and href are required"}), 400
    result = _session().replace_link(index, column, ordinal, href)
    return jsonify(_update_response(result))


@api.route("/api/download")
def download():
    """Download the current document as CSV."""
    session = _session()
    content = session.export_document()
    file_name = _download_name(session.metadata().source_name)
    return Response(
        content,
        mimetype="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )


# --- NAVIGATION ---

@api.route("/api/links/next")
def next_link():
    from_row = request.args.get("from", default=-1, type=int)
    return jsonify({"rowIndex": _session().next_link_row(from_row)})


@api.route("/api/links/prev")
def prev_link():
    from_row = request.args.get("from", default=None, type=int)
    return jsonify({"rowIndex": _session().prev_link_row(from_row)})


@api.route("/api/links/all")
def all_links():
    return jsonify({"rowIndices": _session().all_link_rows()})


@api.route("/api/changes")
def changes():
    return jsonify({"changes": [c.to_dict() for c in _session().changes()]})


# --- GOOGLE SHEETS ---

@api.route("/api/google/load-sheet", methods=["POST"])
def load_sheet():
    data = _json_body()
    spreadsheet_id = data.get("spreadsheetId")
    if not spreadsheet_id:
        return jsonify({"error": "spreadsheetId is required"}), 400
    token = _access_token()
    if not token:
        return jsonify({"error": "Not authenticated. Provide a Google access token."}), 401
    client = current_app.config["SHEETS_CLIENT_FACTORY"](token)
    gid = data.get("gid")
    summary = _session().load_remote_sheet(client, str(spreadsheet_id), str(gid) if gid else None)
    return jsonify(_load_response(summary))


@api.route("/api/google/save-sheet", methods=["POST"])
def save_sheet():
    session = _session()
    if session.metadata().remote is None:
        return jsonify({"error": "No Google Sheet loaded. Please load a sheet first."}), 400
    token = _access_token()
    if not token:
        return jsonify({"error": "Not authenticated. Provide a Google access token."}), 401
    client = current_app.config["SHEETS_CLIENT_FACTORY"](token)
    cells_updated = session.push_changes(client)
    body = {"success": True, "cellsUpdated": cells_updated}
    if cells_updated == 0:
        body["message"] = "No changes to save"
    return jsonify(body)
