# tests/conftest.py
"""
Shared fixtures and sample tree documents for the blockscript tests.
"""

import itertools

import pytest

from blockscript.catalog import default_registry
from blockscript.model import BlockInstance

HEADER = (
    "# Visual Script Generated Code\n"
    "# Note: Some blocks might require specific libraries (e.g., requests for HTTP).\n"
    "\n"
)

EMPTY_MESSAGE = "# Drag and drop blocks to generate Python code."

_ids = itertools.count(1)


def make(block_type_id, *children, instance_id=None, **params):
    """Build a block instance; keyword arguments become raw parameters."""
    return BlockInstance(
        instance_id=instance_id or f"test_{next(_ids)}",
        block_type_id=block_type_id,
        params={k: str(v) for k, v in params.items()},
        children=list(children),
    )


@pytest.fixture
def registry():
    return default_registry()


# ─── Sample documents ─────────────────────────────────────────────────

LOOP_DOC = """\
; counts to three
(define_variable :variableName total :value 0)
(loop_range :count 3 :loopVariable i
  (print_message :message i))
(print_message :message i)
"""

NESTED_DOC = """\
(loop_range :instanceId outer :count 2 :loopVariable row
  (loop_range :instanceId inner :count 3 :loopVariable col :collapsed true
    (print_message :message col))
  (print_message :message "row done"))
"""

HTTP_DOC = """\
(http_request :method POST
              :url "https://api.example.com/items"
              :headers "Content-Type: application/json"
              :body "{\\"name\\": \\"widget\\"}"
              :authType "Bearer Token"
              :authToken secret-token
              :responseVariable created)
(print_message :message created)
"""

DATAFRAME_DOC = """\
(dataframe_read_csv :filePath "sales.csv" :outputVar sales)
(dataframe_filter :dataframe sales :column amount :operator ">" :value 100 :outputVar large)
(dataframe_for_each_row :dataframe large :indexVariable idx :rowVariable row
  (print_message :message row))
(dataframe_write_csv :dataframe large :filePath "large.csv" :includeIndex no)
"""

BROWSER_DOC = """\
(browser_session :browser firefox :headless false :pageVariable page
  (browser_goto :page page :url "https://example.com")
  (browser_fill :page page :selector "#q" :text "blocks")
  (browser_click :page page :selector "button[type=submit]")
  (browser_get_text :page page :selector h1 :outputVar heading)
  (print_message :message heading)
  (browser_screenshot :page page :path "result.png"))
"""

GUI_DOC = """\
(gui_click :x 100 :y 200 :button right :clicks 2)
(gui_type_text :text "hello" :interval 0.1)
(gui_hotkey :keys "ctrl+s")
(gui_screenshot :filename "screen.png" :outputVar shot)
"""

JSON_DOC = """\
[
  {
    "instanceId": "block_a",
    "blockTypeId": "loop_range",
    "params": {"count": "2", "loopVariable": "n"},
    "isCollapsed": false,
    "children": [
      {"instanceId": "block_b", "blockTypeId": "print_message", "params": {"message": "n"}}
    ]
  }
]
"""
