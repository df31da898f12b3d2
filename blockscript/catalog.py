# blockscript/catalog.py
"""
Standard block catalog.

Each template is a module-level function taking the resolved parameter texts
(literals or symbol references, see :mod:`blockscript.resolver`) and returning
Python source.  Templates that branch on a select value recover it with
:func:`~blockscript.literals.string_value`; a template that cannot render its
parameters raises :class:`~blockscript.errors.TemplateError`, which the
compiler turns into a diagnostic comment.

Multi-line literals are always placed at column 0 of the template output so
that their continuation lines are not shifted by the template's own
indentation.
"""

from __future__ import annotations

import keyword
from typing import Mapping, Tuple

from blockscript.emitter import CodeEmitter
from blockscript.errors import TemplateError
from blockscript.literals import NONE_LITERAL, is_blank_literal, quote_string, string_value
from blockscript.model import (
    Binding,
    BlockType,
    Option,
    ParameterDefinition,
    ValueKind,
    VisibilityCondition,
)
from blockscript.registry import BlockRegistry
from blockscript.resolver import BODY_METHODS

__all__ = ["STANDARD_BLOCKS", "HTTP_METHODS", "default_registry"]

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH")
AUTH_TYPES = ("None", "Bearer Token", "Basic Auth")
MOUSE_BUTTONS = ("left", "right", "middle")
FILTER_OPERATORS = ("==", "!=", ">", ">=", "<", "<=", "contains")
BROWSERS = ("chromium", "firefox", "webkit")


# ═══════════════════════════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════════════════════════

def _identifier(params: Mapping[str, str], param_id: str, block_type_id: str) -> str:
    name = params[param_id]
    if not name.isidentifier() or keyword.iskeyword(name):
        raise TemplateError(block_type_id, f"{name!r} is not a valid variable name")
    return name


def _symbol_ref(params: Mapping[str, str], param_id: str, block_type_id: str, what: str) -> str:
    """A parameter that must name a variable defined earlier in the script."""
    ref = params[param_id]
    if string_value(ref) is not None:
        raise TemplateError(block_type_id, f"{string_value(ref)!r} is not a defined {what}")
    return ref


def _choice(params: Mapping[str, str], param_id: str, block_type_id: str, allowed: Tuple[str, ...]) -> str:
    value = string_value(params[param_id])
    if value not in allowed:
        raise TemplateError(block_type_id, f"unsupported {param_id} {params[param_id]}")
    return value


def _options(*values: str) -> Tuple[Option, ...]:
    return tuple(Option(v) for v in values)


# ═══════════════════════════════════════════════════════════════════════════
# CORE BLOCKS
# ═══════════════════════════════════════════════════════════════════════════

def print_message(p: Mapping[str, str]) -> str:
    return f"print({p['message']})"


def read_file(p: Mapping[str, str]) -> str:
    target = _identifier(p, "variableName", "read_file")
    em = CodeEmitter()
    with em.block(f'with open({p["filePath"]}, "r", encoding="utf-8") as handle:'):
        em.emit(f"{target} = handle.read()")
    return em.get_code()


def write_file(p: Mapping[str, str]) -> str:
    mode = p["mode"]
    if string_value(mode) is not None:
        _choice(p, "mode", "write_file", ("w", "a"))
    em = CodeEmitter()
    with em.block(f'with open({p["filePath"]}, {mode}, encoding="utf-8") as handle:'):
        em.emit(f"handle.write({p['content']})")
    return em.get_code()


def loop_range(p: Mapping[str, str]) -> str:
    var = _identifier(p, "loopVariable", "loop_range")
    return f"for {var} in range({p['count']}):"


def define_variable(p: Mapping[str, str]) -> str:
    return f"{_identifier(p, 'variableName', 'define_variable')} = {p['value']}"


def http_request(p: Mapping[str, str]) -> str:
    method = _choice(p, "method", "http_request", HTTP_METHODS)
    target = _identifier(p, "responseVariable", "http_request")
    auth_type = string_value(p["authType"]) or "None"

    em = CodeEmitter()
    em.requires("requests", "import requests")
    em.emit("request_headers = {}")
    if p["headers"] != NONE_LITERAL:
        em.emit(f"raw_headers = {p['headers']}")
        with em.block("for header_line in raw_headers.splitlines():"):
            with em.block('if ":" in header_line:'):
                em.emit('key, value = header_line.split(":", 1)')
                em.emit("request_headers[key.strip()] = value.strip()")

    auth = NONE_LITERAL
    if auth_type == "Bearer Token" and not is_blank_literal(p["authToken"]):
        em.emit_comment("Authentication: Bearer Token")
        em.emit(f'request_headers["Authorization"] = "Bearer " + {p["authToken"]}')
    elif auth_type == "Basic Auth" and not is_blank_literal(p["authBasicUser"]) \
            and not is_blank_literal(p["authBasicPass"]):
        em.emit_comment("Authentication: Basic Auth")
        em.emit(f"request_auth = ({p['authBasicUser']}, {p['authBasicPass']})")
        auth = "request_auth"

    data = NONE_LITERAL
    if method in BODY_METHODS and p["body"] != NONE_LITERAL:
        em.emit(f"request_body = {p['body']}")
        data = "request_body"

    em.emit(
        f'response = requests.request("{method}", {p["url"]}, headers=request_headers, '
        f"auth={auth}, data={data}, timeout=30)"
    )
    em.emit("response.raise_for_status()")
    with em.block("try:"):
        em.emit(f"{target} = response.json()")
    with em.block("except ValueError:"):
        em.emit(f"{target} = response.text")
    return em.get_code()


def custom_function(p: Mapping[str, str]) -> str:
    function = p["functionName"].strip()
    if not function:
        raise TemplateError("custom_function", "function name is empty")
    call = f"{function}({p['args'].strip()})"
    if p["outputVar"]:
        return f"{_identifier(p, 'outputVar', 'custom_function')} = {call}"
    return call


# ═══════════════════════════════════════════════════════════════════════════
# GUI AUTOMATION (pyautogui)
# ═══════════════════════════════════════════════════════════════════════════

def gui_click(p: Mapping[str, str]) -> str:
    button = _choice(p, "button", "gui_click", MOUSE_BUTTONS)
    x_blank, y_blank = is_blank_literal(p["x"]), is_blank_literal(p["y"])
    if x_blank != y_blank:
        raise TemplateError("gui_click", "x and y must be given together")
    position = "" if x_blank else f"{p['x']}, {p['y']}, "
    em = CodeEmitter()
    em.requires("pyautogui", "import pyautogui")
    em.emit(f'pyautogui.click({position}clicks={p["clicks"]}, button="{button}")')
    return em.get_code()


def gui_type_text(p: Mapping[str, str]) -> str:
    em = CodeEmitter()
    em.requires("pyautogui", "import pyautogui")
    em.emit(f"pyautogui.write({p['text']}, interval={p['interval']})")
    return em.get_code()


def gui_hotkey(p: Mapping[str, str]) -> str:
    keys = string_value(p["keys"])
    if keys is None:
        args = f'*{p["keys"]}.split("+")'
    else:
        parts = [k.strip().lower() for k in keys.split("+") if k.strip()]
        if not parts:
            raise TemplateError("gui_hotkey", "no keys given")
        args = ", ".join(quote_string(k) for k in parts)
    em = CodeEmitter()
    em.requires("pyautogui", "import pyautogui")
    em.emit(f"pyautogui.hotkey({args})")
    return em.get_code()


def gui_screenshot(p: Mapping[str, str]) -> str:
    target = _identifier(p, "outputVar", "gui_screenshot")
    em = CodeEmitter()
    em.requires("pyautogui", "import pyautogui")
    em.emit(f"{target} = pyautogui.screenshot()")
    if not is_blank_literal(p["filename"]):
        em.emit(f"{target}.save({p['filename']})")
    return em.get_code()


# ═══════════════════════════════════════════════════════════════════════════
# DATA FRAMES (pandas)
# ═══════════════════════════════════════════════════════════════════════════

def dataframe_read_csv(p: Mapping[str, str]) -> str:
    target = _identifier(p, "outputVar", "dataframe_read_csv")
    em = CodeEmitter()
    em.requires("pandas", "import pandas as pd")
    em.emit(f"{target} = pd.read_csv({p['filePath']}, sep={p['separator']})")
    return em.get_code()


def dataframe_filter(p: Mapping[str, str]) -> str:
    frame = _symbol_ref(p, "dataframe", "dataframe_filter", "data frame")
    target = _identifier(p, "outputVar", "dataframe_filter")
    op = _choice(p, "operator", "dataframe_filter", FILTER_OPERATORS)
    column = f"{frame}[{p['column']}]"
    if op == "contains":
        mask = f"{column}.astype(str).str.contains({p['value']}, regex=False)"
    else:
        mask = f"{column} {op} {p['value']}"
    return f"{target} = {frame}[{mask}]"


def dataframe_for_each_row(p: Mapping[str, str]) -> str:
    frame = _symbol_ref(p, "dataframe", "dataframe_for_each_row", "data frame")
    index = _identifier(p, "indexVariable", "dataframe_for_each_row")
    row = _identifier(p, "rowVariable", "dataframe_for_each_row")
    return f"for {index}, {row} in {frame}.iterrows():"


def dataframe_write_csv(p: Mapping[str, str]) -> str:
    frame = _symbol_ref(p, "dataframe", "dataframe_write_csv", "data frame")
    return f"{frame}.to_csv({p['filePath']}, index={p['includeIndex']})"


# ═══════════════════════════════════════════════════════════════════════════
# BROWSER (playwright)
# ═══════════════════════════════════════════════════════════════════════════

def browser_session(p: Mapping[str, str]) -> str:
    browser = _choice(p, "browser", "browser_session", BROWSERS)
    page = _identifier(p, "pageVariable", "browser_session")
    em = CodeEmitter()
    em.requires("playwright", "from playwright.sync_api import sync_playwright")
    with em.block("with sync_playwright() as playwright:"):
        em.emit(f"browser = playwright.{browser}.launch(headless={p['headless']})")
        em.emit(f"{page} = browser.new_page()")
    return em.get_code()


def _page(p: Mapping[str, str], block_type_id: str) -> str:
    return _symbol_ref(p, "page", block_type_id, "browser page")


def browser_goto(p: Mapping[str, str]) -> str:
    return f"{_page(p, 'browser_goto')}.goto({p['url']})"


def browser_click(p: Mapping[str, str]) -> str:
    return f"{_page(p, 'browser_click')}.click({p['selector']})"


def browser_fill(p: Mapping[str, str]) -> str:
    return f"{_page(p, 'browser_fill')}.fill({p['selector']}, {p['text']})"


def browser_get_text(p: Mapping[str, str]) -> str:
    page = _page(p, "browser_get_text")
    target = _identifier(p, "outputVar", "browser_get_text")
    return f"{target} = {page}.inner_text({p['selector']})"


def browser_screenshot(p: Mapping[str, str]) -> str:
    page = _page(p, "browser_screenshot")
    if is_blank_literal(p["path"]):
        return f"{page}.screenshot()"
    return f"{page}.screenshot(path={p['path']})"


# ═══════════════════════════════════════════════════════════════════════════
# CATALOG
# ═══════════════════════════════════════════════════════════════════════════

_PAGE = ParameterDefinition("page", "Page", default="page", placeholder="page")
_DATAFRAME = ParameterDefinition("dataframe", "Data Frame", default="df", placeholder="df")

STANDARD_BLOCKS: Tuple[BlockType, ...] = (
    BlockType(
        "print_message", "Print Message", "Output", print_message,
        description="Prints a message to the console.",
        parameters=(
            ParameterDefinition("message", "Message", default="Hello World", placeholder="Enter message"),
        ),
    ),
    BlockType(
        "read_file", "Read File", "File IO", read_file,
        description="Reads content from a specified file.",
        parameters=(
            ParameterDefinition("filePath", "File Path", default="./my_file.txt",
                                placeholder="e.g., /path/to/file.txt"),
            ParameterDefinition("variableName", "Store in Variable", default="file_content",
                                placeholder="Variable name", binding=Binding.OUTPUT),
        ),
    ),
    BlockType(
        "write_file", "Write File", "File IO", write_file,
        description="Writes text to a file, replacing or appending to it.",
        parameters=(
            ParameterDefinition("filePath", "File Path", default="./output.txt",
                                placeholder="e.g., /path/to/file.txt"),
            ParameterDefinition("content", "Content", ValueKind.TEXTAREA, placeholder="Text to write"),
            ParameterDefinition("mode", "Mode", ValueKind.SELECT, default="w",
                                options=(Option("w", "Overwrite"), Option("a", "Append"))),
        ),
    ),
    BlockType(
        "loop_range", "Loop (Range)", "Logic", loop_range,
        description="Repeats actions a number of times.",
        can_have_children=True,
        parameters=(
            ParameterDefinition("count", "Iterations", ValueKind.NUMBER, default="5", placeholder="e.g., 10"),
            ParameterDefinition("loopVariable", "Loop Variable", default="i", placeholder="e.g., i",
                                binding=Binding.LOCAL),
        ),
    ),
    BlockType(
        "define_variable", "Define Variable", "Data", define_variable,
        description="Defines a variable with a value.",
        parameters=(
            ParameterDefinition("variableName", "Variable Name", default="my_var", placeholder="e.g., age",
                                binding=Binding.OUTPUT),
            ParameterDefinition("value", "Value", ValueKind.NUMBER, default="0", placeholder="e.g., John or 42"),
        ),
    ),
    BlockType(
        "http_request", "HTTP Request", "Network", http_request,
        description="Makes an HTTP request to a URL using a specified method, headers, body, and authentication.",
        parameters=(
            ParameterDefinition("method", "Method", ValueKind.SELECT, default="GET", options=_options(*HTTP_METHODS)),
            ParameterDefinition("url", "URL", default="https://api.example.com/data", placeholder="https://..."),
            ParameterDefinition("headers", "Headers (key: value, one per line)", ValueKind.TEXTAREA,
                                placeholder="Content-Type: application/json"),
            ParameterDefinition("body", "Body (e.g., JSON)", ValueKind.TEXTAREA, placeholder='{"key": "value"}',
                                condition=VisibilityCondition.of("method", tuple(sorted(BODY_METHODS)))),
            ParameterDefinition("authType", "Authentication", ValueKind.SELECT, default="None",
                                options=_options(*AUTH_TYPES)),
            ParameterDefinition("authToken", "Bearer Token", ValueKind.PASSWORD, placeholder="Enter Bearer Token",
                                condition=VisibilityCondition.of("authType", "Bearer Token")),
            ParameterDefinition("authBasicUser", "Basic Auth Username", placeholder="Enter Username",
                                condition=VisibilityCondition.of("authType", "Basic Auth")),
            ParameterDefinition("authBasicPass", "Basic Auth Password", ValueKind.PASSWORD,
                                placeholder="Enter Password",
                                condition=VisibilityCondition.of("authType", "Basic Auth")),
            ParameterDefinition("responseVariable", "Store Response In", default="response_data",
                                placeholder="Variable name", binding=Binding.OUTPUT),
        ),
    ),
    BlockType(
        "custom_function", "Custom Function", "Advanced", custom_function,
        description="Represents a custom Python function call.",
        parameters=(
            ParameterDefinition("functionName", "Function Name", default="my_custom_function",
                                placeholder="Function name"),
            ParameterDefinition("args", "Arguments (comma-sep)", placeholder='arg1, "string_arg"'),
            ParameterDefinition("outputVar", "Store Result In (optional)", placeholder="result_variable",
                                binding=Binding.OUTPUT, optional=True),
        ),
    ),
    BlockType(
        "gui_click", "Mouse Click", "GUI Automation", gui_click,
        description="Clicks the mouse, at the current position or at x/y.",
        parameters=(
            ParameterDefinition("x", "X", ValueKind.NUMBER, placeholder="current position", optional=True),
            ParameterDefinition("y", "Y", ValueKind.NUMBER, placeholder="current position", optional=True),
            ParameterDefinition("button", "Button", ValueKind.SELECT, default="left",
                                options=_options(*MOUSE_BUTTONS)),
            ParameterDefinition("clicks", "Clicks", ValueKind.NUMBER, default="1"),
        ),
    ),
    BlockType(
        "gui_type_text", "Type Text", "GUI Automation", gui_type_text,
        description="Types text with the keyboard.",
        parameters=(
            ParameterDefinition("text", "Text", default="Hello World", placeholder="Text to type"),
            ParameterDefinition("interval", "Seconds Between Keys", ValueKind.NUMBER, default="0.05"),
        ),
    ),
    BlockType(
        "gui_hotkey", "Hotkey", "GUI Automation", gui_hotkey,
        description="Presses a key combination such as ctrl+c.",
        parameters=(
            ParameterDefinition("keys", "Keys", default="ctrl+c", placeholder="e.g., ctrl+shift+s"),
        ),
    ),
    BlockType(
        "gui_screenshot", "Take Screenshot", "GUI Automation", gui_screenshot,
        description="Captures the screen, optionally saving it to a file.",
        parameters=(
            ParameterDefinition("filename", "Save As (optional)", placeholder="screenshot.png", optional=True),
            ParameterDefinition("outputVar", "Store Image In", default="screenshot", binding=Binding.OUTPUT),
        ),
    ),
    BlockType(
        "dataframe_read_csv", "Read CSV", "Data Frames", dataframe_read_csv,
        description="Loads a CSV file into a pandas data frame.",
        parameters=(
            ParameterDefinition("filePath", "File Path", default="./data.csv", placeholder="e.g., data.csv"),
            ParameterDefinition("separator", "Separator", default=","),
            ParameterDefinition("outputVar", "Store Data Frame In", default="df", binding=Binding.OUTPUT),
        ),
    ),
    BlockType(
        "dataframe_filter", "Filter Rows", "Data Frames", dataframe_filter,
        description="Keeps the rows whose column value matches a condition.",
        parameters=(
            _DATAFRAME,
            ParameterDefinition("column", "Column", default="column", placeholder="Column name"),
            ParameterDefinition("operator", "Operator", ValueKind.SELECT, default="==",
                                options=_options(*FILTER_OPERATORS)),
            ParameterDefinition("value", "Value", ValueKind.NUMBER, placeholder="e.g., 42 or text"),
            ParameterDefinition("outputVar", "Store Result In", default="filtered_df", binding=Binding.OUTPUT),
        ),
    ),
    BlockType(
        "dataframe_for_each_row", "For Each Row", "Data Frames", dataframe_for_each_row,
        description="Repeats actions for every row of a data frame.",
        can_have_children=True,
        parameters=(
            _DATAFRAME,
            ParameterDefinition("indexVariable", "Index Variable", default="index", binding=Binding.LOCAL),
            ParameterDefinition("rowVariable", "Row Variable", default="row", binding=Binding.LOCAL),
        ),
    ),
    BlockType(
        "dataframe_write_csv", "Write CSV", "Data Frames", dataframe_write_csv,
        description="Saves a data frame to a CSV file.",
        parameters=(
            _DATAFRAME,
            ParameterDefinition("filePath", "File Path", default="./output.csv"),
            ParameterDefinition("includeIndex", "Include Index", ValueKind.BOOLEAN, default="false"),
        ),
    ),
    BlockType(
        "browser_session", "Browser Session", "Browser", browser_session,
        description="Opens a browser page; nested blocks run against it.",
        can_have_children=True,
        parameters=(
            ParameterDefinition("browser", "Browser", ValueKind.SELECT, default="chromium",
                                options=_options(*BROWSERS)),
            ParameterDefinition("headless", "Headless", ValueKind.BOOLEAN, default="true"),
            ParameterDefinition("pageVariable", "Page Variable", default="page", binding=Binding.LOCAL),
        ),
    ),
    BlockType(
        "browser_goto", "Open URL", "Browser", browser_goto,
        description="Navigates the page to a URL.",
        parameters=(_PAGE, ParameterDefinition("url", "URL", default="https://example.com")),
    ),
    BlockType(
        "browser_click", "Click Element", "Browser", browser_click,
        description="Clicks the element matching a selector.",
        parameters=(_PAGE, ParameterDefinition("selector", "Selector", default="button", placeholder="CSS selector")),
    ),
    BlockType(
        "browser_fill", "Fill Field", "Browser", browser_fill,
        description="Types text into an input field.",
        parameters=(
            _PAGE,
            ParameterDefinition("selector", "Selector", default="input", placeholder="CSS selector"),
            ParameterDefinition("text", "Text", placeholder="Text to enter"),
        ),
    ),
    BlockType(
        "browser_get_text", "Get Text", "Browser", browser_get_text,
        description="Reads the text of the element matching a selector.",
        parameters=(
            _PAGE,
            ParameterDefinition("selector", "Selector", default="h1", placeholder="CSS selector"),
            ParameterDefinition("outputVar", "Store Text In", default="element_text", binding=Binding.OUTPUT),
        ),
    ),
    BlockType(
        "browser_screenshot", "Page Screenshot", "Browser", browser_screenshot,
        description="Captures the current page.",
        parameters=(
            _PAGE,
            ParameterDefinition("path", "Save As (optional)", placeholder="page.png", optional=True),
        ),
    ),
)


def default_registry() -> BlockRegistry:
    """Registry holding :data:`STANDARD_BLOCKS`."""
    return BlockRegistry(STANDARD_BLOCKS)
