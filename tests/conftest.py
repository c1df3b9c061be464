"""Pytest configuration and fixtures for c-ast tests."""

import os
import shutil
import tempfile
from pathlib import Path
from typing import Generator

# Keep the user's ~/.c_ast/config.toml out of the test run.
os.environ["C_AST_HOME"] = tempfile.mkdtemp(prefix="c_ast_home_")
os.environ.pop("C_AST_LOG_LEVEL", None)

import pytest  # noqa: E402

from c_ast.processor import ParseRun  # noqa: E402


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def example_c_path() -> Path:
    """Path to the sample C program."""
    return Path(__file__).parent / "fixtures" / "example.c"


@pytest.fixture
def run() -> ParseRun:
    return ParseRun()


@pytest.fixture
def func_source() -> str:
    return """/**
 * nk_window_get_size() descriptive comment
 */
NK_API struct nk_rect
nk_window_get_size(const struct nk_context *ctx)
{
  // internal function comment
  int i = 0;
}
"""


@pytest.fixture
def struct_source() -> str:
    return """/**
 * nk_rect descriptive comment
 */
NK_API struct nk_rect
{
    // internal struct comment
    // which gets attached to the internal member.
    float x,y,w,h;
}
"""


@pytest.fixture
def struct_funcs_source(struct_source: str, func_source: str) -> str:
    return "\n\n" + struct_source + "\n" + func_source + "\n\n"


@pytest.fixture
def struct_decls_source() -> str:
    return """
struct nk_buffer;
struct nk_allocator;
struct nk_command_buffer;
struct nk_draw_command;
struct nk_convert_config;
struct nk_style_item;
struct nk_text_edit;
struct nk_draw_list;
struct nk_user_font;
struct nk_panel;
struct nk_context;
struct nk_draw_vertex_layout_element;
// Multi
// Line
// Comment
struct nk_style_button;
struct nk_style_toggle;
struct nk_style_selectable;
struct nk_style_slide;
// Single line comment
struct nk_style_progress;
struct nk_style_scrollbar;
struct nk_style_edit;
/**
* This struct actually has a comment
*/
struct nk_style_property;
struct nk_style_chart;
struct nk_style_combo;
struct nk_style_tab;
struct nk_style_window_header;
struct nk_style_window;
"""


@pytest.fixture
def comm_spaces_source() -> str:
    return """
// A disconnected comment due to spacing

// This comment is associateed with nk_style_chart
struct nk_style_chart;

// Additional independent comment.

struct nk_style_combo;
struct nk_style_tab;

"""


@pytest.fixture
def enums_source() -> str:
    return """

/* =============================================================================
 *
 *                                  INPUT
 *
 * =============================================================================*/
/*  The input API is responsible for holding the current input state composed of
 *  mouse, key and text input states.
 *
 *      nk_input_begin(&ctx);
 *      while (GetEvent(&evt)) {
 *          if (evt.type == MOUSE_MOVE)
 *              nk_input_motion(&ctx, evt.motion.x, evt.motion.y);
 *          else if (evt.type == [...]) {
 *              // [...]
 *          }
 *      } nk_input_end(&ctx);
 *
 *  nk_input_end        - Ends the input mirroring process
 */
enum nk_keys {
    NK_KEY_NONE,
    NK_KEY_SHIFT,
    NK_KEY_CTRL,
    NK_KEY_DEL,
    NK_KEY_ENTER,
    NK_KEY_TAB,
    NK_KEY_BACKSPACE,
    NK_KEY_COPY,
    NK_KEY_CUT,
    NK_KEY_PASTE,
    NK_KEY_UP,
    // NK_KEY_DOWN COMMENT
    NK_KEY_DOWN,
    NK_KEY_LEFT,
    NK_KEY_RIGHT,
    /* Shortcuts: text field */
    NK_KEY_TEXT_INSERT_MODE,
    NK_KEY_TEXT_REPLACE_MODE,
    NK_KEY_TEXT_RESET_MODE,
    NK_KEY_TEXT_LINE_START,
    NK_KEY_TEXT_LINE_END,
    NK_KEY_TEXT_START,

    /**
    * Multi line member
    * commento :-)
    */
    NK_KEY_TEXT_END,
    NK_KEY_TEXT_UNDO,
    NK_KEY_TEXT_REDO,
    NK_KEY_TEXT_SELECT_ALL,
    NK_KEY_TEXT_WORD_LEFT,
    NK_KEY_TEXT_WORD_RIGHT,
    /* Shortcuts: scrollbar */
    NK_KEY_SCROLL_START,
    NK_KEY_SCROLL_END,
    NK_KEY_SCROLL_DOWN,
    NK_KEY_SCROLL_UP,
    NK_KEY_MAX
};
enum nk_buttons {
    NK_BUTTON_LEFT,
    NK_BUTTON_MIDDLE,
    NK_BUTTON_RIGHT,
    NK_BUTTON_DOUBLE,
    NK_BUTTON_MAX
};
"""


@pytest.fixture
def enums_single_line_source() -> str:
    return """
/*
*  nk_convert          - Converts from the abstract draw commands list into a hardware accessible vertex format
*  nk__draw_begin      - Returns the first vertex command in the context vertex draw list to be executed
*  nk__draw_next       - Increments the vertex command iterator to the next command inside the context vertex command list
*  nk__draw_end        - Returns the end of the vertex draw list
*  nk_draw_foreach     - Iterates over each vertex draw command inside the vertex draw list
*/
enum nk_anti_aliasing {NK_ANTI_ALIASING_OFF, NK_ANTI_ALIASING_ON};
enum nk_convert_result {
    NK_CONVERT_SUCCESS = 0,
    NK_CONVERT_INVALID_PARAM = 1,
    /* inner comment for NK_CONVERT_COMMAND_BUFFER_FULL */
    NK_CONVERT_COMMAND_BUFFER_FULL = NK_FLAG(1),
    NK_CONVERT_VERTEX_BUFFER_FULL = NK_FLAG(2), /* inline adjacent comment  */
    NK_CONVERT_ELEMENT_BUFFER_FULL = NK_FLAG(3)
};
"""
