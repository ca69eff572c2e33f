#!/usr/bin/env python3
"""
kubeSh Selector Tests

Tests the fzf-backed selector with a mocked subprocess and the
backend resolution logic with a mocked PATH lookup.
"""

import sys
import logging
from pathlib import Path
from unittest.mock import Mock, patch

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

# Configure logging for tests
logging.basicConfig(level=logging.WARNING)

from kubeSh.constants import NO_ITEMS_MESSAGE
from kubeSh.core.picker import BuiltinSelector, FzfSelector, TerminalIO, resolve_selector

def fzf_result(returncode, stdout):
    return Mock(returncode=returncode, stdout=stdout)

def test_fzf_returns_chosen_line():
    print("🧪 Testing fzf selection...")
    selector = FzfSelector("fzf")

    with patch('kubeSh.core.picker.selectors.subprocess.run', return_value=fzf_result(0, "beta\n")) as run_mock:
        result = selector.select(["alpha", "beta"], "Select a namespace")

    assert result == "beta"
    command = run_mock.call_args[0][0]
    assert command[0] == "fzf"
    assert command[command.index("--header") + 1] == "Select a namespace"
    assert run_mock.call_args[1]["input"] == "alpha\nbeta"
    print("   ✅ Chosen line returned")

def test_fzf_marks_and_strips_current_item():
    print("🧪 Testing current item marker...")
    selector = FzfSelector("fzf")

    with patch('kubeSh.core.picker.selectors.subprocess.run',
               return_value=fzf_result(0, "beta (current)\n")) as run_mock:
        result = selector.select(["alpha", "beta"], "Select", current_item="beta")

    assert run_mock.call_args[1]["input"] == "alpha\nbeta (current)"
    assert result == "beta"
    print("   ✅ Marker added for fzf and removed from the result")

def test_fzf_cancel_returns_none():
    print("🧪 Testing fzf cancellation...")
    selector = FzfSelector("fzf")

    for returncode in (1, 130):
        with patch('kubeSh.core.picker.selectors.subprocess.run', return_value=fzf_result(returncode, "")):
            assert selector.select(["alpha"], "Select") is None

    with patch('kubeSh.core.picker.selectors.subprocess.run', return_value=fzf_result(0, "\n")):
        assert selector.select(["alpha"], "Select") is None
    print("   ✅ Non-zero exit or empty output means no selection")

def test_fzf_empty_items_skips_subprocess():
    selector = FzfSelector("fzf")

    with patch('kubeSh.core.picker.selectors.subprocess.run') as run_mock, patch('sys.stdout'):
        assert selector.select([], "Select") is None

    run_mock.assert_not_called()

class RecordingTerminal(TerminalIO):
    """Terminal double that only records written lines"""

    def __init__(self):
        self.written = []

    def read_key(self):
        raise AssertionError("no key should be read")

    def move_cursor_up(self, lines):
        pass

    def write_line(self, text):
        self.written.append(text)

    def get_window_size(self):
        return 80, 24

    def set_cursor_visible(self, visible):
        pass

def test_empty_items_notice_is_shared_by_backends():
    print("🧪 Testing empty item notice...")
    terminal = RecordingTerminal()
    assert BuiltinSelector(terminal=terminal).select([], "Select") is None

    with patch('kubeSh.core.picker.selectors.subprocess.run') as run_mock, \
            patch('builtins.print') as print_mock:
        assert FzfSelector("fzf").select([], "Select") is None

    run_mock.assert_not_called()
    assert terminal.written == [NO_ITEMS_MESSAGE]
    print_mock.assert_called_once_with(NO_ITEMS_MESSAGE)
    print("   ✅ Both backends report an empty list the same way")

def test_strip_marker_only_removes_suffix():
    assert FzfSelector.strip_marker("prod (current)") == "prod"
    assert FzfSelector.strip_marker("prod (current) eu") == "prod (current) eu"
    assert FzfSelector.strip_marker("prod") == "prod"

def test_resolve_selector_modes():
    print("🧪 Testing selector resolution...")
    with patch('kubeSh.core.picker.selectors.shutil.which', return_value="/usr/bin/fzf"):
        assert isinstance(resolve_selector("auto"), FzfSelector)
        assert isinstance(resolve_selector("fzf"), FzfSelector)
        assert isinstance(resolve_selector("builtin"), BuiltinSelector)

    with patch('kubeSh.core.picker.selectors.shutil.which', return_value=None):
        assert isinstance(resolve_selector("auto"), BuiltinSelector)
        assert isinstance(resolve_selector("fzf"), BuiltinSelector)
    print("   ✅ fzf used when available and allowed, built-in picker otherwise")

def test_resolve_selector_uses_configured_fzf_path():
    with patch('kubeSh.core.picker.selectors.shutil.which', return_value="/opt/bin/sk") as which_mock:
        selector = resolve_selector("auto", fzf_path="/opt/bin/sk")

    which_mock.assert_called_with("/opt/bin/sk")
    assert selector.fzf_path == "/opt/bin/sk"

def run_selector_tests():
    """Run all selector tests"""
    print("🧪 Testing kubeSh Selectors")
    print("=" * 60)

    tests = [
        test_fzf_returns_chosen_line,
        test_fzf_marks_and_strips_current_item,
        test_fzf_cancel_returns_none,
        test_fzf_empty_items_skips_subprocess,
        test_empty_items_notice_is_shared_by_backends,
        test_strip_marker_only_removes_suffix,
        test_resolve_selector_modes,
        test_resolve_selector_uses_configured_fzf_path,
    ]

    passed = 0
    failed = 0

    for test_func in tests:
        try:
            test_func()
            passed += 1
        except Exception as e:
            print(f"   ❌ Test {test_func.__name__} failed: {type(e).__name__} {e}")
            failed += 1

    print("=" * 60)
    print(f"📊 Selector Test Results: {passed} passed, {failed} failed")
    return failed == 0

if __name__ == "__main__":
    success = run_selector_tests()
    sys.exit(0 if success else 1)
