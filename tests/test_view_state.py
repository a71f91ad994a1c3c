from src.workspace.view_state import EMPTY, LOADING, READY, view_state


def test_view_state():
    assert view_state(True, None) == LOADING
    assert view_state(True, [1]) == LOADING
    assert view_state(False, None) == EMPTY
    assert view_state(False, []) == EMPTY
    assert view_state(False, [1]) == READY
