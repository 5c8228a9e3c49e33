import pytest

from utils.labels import is_allowed_block, normalize_block, require_block, require_line


def test_block_names_are_normalized():
    assert normalize_block("  Left ") == "left"
    assert normalize_block("Centre") == "center"
    assert normalize_block(None) == ""


@pytest.mark.parametrize("value", ["left", "CENTER", "middle", " right"])
def test_allowed_blocks(value):
    assert is_allowed_block(value)
    assert require_block(value) in ("left", "center", "right")


@pytest.mark.parametrize("value", ["top", "", "leftish"])
def test_unknown_blocks(value):
    assert not is_allowed_block(value)
    with pytest.raises(ValueError):
        require_block(value)


@pytest.mark.parametrize("line", [0, 4])
def test_line_out_of_range(line):
    with pytest.raises(ValueError):
        require_line(line)
