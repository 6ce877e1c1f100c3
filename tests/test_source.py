import pytest

from lox.source import CharSource, Cursor, TextBuffer


def test_cursor_peek_and_consume():
    cursor = Cursor([1, 2, 3])
    assert cursor.peek() == 1
    assert cursor.peek_next() == 2
    assert cursor.consume() == 1
    assert cursor.previous() == 1
    assert cursor.peek() == 2


def test_cursor_back_undoes_one_step():
    cursor = Cursor('abc')
    cursor.consume()
    cursor.consume()
    cursor.back()
    assert cursor.peek() == 'b'
    assert cursor.peek_next() == 'c'
    assert cursor.consume() == 'b'
    assert cursor.consume() == 'c'
    assert not cursor.incomplete()


def test_cursor_back_twice_fails():
    cursor = Cursor('ab')
    cursor.consume()
    cursor.back()
    with pytest.raises(RuntimeError, match='exceeded step-back buffer'):
        cursor.back()


def test_cursor_past_end_returns_none():
    cursor = Cursor('')
    assert not cursor.incomplete()
    assert cursor.peek() is None
    assert cursor.consume() is None


def test_cursor_iterates_remaining_items():
    cursor = Cursor('xyz')
    cursor.consume()
    assert list(cursor) == ['y', 'z']


def test_char_source_tracks_line_and_column():
    source = CharSource('ab\nc')
    assert source.position() == (0, 0)
    source.consume()
    assert source.position() == (0, 1)
    source.consume()
    assert source.position() == (0, 2)
    source.consume()
    assert source.position() == (1, 0)
    source.back()
    assert source.position() == (0, 2)
    assert source.peek() == '\n'


def test_text_buffer_consume_resets():
    buffer = TextBuffer()
    buffer.push('ab')
    buffer.push('c')
    assert len(buffer) == 3
    assert buffer.consume() == 'abc'
    assert len(buffer) == 0
    assert buffer.consume() == ''
