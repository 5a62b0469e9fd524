from zj.input_buffer import InputBuffer


class TestAppend:
    def test_empty_initial_state(self):
        buf = InputBuffer()
        assert buf.text == b""
        assert len(buf) == 0

    def test_append_bytes(self):
        buf = InputBuffer()
        buf.append(ord("h"))
        buf.append(ord("i"))
        assert buf.text == b"hi"

    def test_initial_text(self):
        assert InputBuffer(b"proj").text == b"proj"

    def test_capacity(self):
        buf = InputBuffer(max_len=3)
        assert all(buf.append(ord("a")) for _ in range(3))
        assert buf.is_full
        assert buf.append(ord("b")) is False
        assert buf.text == b"aaa"

    def test_initial_text_truncated(self):
        assert InputBuffer(b"x" * 300).text == b"x" * 256


class TestBackspace:
    def test_removes_last_byte(self):
        buf = InputBuffer(b"hello")
        assert buf.backspace() is True
        assert buf.text == b"hell"

    def test_empty_buffer(self):
        buf = InputBuffer()
        assert buf.backspace() is False
        assert buf.text == b""

    def test_removes_whole_code_point(self):
        buf = InputBuffer("café".encode("utf-8"))
        buf.backspace()
        assert buf.text == b"caf"

    def test_removes_three_byte_code_point(self):
        buf = InputBuffer("a\u20ac".encode("utf-8"))
        buf.backspace()
        assert buf.text == b"a"

    def test_removes_four_byte_code_point(self):
        buf = InputBuffer("a\U0001F600".encode("utf-8"))
        buf.backspace()
        assert buf.text == b"a"

    def test_lone_continuation_bytes(self):
        buf = InputBuffer(b"\x80\x80")
        buf.backspace()
        assert buf.text == b""


class TestKillWord:
    def test_deletes_last_word(self):
        buf = InputBuffer(b"foo bar")
        buf.kill_word_back()
        assert buf.text == b"foo "

    def test_skips_trailing_spaces(self):
        buf = InputBuffer(b"foo bar  ")
        buf.kill_word_back()
        assert buf.text == b"foo "

    def test_single_word(self):
        buf = InputBuffer(b"foo")
        buf.kill_word_back()
        assert buf.text == b""

    def test_empty(self):
        buf = InputBuffer()
        buf.kill_word_back()
        assert buf.text == b""


class TestClear:
    def test_returns_previous_text(self):
        buf = InputBuffer(b"abc")
        assert buf.clear() == b"abc"
        assert buf.text == b""

    def test_clear_twice(self):
        buf = InputBuffer(b"abc")
        buf.clear()
        assert buf.clear() == b""

    def test_set_text(self):
        buf = InputBuffer(b"abc", max_len=4)
        buf.set_text(b"123456")
        assert buf.text == b"1234"
