import pytest

from softraster.buffer import PAGE_SIZE_MAX, Buffer


def make(block_size=4, count=5):
    buf = Buffer(16)
    buf.initialize(block_size)
    buf.alloc(count)
    return buf


def test_page_size_defaults_to_maximum():
    assert Buffer().page_size == PAGE_SIZE_MAX
    assert Buffer(PAGE_SIZE_MAX + 1).page_size == PAGE_SIZE_MAX
    assert Buffer(16).page_size == 16


def test_alloc_creates_enough_pages():
    buf = make()
    assert buf.blocks_per_page == 4
    assert buf.page_count == 2
    assert buf.allocated_blocks == 5


def test_blocks_round_trip():
    buf = make()
    for i in range(5):
        buf[i][:] = bytes([i] * 4)
    assert [bytes(buf[i]) for i in range(5)] == [bytes([i] * 4) for i in range(5)]


def test_static_buffer_rejects_out_of_range():
    buf = make()
    assert len(buf[4]) == 4
    with pytest.raises(IndexError):
        buf[5]
    with pytest.raises(IndexError):
        buf[-1]
    assert buf.allocated_blocks == 5
    assert buf.page_count == 2


def test_dynamic_buffer_grows_on_access():
    buf = Buffer(16)
    buf.initialize(4, dynamic=True)
    buf.alloc(1)
    block = buf[9]
    assert len(block) == 4
    assert buf.page_count == 3


@pytest.mark.parametrize("size", [0, -1, 17])
def test_initialize_rejects_bad_block_size(size):
    with pytest.raises(ValueError):
        Buffer(16).initialize(size)


def test_negative_counts_rejected():
    buf = make()
    with pytest.raises(ValueError):
        buf.alloc(-1)
    with pytest.raises(ValueError):
        buf.realloc(-1)


def test_realloc_shrinks_and_dealloc_empties():
    buf = make(count=9)
    assert buf.page_count == 3
    buf.realloc(2)
    assert buf.page_count == 1
    assert buf.allocated_blocks == 2
    with pytest.raises(IndexError):
        buf[2]
    buf.dealloc()
    assert buf.page_count == 0


def test_realloc_grows():
    buf = make(count=1)
    buf.realloc(7)
    assert buf.page_count == 2
    assert len(buf[6]) == 4


def test_assign_copies_blocks():
    blocks = [b"ab", b"cd", b"ef"]
    buf = Buffer(4)
    buf.assign(blocks)
    assert buf.block_size == 2
    assert buf.allocated_blocks == 3
    assert [bytes(buf[i]) for i in range(3)] == blocks


def test_assign_rejects_mixed_sizes():
    with pytest.raises(ValueError):
        Buffer(16).assign([b"ab", b"c"])


def test_cursor_takes_in_order():
    buf = Buffer(8)
    buf.assign([b"a", b"b", b"c"])
    buf.cursor.seek(1)
    assert bytes(buf.cursor.take()) == b"b"
    assert bytes(buf.cursor.take()) == b"c"
    with pytest.raises(IndexError):
        buf.cursor.take()