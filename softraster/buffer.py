"""Paged storage of fixed-size blocks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

PAGE_SIZE_MAX = 1 << 20


@dataclass
class BufferCursor:
    """A position in a buffer that advances one block per take."""

    buffer: Buffer = field(repr=False)
    index: int = 0

    def seek(self, index: int) -> None:
        self.index = index

    def take(self) -> memoryview:
        """Return the block at the cursor and move past it."""
        block = self.buffer[self.index]
        self.index += 1
        return block


class Buffer:
    """Blocks of equal size stored in pages that are allocated on demand."""

    PAGE_SIZE_MAX = PAGE_SIZE_MAX

    def __init__(self, page_size: int = 0) -> None:
        if page_size <= 0 or page_size > PAGE_SIZE_MAX:
            page_size = PAGE_SIZE_MAX
        self.page_size = page_size
        self.block_size = 1
        self.blocks_per_page = page_size
        self.dynamic = True
        self.allocated_blocks = 0
        self._pages: list[bytearray | None] = []
        self.cursor = BufferCursor(self)

    @property
    def page_count(self) -> int:
        return len(self._pages)

    def initialize(self, block_size: int, dynamic: bool = False) -> None:
        """Set the block size; a dynamic buffer grows on access past its end."""
        if block_size <= 0 or block_size > self.page_size:
            raise ValueError(
                f"block size must be in 1..{self.page_size}, got {block_size}"
            )
        self.block_size = block_size
        self.blocks_per_page = self.page_size // block_size
        self.allocated_blocks = 0
        self.dynamic = dynamic

    def assign(self, blocks: Iterable[bytes]) -> None:
        """Replace the contents with the given equally sized blocks."""
        data = [bytes(b) for b in blocks]
        size = len(data[0]) if data else self.block_size
        if any(len(b) != size for b in data):
            raise ValueError("all blocks must have the same size")
        self.initialize(size)
        self.alloc(len(data))
        for index, block in enumerate(data):
            self[index][:] = block

    def _pages_for(self, block_count: int) -> int:
        return (block_count + self.blocks_per_page - 1) // self.blocks_per_page

    def alloc(self, block_count: int) -> None:
        """Reserve room for block_count more blocks."""
        if block_count < 0:
            raise ValueError("block count must not be negative")
        self.allocated_blocks += block_count
        pages = self._pages_for(self.allocated_blocks)
        for index in range(pages):
            self._alloc_page(index)

    def realloc(self, block_count: int) -> None:
        """Resize to exactly block_count blocks, freeing pages no longer needed."""
        if block_count < 0:
            raise ValueError("block count must not be negative")
        self.allocated_blocks = block_count
        pages = self._pages_for(block_count)
        if pages > len(self._pages):
            self.alloc(0)
        else:
            del self._pages[pages:]
            for index in range(pages):
                self._alloc_page(index)

    def dealloc(self) -> None:
        self.realloc(0)

    def _alloc_page(self, index: int) -> None:
        if index >= len(self._pages):
            self._pages.extend([None] * (index + 1 - len(self._pages)))
        if self._pages[index] is None:
            self._pages[index] = bytearray(self.page_size)

    def __getitem__(self, index: int) -> memoryview:
        if index < 0:
            raise IndexError(f"block index out of range: {index}")
        if not self.dynamic and index >= self.allocated_blocks:
            raise IndexError(f"block index out of range: {index}")
        page, offset = divmod(index, self.blocks_per_page)
        self._alloc_page(page)
        start = offset * self.block_size
        return memoryview(self._pages[page])[start:start + self.block_size]