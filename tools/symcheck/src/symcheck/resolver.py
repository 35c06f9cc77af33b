from __future__ import annotations

import io

from elftools.common.exceptions import ELFError
from elftools.construct.core import ConstructError
from elftools.elf.elffile import ELFFile
from elftools.elf.sections import SymbolTableSection

from ._core_base import BinaryFormatError, SymbolNotFound


class SymbolTable:
    """Defined dynamic symbols of an ELF image, keyed by name.

    Values are file offsets, translated from the symbol address through the
    PT_LOAD segments of the image.
    """

    def __init__(self, offsets: dict[str, int]) -> None:
        self._offsets = dict(offsets)

    def __len__(self) -> int:
        return len(self._offsets)

    def __contains__(self, name: object) -> bool:
        return name in self._offsets

    def resolve(self, name: str) -> int:
        try:
            return self._offsets[name]
        except KeyError:
            raise SymbolNotFound(name) from None


def load_segments(elf: ELFFile) -> list[tuple[int, int, int]]:
    """Return (vaddr, filesz, offset) for every PT_LOAD segment."""
    return [
        (segment["p_vaddr"], segment["p_filesz"], segment["p_offset"])
        for segment in elf.iter_segments()
        if segment["p_type"] == "PT_LOAD"
    ]


def address_to_offset(segments: list[tuple[int, int, int]], address: int) -> int | None:
    for start, size, offset in segments:
        if start <= address < start + size:
            return address - start + offset
    return None


def load_symbols(image: bytes) -> SymbolTable:
    try:
        elf = ELFFile(io.BytesIO(image))
        section = elf.get_section_by_name(".dynsym")
        if not isinstance(section, SymbolTableSection):
            raise BinaryFormatError("extract symbols: no dynamic symbol table found")

        segments = load_segments(elf)
        offsets: dict[str, int] = {}
        for symbol in section.iter_symbols():
            if not symbol.name or symbol["st_shndx"] == "SHN_UNDEF":
                continue
            offset = address_to_offset(segments, symbol["st_value"])
            if offset is not None:
                offsets.setdefault(symbol.name, offset)
    except (ELFError, ConstructError) as exc:
        raise BinaryFormatError(f"extract symbols: {exc}") from exc
    except (ValueError, EOFError) as exc:
        raise BinaryFormatError(f"extract symbols: malformed binary: {exc}") from exc
    return SymbolTable(offsets)
