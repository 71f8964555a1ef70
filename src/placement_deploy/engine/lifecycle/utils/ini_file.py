# -*- coding: utf-8 -*-
"""Upsert-style editing of ini configuration files."""

import os
import re
from typing import List, Mapping, Optional, Tuple

SECTION_PATTERN = re.compile(r"^\s*\[([^\]]+)\]\s*$")


def _option_pattern(option: str) -> re.Pattern:
    return re.compile(rf"^\s*{re.escape(option)}\s*=(.*)$")


class IniFile:
    """An ini file edited in place, one option at a time.

    Only the lines of the options being set are touched: comments, blank
    lines, ordering and repeated (multi-valued) options elsewhere in the file
    are written back byte for byte. Setting an option replaces every line of
    it in its section; a missing option is inserted right after the section
    header, and a missing section is appended at the end.
    """

    def __init__(self, path: str):
        self.path = path

    def _load(self) -> List[str]:
        if not os.path.exists(self.path):
            return []
        with open(self.path, "r", encoding="utf-8") as f:
            return f.readlines()

    def _store(self, lines: List[str]) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        temp_file = f"{self.path}.tmp"
        with open(temp_file, "w", encoding="utf-8") as f:
            f.writelines(lines)
        os.replace(temp_file, self.path)

    @staticmethod
    def _section_bounds(
        lines: List[str],
        section: str,
    ) -> Optional[Tuple[int, int]]:
        """Index of the section header and of the line ending the section."""
        start = None
        for index, line in enumerate(lines):
            match = SECTION_PATTERN.match(line)
            if not match:
                continue
            if start is not None:
                return start, index
            if match.group(1).strip() == section:
                start = index
        if start is None:
            return None
        return start, len(lines)

    def set(self, section: str, option: str, value) -> None:
        self.set_many(section, {option: value})

    def set_many(self, section: str, options: Mapping[str, object]) -> None:
        """Upsert several options of one section with a single write."""
        lines = self._load()
        bounds = self._section_bounds(lines, section)
        if bounds is None:
            if lines and not lines[-1].endswith("\n"):
                lines[-1] += "\n"
            if lines and lines[-1].strip():
                lines.append("\n")
            lines.append(f"[{section}]\n")
            bounds = (len(lines) - 1, len(lines))

        start, end = bounds
        missing = []
        for option, value in options.items():
            entry = f"{option} = {value}"
            pattern = _option_pattern(option)
            found = False
            for index in range(start + 1, end):
                if pattern.match(lines[index].rstrip("\r\n")):
                    ending = "\n" if lines[index].endswith("\n") else ""
                    lines[index] = entry + ending
                    found = True
            if not found:
                missing.append(entry + "\n")

        if missing and not lines[start].endswith("\n"):
            lines[start] += "\n"
        lines[start + 1 : start + 1] = missing
        self._store(lines)

    def get(self, section: str, option: str) -> Optional[str]:
        """First value of ``option`` in ``section``, None if absent."""
        lines = self._load()
        bounds = self._section_bounds(lines, section)
        if bounds is None:
            return None
        pattern = _option_pattern(option)
        start, end = bounds
        for line in lines[start + 1 : end]:
            match = pattern.match(line.rstrip("\r\n"))
            if match:
                return match.group(1).strip()
        return None
