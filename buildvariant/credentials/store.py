# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Optional signing credentials from a properties file.

The credential file is deliberately kept out of version control, so its
absence is normal: developers without release keys still need debug builds.
The rules are:
  - no file, or a file with nothing but comments: no credentials, no error
  - a file we cannot parse as key/value lines: MalformedCredentialFile
  - a file that has some keys but not the required ones: IncompleteCredentials

The last rule is the important one. A half-filled file must stop the build
instead of letting a release go out unsigned or signed with the wrong key.

The file format is Java properties, read the way the signing toolchain reads
it: `key=value`, `key: value` or `key value`, `#`/`!` comments, backslash
line continuation and backslash escapes (including `\\uXXXX`). Values keep
their trailing whitespace, since a password may end in a space. The one
deliberate difference is the encoding: the file is decoded as UTF-8, not
ISO-8859-1.
"""

import logging
import re
from pathlib import Path
from typing import Mapping, Optional

from buildvariant.config.defaults import DEFAULT_CREDENTIALS_FILE
from buildvariant.config.exceptions import IncompleteCredentials, MalformedCredentialFile
from buildvariant.config.schema import CredentialSet
from buildvariant.utils.filesystem import read_text_strict
from buildvariant.utils.paths import resolve_project_path

_logger = logging.getLogger(__name__)

KEY_ALIAS = "keyAlias"
KEY_PASSWORD = "keyPassword"
STORE_FILE = "storeFile"
STORE_PASSWORD = "storePassword"

REQUIRED_KEYS: tuple[str, ...] = (KEY_ALIAS, KEY_PASSWORD, STORE_PASSWORD)
RECOGNIZED_KEYS: frozenset[str] = frozenset((*REQUIRED_KEYS, STORE_FILE))

_COMMENT_PREFIXES = ("#", "!")
_WHITESPACE = " \t\f"
_KEY_TERMINATORS = "=:" + _WHITESPACE
_PHYSICAL_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_HEX4 = re.compile(r"[0-9a-fA-F]{4}")
_SIMPLE_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def _logical_lines(text: str, source: str) -> list[tuple[int, str]]:
    """
    Join continuation lines and drop blanks and comments.

    Leading whitespace is stripped from every physical line, trailing
    whitespace never is. A line continues onto the next one when it ends in
    an odd number of backslashes; an even run is just escaped backslashes.

    Returns (line_number, content) pairs where line_number is where the
    logical line started, for error messages.
    """
    lines: list[tuple[int, str]] = []
    pending: Optional[str] = None
    pending_start = 0

    for number, raw in enumerate(_PHYSICAL_LINE_BREAK.split(text), start=1):
        line = raw.lstrip(_WHITESPACE)
        if pending is None:
            if not line or line.startswith(_COMMENT_PREFIXES):
                continue
            pending, pending_start = "", number

        trailing_backslashes = len(line) - len(line.rstrip("\\"))
        if trailing_backslashes % 2 == 1:
            pending += line[:-1]
            continue

        lines.append((pending_start, pending + line))
        pending = None

    if pending is not None:
        raise MalformedCredentialFile(
            f"{source}:{pending_start}: line continuation runs past end of file"
        )
    return lines


def _split_entry(line: str, source: str, number: int) -> tuple[str, str]:
    """
    Split a logical line into its raw (still escaped) key and value.

    The key runs up to the first unescaped '=', ':' or whitespace. After it
    come optional whitespace, at most one '=' or ':', and more whitespace.
    """
    index = 0
    while index < len(line) and line[index] not in _KEY_TERMINATORS:
        index += 2 if line[index] == "\\" else 1
    key_end = min(index, len(line))

    if key_end == 0:
        raise MalformedCredentialFile(f"{source}:{number}: entry has an empty key")
    if key_end == len(line):
        raise MalformedCredentialFile(
            f"{source}:{number}: expected 'key=value', got a bare token"
        )

    rest = line[key_end:].lstrip(_WHITESPACE)
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(_WHITESPACE)
    return line[:key_end], rest


def _unescape(raw: str, source: str, number: int) -> str:
    r"""Decode \t, \n, \r, \f and \uXXXX. Any other escaped character stands for itself."""
    chars: list[str] = []
    index = 0
    while index < len(raw):
        char = raw[index]
        index += 1
        if char != "\\":
            chars.append(char)
            continue
        if index == len(raw):
            break
        code = raw[index]
        index += 1
        if code == "u":
            digits = raw[index:index + 4]
            if not _HEX4.fullmatch(digits):
                raise MalformedCredentialFile(
                    f"{source}:{number}: malformed \\uXXXX escape '\\u{digits}'"
                )
            chars.append(chr(int(digits, 16)))
            index += 4
        else:
            chars.append(_SIMPLE_ESCAPES.get(code, code))
    return "".join(chars)


def parse_properties(text: str, source: str = "<string>") -> dict[str, str]:
    """
    Parse properties text into a dict. Later duplicates override earlier ones.

    Keys and values are unescaped, so `C\\:\\\\keys` reads as `C:\\keys`.
    Trailing whitespace in a value is part of the value.

    Raises:
        MalformedCredentialFile: If a line has no key, no separator after its
            key, or a broken \\u escape.
    """
    entries: dict[str, str] = {}
    for number, line in _logical_lines(text, source):
        raw_key, raw_value = _split_entry(line, source, number)
        entries[_unescape(raw_key, source, number)] = _unescape(raw_value, source, number)
    return entries


class CredentialStore:
    """
    Reads the project's credential file into an optional CredentialSet.

    The store never writes to the file and keeps no state between calls
    other than where to look.
    """

    def __init__(
        self,
        project_root: Path,
        credentials_file: str | Path = DEFAULT_CREDENTIALS_FILE,
    ) -> None:
        self.project_root = project_root
        self.path = resolve_project_path(project_root, credentials_file)

    def _target(self, path: Optional[Path]) -> Path:
        if path is None:
            return self.path
        return resolve_project_path(self.project_root, path)

    def locate(self, path: Optional[Path] = None) -> bool:
        """Return whether the credential file exists. Does not read it."""
        return self._target(path).is_file()

    def load(self, path: Optional[Path] = None) -> dict[str, str]:
        """
        Parse the credential file into a flat mapping.

        An absent file yields an empty dict. Only a file that is present but
        unreadable as key/value text is an error.

        Raises:
            MalformedCredentialFile: If the content is not valid UTF-8 key/value text.
        """
        target = self._target(path)
        if not self.locate(target):
            _logger.debug("No credential file", extra={"path": str(target)})
            return {}

        try:
            text = read_text_strict(target)
        except UnicodeDecodeError as err:
            raise MalformedCredentialFile(f"{target}: not valid UTF-8 text ({err})") from err
        except OSError as err:
            raise MalformedCredentialFile(f"{target}: cannot be read ({err})") from err

        entries = parse_properties(text, source=str(target))
        _logger.debug(
            "Credential file loaded",
            extra={"path": str(target), "keys": sorted(entries)},
        )
        return entries

    def resolve(
        self,
        entries: Mapping[str, str],
        source: Optional[str] = None,
    ) -> Optional[CredentialSet]:
        """
        Turn a loaded mapping into a CredentialSet.

        An empty mapping means no credentials. storeFile may be omitted, in
        which case the signing backend falls back to its default keystore;
        a relative storeFile is anchored at the project root.

        Raises:
            IncompleteCredentials: If the mapping is non-empty but a required key
                is missing or blank.
        """
        if not entries:
            return None

        missing = [key for key in REQUIRED_KEYS if not entries.get(key, "").strip()]
        if missing:
            raise IncompleteCredentials(missing, source=source)

        unknown = sorted(set(entries) - RECOGNIZED_KEYS)
        if unknown:
            _logger.debug("Ignoring unrecognized credential keys", extra={"keys": unknown})

        # Values are passed through exactly as parsed; only a blank storeFile
        # is read as "not given".
        store_file: Optional[Path] = None
        raw_store_file = entries.get(STORE_FILE, "")
        if raw_store_file.strip():
            store_file = resolve_project_path(self.project_root, raw_store_file)

        return CredentialSet(
            alias=entries[KEY_ALIAS],
            password=entries[KEY_PASSWORD],
            store_file=store_file,
            store_password=entries[STORE_PASSWORD],
        )

    def read(self) -> Optional[CredentialSet]:
        """locate, load and resolve the configured credential file in one step."""
        return self.resolve(self.load(), source=str(self.path))
