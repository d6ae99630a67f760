# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Go module manifest (go.mod) parsing for distrolog.

Only the directives that affect dependency versions are kept:

- ``require path version``: a module requirement
- ``replace old [version] => new [version]``: an override of a requirement

Both directives are accepted in single-line and parenthesised block form.
``module`` is recorded. ``go``, ``toolchain``, ``godebug``, ``exclude``,
``retract``, ``tool`` and ``ignore`` are recognised and ignored. Comments
start with ``//``; a trailing ``// indirect`` on a requirement is recorded.

Example:
    ```python
    from distrolog.artifacts.gomod import parse

    mod = parse(b'''
    module example.com/app

    require github.com/k3s-io/kine v0.10.1

    replace go.etcd.io/etcd/api/v3 => github.com/k3s-io/etcd/api/v3 v3.5.7-k3s1
    ''')
    mod.require[0].version      # 'v0.10.1'
    mod.replace[0].new_version  # 'v3.5.7-k3s1'
    ```
"""

from __future__ import annotations

from dataclasses import dataclass, field
import re

from distrolog.exceptions import ParseError

__all__ = ["ModFile", "Replace", "Require", "parse"]


@dataclass(frozen=True)
class Require:
    """A require directive.

    Attributes:
        path: Module path (e.g., "github.com/k3s-io/kine").
        version: Required version (e.g., "v0.10.1").
        indirect: True if marked with ``// indirect``.

    """

    path: str
    version: str
    indirect: bool = False


@dataclass(frozen=True)
class Replace:
    """A replace directive.

    Attributes:
        old_path: Module path being replaced.
        old_version: Version being replaced, "" when all versions are.
        new_path: Replacement module path or local directory.
        new_version: Replacement version, "" for a local directory.

    """

    old_path: str
    old_version: str
    new_path: str
    new_version: str


@dataclass
class ModFile:
    """Parsed go.mod content."""

    module: str = ""
    replace: list[Replace] = field(default_factory=list)
    require: list[Require] = field(default_factory=list)


_TOKEN_RE = re.compile(r'"(?:[^"\\]|\\.)*"|`[^`]*`|//.*|[()]|[^\s()]+')
_IGNORED_VERBS = {"go", "toolchain", "godebug", "exclude", "retract", "tool", "ignore"}


def _tokens(line: str) -> tuple[list[str], str]:
    """Split a line into tokens and its trailing comment text."""
    tokens: list[str] = []
    comment = ""
    for tok in _TOKEN_RE.findall(line):
        if tok.startswith("//"):
            comment = tok[2:].strip()
            break
        tokens.append(tok)
    return tokens, comment


def _unquote(tok: str) -> str:
    if len(tok) >= 2 and tok[0] == tok[-1] and tok[0] in "\"`":
        inner = tok[1:-1]
        if tok[0] == '"':
            inner = re.sub(r"\\(.)", r"\1", inner)
        return inner
    return tok


def _parse_require(args: list[str], comment: str, lineno: int) -> Require:
    if len(args) != 2:
        raise ParseError(f"go.mod:{lineno}: usage: require module/path v1.2.3")
    return Require(
        path=_unquote(args[0]),
        version=_unquote(args[1]),
        indirect=comment == "indirect" or comment.startswith("indirect;"),
    )


def _parse_replace(args: list[str], lineno: int) -> Replace:
    try:
        arrow = args.index("=>")
    except ValueError as err:
        raise ParseError(f"go.mod:{lineno}: replace directive is missing '=>'") from err

    old, new = args[:arrow], args[arrow + 1 :]
    if len(old) not in (1, 2) or len(new) not in (1, 2):
        raise ParseError(
            f"go.mod:{lineno}: usage: replace module/path [v1.2.3] => "
            "other/module v1.4 | ../local/directory"
        )
    return Replace(
        old_path=_unquote(old[0]),
        old_version=_unquote(old[1]) if len(old) == 2 else "",
        new_path=_unquote(new[0]),
        new_version=_unquote(new[1]) if len(new) == 2 else "",
    )


def parse(data: bytes | str) -> ModFile:
    """Parse go.mod content.

    Args:
        data: Raw go.mod bytes (decoded as UTF-8) or text.

    Returns:
        The parsed manifest, with directives in file order.

    Raises:
        ParseError: On malformed require/replace directives, unknown
            directives, or unbalanced blocks.

    """
    text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
    mod = ModFile()
    block: str | None = None

    for lineno, raw in enumerate(text.splitlines(), start=1):
        tokens, comment = _tokens(raw)
        if not tokens:
            continue

        if block is not None:
            if tokens == [")"]:
                block = None
                continue
            verb, args = block, tokens
        else:
            verb, args = tokens[0], tokens[1:]
            if args == ["("]:
                block = verb
                continue
            if args == ["(", ")"]:
                continue

        if verb == "require":
            mod.require.append(_parse_require(args, comment, lineno))
        elif verb == "replace":
            mod.replace.append(_parse_replace(args, lineno))
        elif verb == "module":
            if len(args) != 1:
                raise ParseError(f"go.mod:{lineno}: usage: module module/path")
            mod.module = _unquote(args[0])
        elif verb in _IGNORED_VERBS:
            continue
        else:
            raise ParseError(f"go.mod:{lineno}: unknown directive: {verb}")

    if block is not None:
        raise ParseError(f"go.mod: unterminated {block} block")
    return mod
