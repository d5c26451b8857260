"""Read an Obsidian vault into note ids and index links for the matrix builder."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

import yaml

from notegraph.graph import NoteLink

logger = logging.getLogger(__name__)

# [[target]], [[target|alias]] and embeds ![[target]]
_WIKILINK_RE = re.compile(r"!?\[\[([^\]|]+)(?:\|[^\]]+)?\]\]")

_FRONTMATTER_RE = re.compile(r"\A---\n(.*?)\n---\n?", re.DOTALL)


@dataclass
class Note:
    """A markdown note and the raw targets of its outgoing links."""

    id: str  # vault-relative POSIX path, e.g. "topics/Graphs.md"
    title: str
    content: str
    frontmatter: dict = field(default_factory=dict)
    outgoing_links: list[str] = field(default_factory=list)  # one entry per reference

    @property
    def stem(self) -> str:
        return PurePosixPath(self.id).stem


def parse_note(path: Path, root: Path | None = None) -> Note:
    """Parse one markdown file. ``root`` sets the base for the note id."""
    raw = path.read_text(encoding="utf-8")

    frontmatter: dict = {}
    body = raw
    fm_match = _FRONTMATTER_RE.match(raw)
    if fm_match:
        try:
            frontmatter = yaml.safe_load(fm_match.group(1)) or {}
            if not isinstance(frontmatter, dict):
                frontmatter = {}
        except yaml.YAMLError as e:
            logger.debug("Ignoring malformed frontmatter in %s: %s", path, e)
            frontmatter = {}
        body = raw[fm_match.end() :]

    # "Note#heading" and "Note^block" point at Note
    targets = [re.split(r"[#^]", t, maxsplit=1)[0].strip() for t in _WIKILINK_RE.findall(body)]

    note_id = path.relative_to(root).as_posix() if root is not None else path.name
    return Note(
        id=note_id,
        title=str(frontmatter.get("title", path.stem)),
        content=body.strip(),
        frontmatter=frontmatter,
        outgoing_links=[t for t in targets if t],
    )


def load_vault(vault_path: str | Path) -> list[Note]:
    """Load every markdown note under *vault_path*, sorted by id.

    Hidden directories (``.obsidian``, ``.trash``) are skipped.
    """
    vault = Path(vault_path)
    if not vault.is_dir():
        raise FileNotFoundError(f"Vault directory not found: {vault}")

    notes = []
    for md_file in sorted(vault.rglob("*.md")):
        if any(part.startswith(".") for part in md_file.relative_to(vault).parts):
            continue
        notes.append(parse_note(md_file, root=vault))
    return notes


def vault_links(notes: list[Note]) -> tuple[list[str], list[NoteLink]]:
    """Resolve wikilink targets to note indices.

    A target matches a note by its id without ``.md`` (``"topics/Graphs"``)
    or, failing that, by file stem; both case-insensitively, first note
    wins. Repeated references produce repeated links; unresolved targets
    are dropped.
    """
    note_paths = [n.id for n in notes]
    by_path: dict[str, int] = {}
    by_stem: dict[str, int] = {}
    for i, note in enumerate(notes):
        by_path.setdefault(str(PurePosixPath(note.id).with_suffix("")).lower(), i)
        by_stem.setdefault(note.stem.lower(), i)

    links = []
    for i, note in enumerate(notes):
        for target in note.outgoing_links:
            key = target.lower().removesuffix(".md")
            j = by_path.get(key, by_stem.get(key))
            if j is None:
                logger.debug("Unresolved link %r in %s", target, note.id)
                continue
            links.append(NoteLink(i, j))
    return note_paths, links
