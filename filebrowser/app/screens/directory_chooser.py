"""Directory chooser modal for picking the root directory."""

import os
from dataclasses import dataclass
from pathlib import Path

from textual import on
from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Button, Label, Tree
from textual.widgets.tree import TreeNode


@dataclass(frozen=True)
class NodeData:
    """Data associated with each tree node."""

    path: Path


class DirectoryChooser(ModalScreen[Path | None]):
    """Modal folder picker; dismisses with the chosen directory or ``None``."""

    DEFAULT_CSS = """
    DirectoryChooser { align: center middle; }
    DirectoryChooser > Container {
        width: 80;
        height: 80%;
        background: $surface;
        border: round $primary;
    }
    #hdr { dock: top; height: 4; padding: 0 1; background: $primary; }
    #title { color: $text; text-style: bold; }
    #chosen { color: $text-muted; }
    #tree-wrap { height: 1fr; padding: 1; overflow-y: auto; }
    #btns { dock: bottom; align: center middle; height: 3; }
    #btns Button {
        margin: 0 1;
        min-width: 30;
        height: auto;
        content-align: center middle;
    }
    #btns #ok {
        background: $primary;
        color: $text-primary;
    }
    #btns #cancel {
        background: $surface-lighten-1;
        color: $text;
    }
    """

    def __init__(self, default_path: Path | None = None, show_hidden: bool = False) -> None:
        """Initialize the directory chooser.

        Args:
            default_path: Directory revealed and chosen when the modal opens.
            show_hidden: Whether to show hidden directories.
        """
        super().__init__()
        self.chosen: Path | None = default_path.resolve() if default_path is not None else None
        self.roots = self._detect_roots()
        self.show_hidden = show_hidden
        self.path_index: dict[Path, TreeNode[NodeData]] = {}

    def compose(self) -> ComposeResult:
        """Compose the modal layout with header, tree and buttons."""
        with Container():
            with Container(id="hdr"):
                yield Label("Select directory", id="title")
                yield Label(self._chosen_text(), id="chosen")
            with Container(id="tree-wrap"):
                yield Tree("Root", id="tree")
            with Horizontal(id="btns"):
                yield Button("OK", id="ok", compact=True)
                yield Button("Cancel", id="cancel", compact=True)

    def on_mount(self) -> None:
        """Initialize the tree and reveal the default directory."""
        tree = self.query_one("#tree", Tree)
        tree.show_root = False
        tree.guide_depth = 2
        tree.auto_expand = False
        for root in self.roots:
            node = tree.root.add(self._label_for(root), data=NodeData(root), allow_expand=self._has_children(root))
            self.path_index[root] = node
        target = self._reveal_path(self.chosen or Path.cwd())
        if target is not None:
            self.call_after_refresh(tree.move_cursor, target)
        tree.focus()

    def _detect_roots(self) -> list[Path]:
        if Path("/").anchor == "/":
            return [Path("/")]
        roots = []
        for c in "ABCDEFGHIJKLMNOPQRSTUVWXYZ":
            p = Path(f"{c}:/")
            try:
                if p.exists():
                    roots.append(p)
            except OSError:
                pass
        return roots or [Path("/")]

    def _has_children(self, path: Path) -> bool:
        return bool(self._iter_subdirs(path))

    def _load_children(self, node: TreeNode[NodeData]) -> None:
        """Populate immediate subdirectories lazily."""
        data = node.data
        if not data or node.children:
            return
        subdirs = self._iter_subdirs(data.path)
        subdirs.sort(key=lambda p: p.name.lower())
        for d in subdirs:
            child = node.add(self._label_for(d), data=NodeData(d), allow_expand=self._has_children(d))
            self.path_index[d] = child

    def _iter_subdirs(self, path: Path) -> list[Path]:
        try:
            with os.scandir(path) as it:
                return [
                    Path(e.path)
                    for e in it
                    if e.is_dir(follow_symlinks=False) and (self.show_hidden or not e.name.startswith("."))
                ]
        except OSError:
            return []

    def _label_for(self, path: Path) -> str:
        if path == Path(path.anchor):
            return (path.drive or path.anchor).rstrip("\\/") or path.anchor
        return path.name or str(path)

    def _chosen_text(self) -> str:
        return str(self.chosen) if self.chosen is not None else "No directory chosen"

    def _reveal_path(self, path: Path) -> TreeNode[NodeData] | None:
        root = next((r for r in self.roots if path.anchor.lower() == r.anchor.lower()), self.roots[0])
        cur = self.path_index.get(root)
        if not cur:
            return None
        cur.expand()
        parts = path.resolve().parts
        base = Path(parts[0]) if parts else root
        for part in parts[1:]:
            base = base / part
            self._load_children(cur)
            nxt = self.path_index.get(base)
            if not nxt:
                return cur
            cur = nxt
            cur.expand()
        return cur

    def _choose(self, path: Path) -> None:
        self.chosen = path
        self.query_one("#chosen", Label).update(self._chosen_text())

    @on(Tree.NodeExpanded, "#tree")
    def _on_expanded(self, ev: Tree.NodeExpanded) -> None:
        self._load_children(ev.node)

    @on(Tree.NodeHighlighted, "#tree")
    def _on_highlighted(self, ev: Tree.NodeHighlighted) -> None:
        if ev.node.data:
            self._choose(ev.node.data.path)

    def on_key(self, event: Key) -> None:
        """Handle keyboard events for escape."""
        if event.key == "escape":
            self.dismiss(None)
            event.stop()

    @on(Button.Pressed, "#ok")
    def _ok(self) -> None:
        self.dismiss(self.chosen)

    @on(Button.Pressed, "#cancel")
    def _cancel(self) -> None:
        self.dismiss(None)
