"""Command palette provider for browser actions."""

from textual.command import DiscoveryHit, Hit, Hits, Provider

COMMANDS = [
    ("Change directory...", "action_change_directory", "Pick the directory to browse"),
    ("Refresh", "action_refresh", "Search the directory again"),
    ("Clear search settings", "action_clear_search", "Reset the name filter and patterns"),
    ("Clear saved directory", "action_clear_directory", "Forget the saved directory"),
    ("Close application", "action_close_app", "Close the application"),
]


class BrowserCommands(Provider):
    """Command provider for browser and application commands."""

    def _commands(self):
        for name, action, help_text in COMMANDS:
            yield name, getattr(self.app, action), help_text

    async def discover(self) -> Hits:
        """Expose common actions in the command palette."""
        for name, callback, help_text in self._commands():
            yield DiscoveryHit(name, callback, help=help_text)

    async def search(self, query: str) -> Hits:
        """Return actions whose name matches the query."""
        matcher = self.matcher(query)
        for name, callback, help_text in self._commands():
            score = matcher.match(name)
            if score > 0:
                yield Hit(score, matcher.highlight(name), callback, help=help_text)
