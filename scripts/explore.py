#!/usr/bin/env python3
"""Interactive concept graph explorer."""

import argparse
import asyncio
import logging
import sys

from conceptscope.client import APIError, close_client, get_client
from conceptscope.config import settings
from conceptscope.display import format_graph, format_metadata, format_search
from conceptscope.exploration import ExplorationSession

HELP_TEXT = """
Concept Graph Explorer
======================

Commands:
  /suggest <text>   - Show completions for a partial query
  /page <n>         - Show page n of the similar results
  /open <n|label>   - Open result n (0 = exact match) or a concept by label
  /meta             - Show metadata of the open concept
  /graph            - Show the graph of the open concept
  /node <id>        - Select a graph node and list its relations
  /expand <rel>     - Highlight and expand a relation of the selected node
  /deselect         - Clear the node selection
  /close            - Close the open concept
  /clear            - Clear the search
  /help             - Show this help
  /quit             - Exit

Just type a keyword to search!
"""


class Explorer:
    def __init__(self, base_url: str):
        settings.api_base_url = base_url
        self.client = get_client()
        self.session = ExplorationSession(client=self.client)

    async def close(self):
        await self.session.close()
        await close_client()

    def _result_label(self, arg: str) -> str | None:
        """Resolve a result number (as displayed) or pass a label through."""
        search = self.session.state.search
        if not arg.isdigit():
            return arg
        index = int(arg)
        if index == 0:
            return search.exact_match.label if search.exact_match else None
        if 1 <= index <= len(search.similar_matches):
            return search.similar_matches[index - 1].label
        return None

    def graph(self) -> str:
        state = self.session.state
        details = state.details
        if details.loading:
            return f"Loading {details.clicked_label!r}..."
        if details.error:
            return f"Error: {details.error}"
        if not details.is_open:
            return "No concept open. Use /open first."
        text = format_graph(details.node_details.anchor_path, state.selection)
        if details.expansion_error:
            text += f"\n\nExpansion failed: {details.expansion_error}"
        return text

    async def search(self, term: str) -> str:
        await self.session.submit_search(term)
        return format_search(self.session.state.search)

    async def suggest(self, prefix: str) -> str:
        suggestions = await self.session.suggestions.suggest(prefix)
        if not suggestions:
            return "No suggestions."
        return "Suggestions:\n" + "\n".join(f"  {s}" for s in suggestions)

    def page(self, page: int) -> str:
        self.session.go_to_page(page)
        return format_search(self.session.state.search)

    async def open(self, arg: str) -> str:
        label = self._result_label(arg)
        if not label:
            return f"No result {arg}."
        details = await self.session.open_concept(label)
        if details is None:
            return self.graph()
        return f"{label}\n\n{format_metadata(details)}\n\n{self.graph()}"

    def meta(self) -> str:
        node_details = self.session.state.details.node_details
        if node_details is None:
            return "No concept open. Use /open first."
        return format_metadata(node_details)

    async def node(self, node_id: str) -> str:
        relations = await self.session.tap_node(node_id)
        if self.session.state.selection.selected_node_id != node_id:
            return f"Unknown node {node_id!r}."
        if not relations:
            return f"Selected {node_id}: no expandable relations."
        return f"Selected {node_id}. Relations:\n" + "\n".join(f"  {r}" for r in relations)

    async def expand(self, relation: str) -> str:
        if self.session.state.selection.selected_node_id is None:
            return "Select a node first with /node <id>."
        await self.session.choose_relation(relation)
        return self.graph()


async def main():
    parser = argparse.ArgumentParser(description="Explore a concept graph backend")
    parser.add_argument("--api", default=settings.api_base_url, help="Backend base URL")
    parser.add_argument("--log-level", default=settings.log_level)
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print(HELP_TEXT)
    explorer = Explorer(args.api)

    # Check connection
    try:
        await explorer.client.suggest("a")
        print("Connected to concept graph API at", args.api)
    except APIError as e:
        print(f"Warning: suggestions unavailable at {args.api} ({e.message})")

    print("-" * 50)

    try:
        while True:
            try:
                user_input = input("\nExplore: ").strip()
            except EOFError:
                break

            if not user_input:
                continue

            command, _, arg = user_input.partition(" ")
            command = command.lower()
            arg = arg.strip()

            if command in ["/quit", "/exit", "/q"]:
                print("Goodbye!")
                break

            elif command == "/help":
                print(HELP_TEXT)

            elif command == "/suggest":
                print(f"\n{await explorer.suggest(arg)}")

            elif command == "/page":
                if not arg.isdigit():
                    print("Usage: /page <n>")
                    continue
                print(f"\n{explorer.page(int(arg))}")

            elif command == "/open":
                if not arg:
                    print("Usage: /open <n|label>")
                    continue
                print(f"\n{await explorer.open(arg)}")

            elif command == "/meta":
                print(f"\n{explorer.meta()}")

            elif command == "/graph":
                print(f"\n{explorer.graph()}")

            elif command == "/node":
                if not arg:
                    print("Usage: /node <id>")
                    continue
                print(f"\n{await explorer.node(arg)}")

            elif command == "/expand":
                if not arg:
                    print("Usage: /expand <relation>")
                    continue
                print(f"\n{await explorer.expand(arg)}")

            elif command == "/deselect":
                explorer.session.tap_canvas()
                print(f"\n{explorer.graph()}")

            elif command == "/close":
                explorer.session.close_details()
                print("Closed.")

            elif command == "/clear":
                explorer.session.clear_search()
                print(f"\n{format_search(explorer.session.state.search)}")

            elif command.startswith("/"):
                print("Unknown command. Type /help for available commands.")

            else:
                print(f"\n{await explorer.search(user_input)}")

    finally:
        await explorer.close()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nGoodbye!")
        sys.exit(0)
